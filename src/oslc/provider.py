import logging
import re
from dataclasses import dataclass
from typing import Optional, TYPE_CHECKING

from rdflib import Graph, URIRef

from oslc.domains import Domain
from oslc.exceptions import QueryCapabilityNotFound, NoMatchingResourceType
from oslc.namespaces import dcterms, oslc
from oslc.rdfmapping.graph import project
from oslc.rdfmapping.resources import OSLCResource

if TYPE_CHECKING:
    from oslc.client import Client

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class QueryCapability:
    """A query endpoint declared by a service provider."""

    query_base: Optional[URIRef]
    """URI to send OSLC queries to"""

    resource_types: tuple[URIRef, ...] = ()
    """Types of resources this capability can query"""

    title: Optional[str] = None

    @property
    def is_usable(self) -> bool:
        """Whether this capability has both a query base and at least one resource type."""
        return self.query_base is not None and len(self.resource_types) > 0

    def handles(self, resource_type_pattern: str) -> bool:
        """Whether one of the resource type URIs matches the regular expression
        `resource_type_pattern` anywhere (e.g., "Requirement" matches
        `http://open-services.net/ns/rm#Requirement`)."""
        return any(re.search(resource_type_pattern, str(rt)) for rt in self.resource_types)


def find_query_capabilities(graph: Graph, provider_uri: URIRef, predicate: URIRef = oslc.queryCapability) -> list[QueryCapability]:
    """All query capabilities of the services of the provider, in graph order."""
    capabilities = []
    for service in graph.objects(provider_uri, oslc.service):
        for node in graph.objects(service, predicate):
            title = graph.value(node, dcterms.title)
            capabilities.append(QueryCapability(
                query_base=graph.value(node, oslc.queryBase),
                resource_types=tuple(graph.objects(node, oslc.resourceType)),
                title=str(title) if title is not None else None,
            ))
    return capabilities


class ServiceProvider:
    """Fully loaded OSLC service provider. Use `ServiceProvider.load()` to
    fetch one from a server; the object is only handed out once its properties
    and query capabilities are populated."""

    def __init__(
            self,
            uri: str,
            graph: Graph,
            properties: OSLCResource,
            query_capabilities: list[QueryCapability],
    ):
        self.uri = URIRef(uri)
        """URI of the service provider"""
        self.graph = graph
        """Parsed service provider document"""
        self.properties = properties
        """Projection of the service provider document"""
        self.query_capabilities: tuple[QueryCapability, ...] = tuple(query_capabilities)
        """Declared query capabilities, in declaration order"""

    def __str__(self):
        return str(self.uri)

    @property
    def title(self) -> Optional[str]:
        titles = self.properties.values_of('title')
        return titles[0] if titles else None

    @classmethod
    def from_graph(cls, uri: str, graph: Graph, domain: Domain = None) -> 'ServiceProvider':
        """Build a `ServiceProvider` from an already parsed document."""
        uri = URIRef(uri)
        predicate = domain.query_capability_predicate if domain is not None else oslc.queryCapability
        return cls(
            uri=uri,
            graph=graph,
            properties=project(graph, uri, OSLCResource(uri)),
            query_capabilities=find_query_capabilities(graph, uri, predicate),
        )

    @classmethod
    def load(cls, uri: str, client: 'Client', domain: Domain = None) -> 'ServiceProvider':
        """Fetch the service provider at `uri` using `client`, and return it
        once it is fully populated."""
        logger.info(f'Loading service provider {uri}')
        provider = cls.from_graph(uri, client.get_graph(str(uri)), domain)
        logger.debug(f'Service provider {uri} has {len(provider.query_capabilities)} query capabilities')
        return provider

    def query_base(self, resource_type_pattern: str) -> URIRef:
        """Query base URI of the first query capability (in declaration order)
        that handles resources whose type matches `resource_type_pattern`.

        Raises `QueryCapabilityNotFound` if this provider has no query capability
        with both a query base and resource types, and `NoMatchingResourceType`
        if it has some, but none handles the type, or if `resource_type_pattern`
        is not a valid regular expression."""
        try:
            re.compile(resource_type_pattern)
        except re.error as e:
            raise NoMatchingResourceType(f'Invalid resource type pattern "{resource_type_pattern}": {e}') from e
        candidates = [qc for qc in self.query_capabilities if qc.is_usable]
        if not candidates:
            raise QueryCapabilityNotFound(f'Service provider {self.uri} has no query capabilities')
        for capability in candidates:
            if capability.handles(resource_type_pattern):
                return capability.query_base
        raise NoMatchingResourceType(
            f'No query capability of service provider {self.uri} handles "{resource_type_pattern}" resources'
        )
