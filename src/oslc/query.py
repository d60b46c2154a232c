import logging
from dataclasses import dataclass, fields
from typing import Any, Mapping, TYPE_CHECKING

from rdflib import Graph, URIRef
from urlobject import URLObject

from oslc.namespaces import rdfs
from oslc.rdfmapping.graph import project
from oslc.rdfmapping.resources import OSLCResource

if TYPE_CHECKING:
    from oslc.client import Client

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class QueryOptions:
    """Parameters of an OSLC query. Empty fields are left out of the request."""

    prefixes: str = ''
    """Prefix bindings for the names used in `select`, `where`, and `order_by`,
    e.g. "dcterms=<http://purl.org/dc/terms/>" """

    select: str = ''
    """Comma-separated property names to include, or "*" for all"""

    where: str = ''
    """Filter expression, e.g. "dcterms:identifier=3" """

    order_by: str = ''
    """Sort directive, e.g. "-dcterms:modified" """

    search_terms: str = ''
    """Full-text search terms"""

    PARAMETERS = {
        'prefixes': 'oslc.prefix',
        'select': 'oslc.select',
        'where': 'oslc.where',
        'order_by': 'oslc.orderBy',
        'search_terms': 'oslc.searchTerms',
    }

    @classmethod
    def from_dict(cls, options: Mapping[str, Any]) -> 'QueryOptions':
        """Build from a mapping. Accepts the camel case "orderBy" and
        "searchTerms" spellings as well. `None` values count as empty.
        Raises a `ValueError` for any unrecognized key."""
        aliases = {'orderBy': 'order_by', 'searchTerms': 'search_terms'}
        known = {f.name for f in fields(cls)}
        values = {}
        for key, value in options.items():
            name = aliases.get(key, key)
            if name not in known:
                raise ValueError(f'Unrecognized query option "{key}"')
            values[name] = value if value is not None else ''
        return cls(**values)

    def parameters(self) -> list[tuple[str, str]]:
        """The non-empty options, as `(parameter name, value)` pairs."""
        return [
            (parameter, str(getattr(self, name)))
            for name, parameter in self.PARAMETERS.items()
            if getattr(self, name)
        ]


def build_query_url(query_base: str, options: QueryOptions | Mapping[str, Any] = None) -> str:
    """Append the OSLC query parameters for the non-empty `options` to the
    `query_base` URL. If no option is set, returns `query_base` unchanged.

    ```pycon
    >>> build_query_url('http://example.com/qb', {})
    'http://example.com/qb'
    ```
    """
    if options is None:
        options = QueryOptions()
    elif not isinstance(options, QueryOptions):
        options = QueryOptions.from_dict(options)
    parameters = options.parameters()
    if not parameters:
        return str(query_base)
    return str(URLObject(str(query_base)).add_query_params(parameters))


def result_members(graph: Graph) -> list[URIRef]:
    """Every object of an `rdfs:member` statement in a query result `graph`,
    once each, in document order."""
    members = []
    for member in graph.objects(None, rdfs.member):
        if member not in members:
            members.append(member)
    return members


def project_results(graph: Graph) -> list[OSLCResource]:
    """Project each query result member in `graph` into an `OSLCResource`.
    Members whose properties were not selected are returned with their
    URI only."""
    return [project(graph, member, OSLCResource(member)) for member in result_members(graph)]


def execute_query(client: 'Client', query_base: str, options: QueryOptions | Mapping[str, Any] = None) -> list[OSLCResource]:
    """Run an OSLC query against `query_base`, and return the matching
    resources in document order. An empty list means nothing matched."""
    url = build_query_url(query_base, options)
    logger.info(f'Querying {url}')
    graph = client.get_graph(url)
    results = project_results(graph)
    logger.info(f'Query returned {len(results)} result(s)')
    return results
