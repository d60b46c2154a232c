import logging
from typing import NamedTuple, Optional, Iterator

from rdflib import Graph, URIRef

from oslc.domains import Domain, DomainTable, DOMAINS
from oslc.namespaces import oslc

logger = logging.getLogger(__name__)


class CatalogEntry(NamedTuple):
    """A service provider catalog URI, tagged with the domain it serves.
    The domain is `None` when the root services document does not say."""
    uri: URIRef
    domain: Optional[URIRef]

    def __str__(self):
        return str(self.uri)


def resolve_catalog_uri(
        graph: Graph,
        root_uri: str,
        domain: str | Domain,
        domains: DomainTable = DOMAINS,
) -> Optional[URIRef]:
    """Find the service provider catalog for `domain` in a root services `graph`.

    Candidates are the objects of the domain's catalog predicate, with the root
    document URI as subject. A candidate that declares one or more `oslc:domain`
    values is only eligible if the requested domain is among them. A candidate
    without any such declaration is eligible only if the domain links directly
    to its catalog (as with the RM `rmServiceProviders` link), rather than
    through a list of generic catalog entries (as with the Jazz `oslcCatalogs`
    list).

    Returns the first eligible candidate, in graph order, or `None` if there is
    none. Raises `UnsupportedDomain` if `domain` is not in the `domains` table."""
    domain = domains.get_domain(domain)
    for candidate in graph.objects(URIRef(root_uri), domain.catalog_predicate):
        declared = set(graph.objects(candidate, oslc.domain))
        if declared:
            if domain.uri in declared:
                return candidate
        elif not domain.declares_domain:
            return candidate
    return None


class RootServices:
    """Parsed Jazz root services document, the starting point for discovering
    the OSLC services of a server."""

    def __init__(self, uri: str, graph: Graph):
        self.uri = URIRef(uri)
        """URI of the root services document"""
        self.graph = graph
        """Parsed root services document"""

    def __str__(self):
        return str(self.uri)

    def catalog_uri(self, domain: str | Domain, domains: DomainTable = DOMAINS) -> Optional[URIRef]:
        """URI of the service provider catalog for `domain`, or `None` if this
        server does not provide one. See `resolve_catalog_uri()`."""
        catalog_uri = resolve_catalog_uri(self.graph, self.uri, domain, domains)
        if catalog_uri is None:
            logger.warning(f'No catalog for domain {domain} in {self.uri}')
        else:
            logger.debug(f'Catalog for domain {domain} is {catalog_uri}')
        return catalog_uri

    def catalog_entries(self, domains: DomainTable = DOMAINS) -> Iterator[CatalogEntry]:
        """Every catalog linked from this document through the catalog
        predicate of a registered domain. Each entry is tagged with the domain
        it declares, or for undeclared direct links, with the domain whose
        predicate links to it."""
        seen = set()
        for domain in domains.values():
            for candidate in self.graph.objects(self.uri, domain.catalog_predicate):
                declared = list(self.graph.objects(candidate, oslc.domain))
                if not declared:
                    declared = [None if domain.declares_domain else domain.uri]
                for declared_domain in declared:
                    entry = CatalogEntry(candidate, declared_domain)
                    if entry not in seen:
                        seen.add(entry)
                        yield entry
