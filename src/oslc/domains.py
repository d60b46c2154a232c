import logging
from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Iterable, Iterator

from rdflib import URIRef

from oslc.exceptions import UnsupportedDomain
from oslc.namespaces import jd, oslc, oslc_cm, oslc_config, oslc_qm, oslc_qm1, oslc_rm, oslc_rm1

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Domain:
    """An OSLC domain, identified by its namespace URI, together with the
    predicates needed to discover its services."""

    uri: URIRef
    """Namespace URI identifying the domain"""

    catalog_predicate: URIRef
    """Predicate linking a root services document to the domain's catalog(s)"""

    query_capability_predicate: URIRef = oslc.queryCapability
    """Predicate linking a service to its query capabilities"""

    declares_domain: bool = False
    """Whether the catalog candidates are generic catalog entries that must
    each declare their `oslc:domain`, as opposed to a direct link to the
    domain's catalog"""

    name: str = None
    """Short name, e.g. "rm" """

    def __str__(self):
        return str(self.uri)


class DomainTable(Mapping):
    """Read-only mapping of domain URI to `Domain`. The table is validated
    once, when it is constructed.

    ```pycon
    >>> table = DomainTable([Domain(uri=oslc_rm[''], catalog_predicate=oslc_rm1.rmServiceProviders, name='rm')])

    >>> table['http://open-services.net/ns/rm#'].name
    'rm'

    >>> table.get_domain('rm').uri
    rdflib.term.URIRef('http://open-services.net/ns/rm#')
    ```

    Looking up an unregistered URI with `get_domain()` raises `UnsupportedDomain`.
    """

    def __init__(self, domains: Iterable[Domain]):
        table = {}
        for domain in domains:
            if not isinstance(domain.uri, URIRef):
                raise ValueError(f'Domain URI must be a URIRef: {domain.uri!r}')
            if not isinstance(domain.catalog_predicate, URIRef):
                raise ValueError(f'Catalog predicate for {domain} must be a URIRef')
            if not isinstance(domain.query_capability_predicate, URIRef):
                raise ValueError(f'Query capability predicate for {domain} must be a URIRef')
            if domain.uri in table:
                raise ValueError(f'Domain {domain} is registered more than once')
            table[domain.uri] = domain
        self._table = MappingProxyType(table)
        self._names = MappingProxyType({d.name: d for d in table.values() if d.name is not None})

    def __getitem__(self, key) -> Domain:
        return self._table[URIRef(key)]

    def __iter__(self) -> Iterator[URIRef]:
        return iter(self._table)

    def __len__(self) -> int:
        return len(self._table)

    def get_domain(self, key: str | Domain) -> Domain:
        """Look up a domain by its URI or its short name. Passing a `Domain`
        object checks that it is the registered one. Raises `UnsupportedDomain`
        if there is no match."""
        if isinstance(key, Domain):
            if self._table.get(key.uri) != key:
                raise UnsupportedDomain(key.uri)
            return key
        if key in self._names:
            return self._names[key]
        try:
            return self[key]
        except KeyError:
            logger.error(f'No domain registered for {key}')
            raise UnsupportedDomain(key)


RM = Domain(
    uri=URIRef(oslc_rm),
    catalog_predicate=oslc_rm1.rmServiceProviders,
    name='rm',
)
"""Requirements Management"""

CM = Domain(
    uri=URIRef(oslc_cm),
    catalog_predicate=jd.oslcCatalogs,
    declares_domain=True,
    name='cm',
)
"""Change Management; Jazz servers list inline `oslc:ServiceProviderCatalog`
entries under `jd:oslcCatalogs`, each declaring its `oslc:domain`"""

QM = Domain(
    uri=URIRef(oslc_qm),
    catalog_predicate=oslc_qm1.qmServiceProviders,
    name='qm',
)
"""Quality Management"""

CONFIG = Domain(
    uri=URIRef(oslc_config),
    catalog_predicate=oslc_config.configServiceProviders,
    name='config',
)
"""Configuration Management"""

DOMAINS = DomainTable([RM, CM, QM, CONFIG])
"""All registered domains"""


def get_domain(key: str | Domain) -> Domain:
    """Look up a domain in the default `DOMAINS` table."""
    return DOMAINS.get_domain(key)
