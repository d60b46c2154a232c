import logging
import threading
from typing import Optional, Any, Mapping

from oslc.catalog import ServiceProviderCatalog
from oslc.client import Client, Endpoint
from oslc.domains import Domain, DomainTable, DOMAINS
from oslc.exceptions import NotFoundError, NotConnectedError
from oslc.namespaces import prefix_declaration
from oslc.provider import ServiceProvider
from oslc.query import QueryOptions, execute_query
from oslc.rdfmapping.resources import OSLCResource
from oslc.rootservices import RootServices

logger = logging.getLogger(__name__)

DEFAULT_RESOURCE_TYPE = 'Requirement'


class OSLCServer:
    """A session with one OSLC server, for one domain.

    Resolution happens in steps, each depending on the previous one:

    1. `connect()` reads the server's root services document, finds the
       service provider catalog for the domain, and fetches it (logging in
       if the server asks for it)
    2. `use()` finds a service provider in the catalog by its title, and
       loads it
    3. `query()` and `read()` run OSLC queries against the service provider's
       query capabilities

    Steps are serialized; a session can be shared between threads, but runs
    only one step at a time.
    """

    def __init__(
            self,
            server_url: str | Endpoint,
            domain: str | Domain,
            client: Client = None,
            domains: DomainTable = DOMAINS,
            **client_kwargs,
    ):
        self.endpoint = server_url if isinstance(server_url, Endpoint) else Endpoint(server_url)
        """OSLC server endpoint"""
        self.domain: Domain = domains.get_domain(domain)
        """The OSLC domain of this session"""
        self.domains = domains
        self.client: Client = client or Client(endpoint=self.endpoint, **client_kwargs)
        """HTTP client, holding the credentials and session cookies"""
        self.root_services: Optional[RootServices] = None
        self.catalog: Optional[ServiceProviderCatalog] = None
        self.provider_container_name: Optional[str] = None
        self.service_provider: Optional[ServiceProvider] = None
        self._lock = threading.Lock()

    def __str__(self):
        return f'{self.endpoint} ({self.domain.name or self.domain.uri})'

    @property
    def is_connected(self) -> bool:
        return self.catalog is not None

    def connect(self, username: str = None, password: str = None) -> 'OSLCServer':
        """Connect to the server with the given credentials, and load the
        domain's service provider catalog. Returns this session.

        Raises `NotFoundError` if the server has no catalog for the domain."""
        with self._lock:
            if username is not None:
                self.client.set_credentials(username, password)

            # a failed connect must not leave an earlier catalog or provider in use
            self.root_services = None
            self.catalog = None
            self.provider_container_name = None
            self.service_provider = None

            # the root services document does not require authentication
            rootservices_url = self.endpoint.rootservices_url
            logger.info(f'Reading root services from {rootservices_url}')
            self.root_services = RootServices(rootservices_url, self.client.get_graph(rootservices_url))

            catalog_uri = self.root_services.catalog_uri(self.domain, self.domains)
            if catalog_uri is None:
                raise NotFoundError(f'No {self.domain} catalog at {self.root_services}')

            logger.info(f'Reading service provider catalog from {catalog_uri}')
            self.catalog = ServiceProviderCatalog(catalog_uri, self.client.get_graph(str(catalog_uri)))
            return self

    def use(self, provider_container_name: str) -> ServiceProvider:
        """Make the service provider (e.g., a project area) whose title contains
        `provider_container_name` the current one, and return it.

        Raises `NotConnectedError` if `connect()` has not been called, and
        `NotFoundError` if there is no such service provider."""
        with self._lock:
            if self.catalog is None:
                raise NotConnectedError('Must connect() before use()')

            provider_uri = self.catalog.find_service_provider(provider_container_name)
            if provider_uri is None:
                raise NotFoundError(f'Service provider "{provider_container_name}" not found in {self.catalog}')

            self.service_provider = ServiceProvider.load(provider_uri, self.client, self.domain)
            self.provider_container_name = provider_container_name
            logger.info(f'Using service provider "{provider_container_name}" at {provider_uri}')
            return self.service_provider

    def query(
            self,
            options: QueryOptions | Mapping[str, Any] = None,
            resource_type: str = DEFAULT_RESOURCE_TYPE,
    ) -> list[OSLCResource]:
        """Run an OSLC query for resources of `resource_type` (a regular
        expression matched against the resource type URIs of the query
        capabilities) in the current service provider.

        Raises `NotConnectedError` if no service provider is in use, and
        `QueryCapabilityNotFound` or `NoMatchingResourceType` if the service
        provider cannot query that resource type."""
        with self._lock:
            if self.service_provider is None:
                raise NotConnectedError('Must use() a service provider before querying')
            query_base = self.service_provider.query_base(resource_type)
            return execute_query(self.client, query_base, options)

    def read(self, identifier: str, resource_type: str = DEFAULT_RESOURCE_TYPE) -> Optional[OSLCResource]:
        """Get all the properties of the resource with the given
        `dcterms:identifier`. Returns `None` if there is no such resource."""
        results = self.query(
            QueryOptions(
                prefixes=prefix_declaration('dcterms'),
                select='*',
                where=f'dcterms:identifier={identifier}',
            ),
            resource_type=resource_type,
        )
        if not results:
            logger.warning(f'No resource with identifier {identifier}')
            return None
        logger.info(f'Query for resource {identifier} returned {len(results)} result(s)')
        return results[0]

    def disconnect(self):
        """Forget the credentials, session cookies, and everything resolved so far."""
        with self._lock:
            self.client.logout()
            self.root_services = None
            self.catalog = None
            self.provider_container_name = None
            self.service_provider = None
            logger.info(f'Disconnected from {self.endpoint}')
