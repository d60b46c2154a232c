from typing import Callable

import httpretty
import pytest

from oslc.client import Endpoint, Client
from oslc.context import OSLCContext
from oslc.server import OSLCServer

SERVER_URL = 'http://jazz.example.com/rm'
ROOTSERVICES_URL = 'http://jazz.example.com/rm/rootservices'
CATALOG_URL = 'http://jazz.example.com/rm/oslc_rm/catalog'
PROVIDER_URL = 'http://jazz.example.com/rm/oslc_rm/_acme/services.xml'
QUERY_BASE = 'http://jazz.example.com/rm/views/_acme'


@pytest.fixture
def endpoint():
    return Endpoint(url=SERVER_URL)


@pytest.fixture
def client(endpoint) -> Client:
    return Client(endpoint=endpoint, username='alice', password='secret')


@pytest.fixture
def server(client) -> OSLCServer:
    return OSLCServer(server_url=client.endpoint, domain='rm', client=client)


@pytest.fixture
def register_document(shared_datadir) -> Callable[..., None]:
    """Pytest fixture that uses HTTPretty to serve a file from the shared data
    directory in response to GET requests for a URI."""
    def _register_document(uri: str, filename: str, content_type: str = 'application/rdf+xml'):
        httpretty.register_uri(
            method=httpretty.GET,
            uri=uri,
            status=200,
            body=(shared_datadir / filename).read_text(),
            adding_headers={
                'Content-Type': content_type,
            },
        )
    return _register_document


@pytest.fixture
def simulate_server(register_document) -> Callable[[], None]:
    """Pytest fixture that uses HTTPretty to simulate an RM server with a single
    project area, "Acme Project", that does not require a login."""
    def _simulate_server(results: str = 'requirements.rdf'):
        register_document(ROOTSERVICES_URL, 'rootservices.rdf')
        register_document(CATALOG_URL, 'catalog.rdf')
        register_document(PROVIDER_URL, 'provider.rdf')
        register_document(QUERY_BASE, results)
    return _simulate_server


@pytest.fixture
def oslc_context() -> OSLCContext:
    return OSLCContext(
        config={
            'SERVER': {
                'URL': SERVER_URL,
                'DOMAIN': 'rm',
                'USERNAME': 'alice',
                'PASSWORD': 'secret',
                'PROJECT': 'Acme Project',
            }
        }
    )
