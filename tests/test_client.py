from unittest.mock import MagicMock

import httpretty
import pytest
from requests import Session
from requests.exceptions import ConnectionError, Timeout

from oslc.client import Client, Endpoint, TypedText
from oslc.client.auth import AuthState, AUTH_CHALLENGE_HEADER
from oslc.exceptions import AuthenticationError, ClientError, NetworkError, GraphParseError

DOCUMENT_URL = 'http://jazz.example.com/rm/oslc_rm/catalog'
LOGIN_URL = 'http://jazz.example.com/rm/j_security_check'
CHALLENGE = {AUTH_CHALLENGE_HEADER: 'authrequired'}
RDF_BODY = '<rdf:RDF xmlns:rdf="http://www.w3.org/1999/02/22-rdf-syntax-ns#"/>'


class MockOKResponse:
    ok = True
    status_code = 200
    reason = 'OK'
    headers = {}
    text = RDF_BODY


class MockNotFoundResponse:
    ok = False
    status_code = 404
    reason = 'Not Found'
    headers = {}


class MockNoReasonResponse:
    ok = False
    status_code = 500
    reason = None
    headers = {}


@pytest.fixture
def register_login():
    """Pytest fixture that uses HTTPretty to simulate the login form handler.
    Returns the list of query strings of the login requests it receives."""
    def _register_login(status: int = 200):
        received = []

        def _login(request, uri, response_headers):
            received.append(request.querystring)
            return [status, response_headers, '']

        httpretty.register_uri(httpretty.POST, LOGIN_URL, body=_login)
        return received
    return _register_login


def test_default_client_session(endpoint):
    client = Client(endpoint=endpoint)
    assert isinstance(client.session, Session)


class CustomSession(Session):
    pass


def test_custom_client_session(endpoint):
    session = CustomSession()
    client = Client(endpoint=endpoint, session=session)
    assert client.session is session


def test_session_headers(client):
    assert client.session.headers['Accept'] == 'application/rdf+xml'
    assert client.session.headers['OSLC-Core-Version'] == '2.0'


def test_user_agent(endpoint):
    client = Client(endpoint=endpoint, ua_string='oslc-client/1.0.0')
    assert client.session.headers['User-Agent'] == 'oslc-client/1.0.0'
    del client.ua_string
    assert 'User-Agent' not in client.session.headers


def test_verify_options(endpoint):
    assert Client(endpoint=endpoint, server_cert='/etc/ssl/ca.pem').session.verify == '/etc/ssl/ca.pem'
    assert Client(endpoint=endpoint, verify=False).session.verify is False
    assert Client(endpoint=endpoint).session.verify is True


def test_endpoint():
    endpoint = Endpoint(url='http://jazz.example.com/rm/')
    assert str(endpoint) == 'http://jazz.example.com/rm'
    assert endpoint.rootservices_url == 'http://jazz.example.com/rm/rootservices'


def test_typed_text():
    text = TypedText('application/rdf+xml', RDF_BODY)
    assert str(text) == RDF_BODY
    assert len(text) == len(RDF_BODY)
    assert text
    assert not TypedText('text/plain', '')


@httpretty.activate
def test_get_sends_oslc_headers(client):
    httpretty.register_uri(httpretty.GET, DOCUMENT_URL, body=RDF_BODY)
    client.get_description(DOCUMENT_URL)
    request = httpretty.last_request()
    assert request.headers['Accept'] == 'application/rdf+xml'
    assert request.headers['OSLC-Core-Version'] == '2.0'


@httpretty.activate
def test_no_challenge_no_login(client, register_login):
    login_requests = register_login()
    httpretty.register_uri(httpretty.GET, DOCUMENT_URL, body=RDF_BODY)
    assert client.get_authenticated(DOCUMENT_URL).status_code == 200
    assert login_requests == []


@httpretty.activate
def test_login_then_retry(client, register_login):
    login_requests = register_login()
    httpretty.register_uri(
        httpretty.GET,
        DOCUMENT_URL,
        responses=[
            httpretty.Response(body='', status=200, adding_headers=CHALLENGE),
            httpretty.Response(body=RDF_BODY, status=200),
        ],
    )
    response = client.get_authenticated(DOCUMENT_URL)
    assert response.text == RDF_BODY
    assert login_requests == [{'j_username': ['alice'], 'j_password': ['secret']}]
    assert client.login.state == AuthState.AUTHENTICATED
    assert client.login.attempts == 0


@pytest.mark.parametrize('max_login_attempts', [1, 2, 3, 5])
@httpretty.activate
def test_always_challenging_server(endpoint, register_login, max_login_attempts):
    login_requests = register_login()
    client = Client(endpoint=endpoint, username='alice', password='secret', max_login_attempts=max_login_attempts)
    httpretty.register_uri(httpretty.GET, DOCUMENT_URL, body='', adding_headers=CHALLENGE)
    with pytest.raises(AuthenticationError):
        client.get_authenticated(DOCUMENT_URL)
    assert len(login_requests) == max_login_attempts
    assert client.login.state == AuthState.FAILED
    assert client.login.attempts == 0


@httpretty.activate
def test_budget_is_per_request(endpoint, register_login):
    login_requests = register_login()
    client = Client(endpoint=endpoint, username='alice', password='secret', max_login_attempts=2)
    httpretty.register_uri(httpretty.GET, DOCUMENT_URL, body='', adding_headers=CHALLENGE)
    for _ in range(2):
        with pytest.raises(AuthenticationError):
            client.get_authenticated(DOCUMENT_URL)
    assert len(login_requests) == 4


@httpretty.activate
def test_challenge_without_credentials(endpoint, register_login):
    login_requests = register_login()
    client = Client(endpoint=endpoint)
    httpretty.register_uri(httpretty.GET, DOCUMENT_URL, body='', adding_headers=CHALLENGE)
    with pytest.raises(AuthenticationError):
        client.get_authenticated(DOCUMENT_URL)
    assert login_requests == []


@httpretty.activate
def test_failed_login_request(client):
    httpretty.register_uri(httpretty.GET, DOCUMENT_URL, body='', adding_headers=CHALLENGE)
    httpretty.register_uri(httpretty.POST, LOGIN_URL, status=403)
    with pytest.raises(AuthenticationError):
        client.get_authenticated(DOCUMENT_URL)
    assert client.login.state == AuthState.FAILED
    assert client.login.attempts == 0


def test_attempt_counter_reset_on_network_error(endpoint):
    session = MagicMock()
    challenge = MagicMock(status_code=200, headers=CHALLENGE)
    session.request.side_effect = [challenge, ConnectionError('connection refused')]
    client = Client(endpoint=endpoint, username='alice', password='secret', session=session)
    with pytest.raises(NetworkError):
        client.get_authenticated(DOCUMENT_URL)
    assert client.login.attempts == 0
    assert client.login.state == AuthState.UNAUTHENTICATED


def test_get_description_failed_response(monkeypatch_request, client):
    monkeypatch_request(MockNotFoundResponse)
    with pytest.raises(ClientError) as exc_info:
        client.get_description(DOCUMENT_URL)
    assert exc_info.value.status_code == 404
    assert str(exc_info.value) == '404 Not Found'


def test_client_error_default_reason(monkeypatch_request, client):
    monkeypatch_request(MockNoReasonResponse)
    with pytest.raises(ClientError) as exc_info:
        client.get_description(DOCUMENT_URL)
    assert str(exc_info.value) == '500 Internal Server Error'


def test_client_error_is_network_error(monkeypatch_request, client):
    monkeypatch_request(MockNotFoundResponse)
    with pytest.raises(NetworkError):
        client.get_description(DOCUMENT_URL)


def test_default_content_type(monkeypatch_request, client):
    monkeypatch_request(MockOKResponse)
    assert client.get_description(DOCUMENT_URL) == TypedText('application/rdf+xml', RDF_BODY)


@pytest.mark.parametrize('error', [ConnectionError('connection refused'), Timeout('timed out')])
def test_network_error(endpoint, error):
    session = MagicMock()
    session.request.side_effect = error
    client = Client(endpoint=endpoint, session=session)
    with pytest.raises(NetworkError) as exc_info:
        client.get(DOCUMENT_URL)
    assert str(exc_info.value).startswith('Connection error: ')
    assert exc_info.value.__cause__ is error


def test_timeout_is_passed_to_session(endpoint):
    session = MagicMock()
    session.request.return_value = MagicMock(status_code=200, reason='OK')
    client = Client(endpoint=endpoint, session=session, timeout=12.5)
    client.get(DOCUMENT_URL)
    session.request.assert_called_once_with('GET', DOCUMENT_URL, timeout=12.5)


@httpretty.activate
def test_get_graph(client):
    httpretty.register_uri(
        httpretty.GET,
        DOCUMENT_URL,
        body='<http://example.com/a> <http://purl.org/dc/terms/title> "A" .',
        adding_headers={'Content-Type': 'text/turtle; charset=UTF-8'},
    )
    graph = client.get_graph(DOCUMENT_URL)
    assert len(graph) == 1


@httpretty.activate
def test_get_graph_parse_error(client):
    httpretty.register_uri(
        httpretty.GET,
        DOCUMENT_URL,
        body='<html><body>Service unavailable</body></html>',
        adding_headers={'Content-Type': 'text/turtle'},
    )
    with pytest.raises(GraphParseError):
        client.get_graph(DOCUMENT_URL)


def test_unreachable(endpoint):
    session = MagicMock()
    session.request.side_effect = ConnectionError('connection refused')
    client = Client(endpoint=endpoint, session=session)
    assert not client.is_reachable()
    with pytest.raises(NetworkError):
        client.test_connection()


def test_logout(client):
    client.session.cookies.set('JSESSIONID', 'abc123')
    client.logout()
    assert not client.login.has_credentials
    assert len(client.session.cookies) == 0
