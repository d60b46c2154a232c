import logging
import threading
from http import HTTPStatus
from typing import Optional, NamedTuple

import requests
from rdflib import Graph
from requests import Response, Session
from requests.auth import AuthBase
from urlobject import URLObject

from oslc.client.auth import FormLogin, is_auth_challenge, DEFAULT_MAX_LOGIN_ATTEMPTS
from oslc.exceptions import ClientError, NetworkError, AuthenticationError
from oslc.rdfmapping.graph import parse_graph

logger = logging.getLogger(__name__)

RDF_XML = 'application/rdf+xml'
OSLC_CORE_VERSION = '2.0'


class TypedText(NamedTuple):
    """Data object combining a string value and its media type,
    expressed as a MIME type string.

    ```pycon
    >>> rdf_data = TypedText('application/rdf+xml', '<rdf:RDF/>')
    >>> rdf_data
    TypedText(media_type='application/rdf+xml', value='<rdf:RDF/>')
    ```

    Supports `str()`, `len()`, and `bool()`. Returns the string value, the
    length of the string value, and the boolean cast of the string value,
    respectively.
    """

    media_type: str
    """MIME type, e.g. "application/rdf+xml" or "text/turtle" """

    value: str
    """string value"""

    def __str__(self):
        return self.value

    def __bool__(self):
        return bool(self.value)

    def __len__(self):
        return len(self.value)


class Endpoint:
    """Conceptual entry point for an OSLC server, e.g. a Jazz application
    such as `https://jazz.example.com:9443/rm`."""

    def __init__(self, url: str):
        self.url = URLObject(str(url).rstrip('/'))

    def __str__(self):
        return str(self.url)

    @property
    def rootservices_url(self) -> str:
        """The Jazz root services document, the entry point for OSLC discovery."""
        return str(self.url.add_path_segment('rootservices'))


class SessionHeaderAttribute:
    """Descriptor that maps an attribute to a session header name. Requires
    the instance to have a `session` attribute with a `headers` attribute whose
    value is a mapping that supports the methods `get()` and `update()`, plus
    the `del` operator. For example:

    ```python
    from requests import Session

    class Foo:
        ua_string = SessionHeaderAttribute('User-Agent')

        def __init__(self):
            self.session = Session()

    foo = Foo()
    foo.ua_string = 'MyClient/1.0.0'
    assert foo.session.headers['User-Agent'] == 'MyClient/1.0.0'

    del foo.ua_string
    assert 'User-Agent' not in foo.session.headers
    ```
    """

    def __init__(self, header_name: str):
        self.header_name = header_name
        """The HTTP header name"""

    def __set_name__(self, owner, name):
        self.name = name

    def __get__(self, instance, owner):
        if instance is None:
            return self
        return instance.session.headers.get(self.header_name, None)

    def __set__(self, instance, value):
        if value is not None:
            instance.session.headers.update({self.header_name: str(value)})

    def __delete__(self, instance):
        try:
            del instance.session.headers[self.header_name]
        except KeyError:
            pass


class Client:
    """HTTP client for reading linked-data documents from an OSLC server.
    Transparently answers Jazz form authentication challenges."""
    ua_string = SessionHeaderAttribute('User-Agent')
    """`User-Agent` header value"""
    accept = SessionHeaderAttribute('Accept')
    """`Accept` header value; defaults to RDF/XML"""
    oslc_core_version = SessionHeaderAttribute('OSLC-Core-Version')
    """`OSLC-Core-Version` header value; defaults to "2.0" """
    session: Session
    """Underlying Requests library
    [Session object](https://requests.readthedocs.io/en/latest/user/advanced/#session-objects),
    or a subclass thereof. Its cookie jar holds the server's session cookie
    once a form login has succeeded."""

    def __init__(
        self,
        endpoint: Endpoint,
        username: str = None,
        password: str = None,
        auth: AuthBase = None,
        server_cert: str = None,
        verify: bool = True,
        ua_string: str = None,
        timeout: float = None,
        max_login_attempts: int = DEFAULT_MAX_LOGIN_ATTEMPTS,
        session: Session = None,
    ):
        self.endpoint: Endpoint = endpoint
        """OSLC server endpoint"""

        self.timeout: Optional[float] = timeout
        """Timeout in seconds for each request, or `None` to wait forever"""

        self.login = FormLogin(
            server_url=self.endpoint.url,
            username=username,
            password=password,
            max_attempts=max_login_attempts,
        )
        """Form authentication state"""

        self._lock = threading.RLock()

        if session is None:
            # defaults to a basic requests.Session object
            self.session = Session()
        else:
            # otherwise, use the session object as is
            self.session = session

        self.session.auth = auth
        if server_cert is not None:
            self.session.verify = server_cert
        elif not verify:
            self.session.verify = False

        # set session-wide headers
        self.ua_string = ua_string
        self.accept = RDF_XML
        self.oslc_core_version = OSLC_CORE_VERSION

    def set_credentials(self, username: str, password: str):
        """Set the username and password used to answer form authentication
        challenges."""
        self.login.username = username
        self.login.password = password

    def request(self, method: str, url: str, **kwargs) -> Response:
        """Send an HTTP request using the configured `session`. Additional
        keyword arguments are passed to the underlying `session.request()`
        method.

        Raises a `NetworkError` if the request could not be sent or timed out."""
        logger.debug(f'{method} {url}')
        kwargs.setdefault('timeout', self.timeout)
        try:
            response = self.session.request(method, url, **kwargs)
        except (requests.exceptions.ConnectionError, requests.exceptions.Timeout) as e:
            message = ' '.join(str(arg) for arg in e.args)
            logger.error(message)
            raise NetworkError(f'Connection error: {message}') from e
        reason = response.reason or HTTPStatus(response.status_code).phrase
        logger.debug(f'{response.status_code} {reason}')
        return response

    def post(self, url: str, **kwargs) -> Response:
        """Send an HTTP POST request using the configured session."""
        return self.request('POST', url, **kwargs)

    def get(self, url: str, **kwargs) -> Response:
        """Send an HTTP GET request using the configured session."""
        return self.request('GET', url, **kwargs)

    def get_authenticated(self, url: str, **kwargs) -> Response:
        """Send an HTTP GET request, logging in and retrying whenever the server
        challenges for form authentication, up to the login attempt budget.

        Returns the final response, which is always a 200 OK.

        Raises an `AuthenticationError` if the server is still challenging when
        the budget is exhausted, or if no credentials are set, or if the login
        request itself fails. Raises a `ClientError` for any other non-200
        response."""
        with self._lock:
            try:
                while True:
                    response = self.get(url, **kwargs)
                    if not is_auth_challenge(response):
                        break
                    logger.debug(f'Server requires form authentication for {url}')
                    if not self.login.can_retry:
                        self.login.failed()
                        if not self.login.has_credentials:
                            raise AuthenticationError(f'Authentication required for {url}, but no credentials are set')
                        raise AuthenticationError(
                            f'Unable to authenticate as {self.login.username} after '
                            f'{self.login.attempts} login attempt(s)'
                        )
                    self.login.challenged()
                    self._post_credentials()
                    self.login.logged_in()
            finally:
                self.login.reset()

            if response.status_code != HTTPStatus.OK:
                logger.error(f'Unable to get {url}')
                raise ClientError(response)
            if self.login.has_credentials:
                self.login.succeeded()
            return response

    def _post_credentials(self):
        logger.info(f'Logging in to {self.login.login_url} as {self.login.username}')
        response = self.post(str(self.login.login_url), params=self.login.credentials())
        if not response.ok:
            self.login.failed()
            raise AuthenticationError(f'Login as {self.login.username} failed: {ClientError(response)}')

    def get_description(self, url: str) -> TypedText:
        """Get the linked-data representation of the resource at `url`, logging
        in if necessary.

        Returns a `TypedText` object containing the response body. If the response
        has no `Content-Type` header, assumes RDF/XML."""
        response = self.get_authenticated(url)
        return TypedText(response.headers.get('Content-Type', RDF_XML), response.text)

    def get_graph(self, url: str) -> Graph:
        """Get the `rdflib.Graph` object representing the resource at `url`.
        Relative URIs in the document are resolved against `url`.

        Raises a `GraphParseError` if the response cannot be parsed."""
        text = self.get_description(url)
        return parse_graph(text.value, base_uri=url, media_type=text.media_type)

    def is_reachable(self) -> bool:
        """Returns `True` if an HTTP GET request to the server's root services
        document yields a non-error response, and `False` otherwise."""
        try:
            return self.get(self.endpoint.rootservices_url).ok
        except NetworkError as e:
            logger.error(str(e))
            return False

    def test_connection(self):
        """Test the connection to the server using `is_reachable()`. If
        it returns false, raises a `NetworkError`."""
        logger.info(f"Testing connection to {self.endpoint.url}")
        if self.is_reachable():
            logger.info("Connection successful.")
        else:
            raise NetworkError(f'Unable to connect to {self.endpoint.url}')

    def logout(self):
        """Forget the credentials and discard any session cookies."""
        with self._lock:
            self.login.forget()
            self.session.cookies.clear()
