from enum import Enum
from typing import Mapping, Any, Optional

from requests import PreparedRequest, Response
from requests.auth import AuthBase, HTTPBasicAuth
from requests_jwtauth import HTTPBearerAuth
from urlobject import URLObject

AUTH_CHALLENGE_HEADER = 'X-com-ibm-team-repository-web-auth-msg'
"""Response header a Jazz server uses to challenge for form authentication"""

AUTH_CHALLENGE_VALUE = 'authrequired'

LOGIN_PATH_SEGMENT = 'j_security_check'
"""Path segment appended to the server URL to post form credentials to"""

DEFAULT_MAX_LOGIN_ATTEMPTS = 3


class ClientCertAuth(AuthBase):
    def __init__(self, cert: str, key: str):
        self.cert = cert
        self.key = key

    def __call__(self, request: PreparedRequest) -> PreparedRequest:
        request.cert = (self.cert, self.key)
        return request


def get_authenticator(config: Mapping[str, Any]) -> Optional[AuthBase]:
    """Build a session-level authenticator from the server configuration, for
    servers that sit behind token, certificate, or basic authentication. Form
    login credentials (`USERNAME` and `PASSWORD`) are handled separately by
    `FormLogin`, so they are only used for basic authentication when
    `BASIC_AUTH` is set."""
    if 'AUTH_TOKEN' in config:
        return HTTPBearerAuth(token=config['AUTH_TOKEN'])
    elif 'CLIENT_CERT' in config and 'CLIENT_KEY' in config:
        return ClientCertAuth(
            cert=config['CLIENT_CERT'],
            key=config['CLIENT_KEY'],
        )
    elif config.get('BASIC_AUTH') and 'USERNAME' in config and 'PASSWORD' in config:
        return HTTPBasicAuth(
            username=config['USERNAME'],
            password=config['PASSWORD'],
        )
    else:
        return None


def is_auth_challenge(response: Response) -> bool:
    """Whether `response` is a Jazz challenge for form authentication."""
    return response.headers.get(AUTH_CHALLENGE_HEADER) == AUTH_CHALLENGE_VALUE


class AuthState(Enum):
    UNAUTHENTICATED = 'unauthenticated'
    LOGGING_IN = 'logging in'
    RETRYING = 'retrying'
    AUTHENTICATED = 'authenticated'
    FAILED = 'failed'


class FormLogin:
    """Tracks the form authentication state of a single client session.

    A request that is answered with an authentication challenge moves the
    state to `LOGGING_IN`; once the credentials have been posted, the state
    is `RETRYING` until the original request is sent again. A successful
    retry ends in `AUTHENTICATED`; running out of attempts ends in `FAILED`.
    The attempt counter only lives as long as a single request, and is reset
    by `reset()` whenever the request finishes, by any means."""

    def __init__(self, server_url: str, username: str = None, password: str = None,
                 max_attempts: int = DEFAULT_MAX_LOGIN_ATTEMPTS):
        if max_attempts < 0:
            raise ValueError('max_attempts must not be negative')
        self.server_url = URLObject(server_url)
        self.username = username
        self.password = password
        self.max_attempts: int = max_attempts
        self.attempts: int = 0
        self.state: AuthState = AuthState.UNAUTHENTICATED

    @property
    def login_url(self) -> URLObject:
        """URL to POST the form credentials to, without the credentials."""
        return self.server_url.add_path_segment(LOGIN_PATH_SEGMENT)

    @property
    def has_credentials(self) -> bool:
        return self.username is not None and self.password is not None

    @property
    def can_retry(self) -> bool:
        return self.has_credentials and self.attempts < self.max_attempts

    def credentials(self) -> dict[str, str]:
        """Login form fields. Jazz servers expect these as query parameters
        of the login request."""
        return {'j_username': self.username, 'j_password': self.password}

    def challenged(self):
        self.attempts += 1
        self.state = AuthState.LOGGING_IN

    def logged_in(self):
        self.state = AuthState.RETRYING

    def succeeded(self):
        self.state = AuthState.AUTHENTICATED

    def failed(self):
        self.state = AuthState.FAILED

    def reset(self):
        self.attempts = 0
        if self.state in (AuthState.LOGGING_IN, AuthState.RETRYING):
            # interrupted in the middle of a login; we no longer know if the session cookie is valid
            self.state = AuthState.UNAUTHENTICATED

    def forget(self):
        """Discard the credentials and return to the initial state."""
        self.username = None
        self.password = None
        self.attempts = 0
        self.state = AuthState.UNAUTHENTICATED
