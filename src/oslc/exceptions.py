from http import HTTPStatus

from requests import Response


class OSLCError(Exception):
    """Base class for all errors raised by this package."""


class ConfigError(OSLCError):
    def __init__(self, message):
        self.message = message

    def __str__(self):
        return self.message


class UnsupportedDomain(OSLCError):
    """Raised when a domain is not registered in the domain table."""
    def __init__(self, domain_uri: str, *args):
        super().__init__(*args)
        self.domain_uri = domain_uri

    def __str__(self):
        return f'Unsupported OSLC domain: {self.domain_uri}'


class NotFoundError(OSLCError):
    """Raised when a resolution step of a session finds no candidates."""


class NotConnectedError(OSLCError):
    """Raised when a session operation is attempted before the step it depends on."""


class NetworkError(OSLCError):
    """Raised on transport failures, and (as `ClientError`) on error responses
    that are not an authentication challenge."""


class ClientError(NetworkError):
    """Raised when a `Client` receives an HTTP error response."""
    def __init__(self, response: Response, *args):
        super().__init__(*args)

        self.response: Response = response
        """The Requests `Response` object from the failed request."""

        self.status_code = self.response.status_code
        """The numeric HTTP status code (e.g., 404) for the failed request."""

        self.reason = self.response.reason or HTTPStatus(self.status_code).phrase
        """The reason phrase (e.g., "Not Found") for the failed request. If
        the `response` does not have a reason code, use the standard status
        phrase from the built-in `HTTPStatus` enumeration corresponding to
        the `status_code`."""

    def __str__(self):
        return f'{self.status_code} {self.reason}'


class AuthenticationError(OSLCError):
    """Raised when the server keeps challenging for form authentication after
    the login attempt budget is used up, or when the login request itself fails."""


class QueryCapabilityNotFound(OSLCError):
    """Raised when a service provider declares no usable query capability."""


class NoMatchingResourceType(OSLCError):
    """Raised when no query capability of a service provider handles the
    requested resource type."""


class CyclicGraphError(OSLCError):
    """Raised when graph projection reaches a subject that is already being projected."""
    def __init__(self, subject, *args):
        super().__init__(*args)
        self.subject = subject

    def __str__(self):
        return f'Cycle detected in graph at {self.subject}'


class GraphParseError(OSLCError):
    """Raised when a response body cannot be parsed as RDF."""
