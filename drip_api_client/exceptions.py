"""
Custom exception types for the Drip API client.

These exceptions allow callers to distinguish between invalid local
input, failures building or sending a request, and responses that
could not be decoded.  Validation problems reported by Drip itself are
not raised; they are returned in the ``errors`` list of the response.
"""


class DripError(Exception):
    """Base exception for all Drip client errors."""


class DripBadAPIKeyError(DripError, ValueError):
    """Raised when the client is constructed with an empty API key."""


class DripBadAccountIDError(DripError, ValueError):
    """Raised when the client is constructed with an empty account id."""


class DripIdentifierRequiredError(DripError, ValueError):
    """Raised when a subscriber id, email or tag argument is empty."""


class DripSerializationError(DripError):
    """Raised when a request body cannot be encoded as JSON."""


class DripRequestError(DripError):
    """Raised when a request cannot be prepared from its method and URL."""


class DripTransportError(DripError):
    """Raised when the HTTP request fails before a response is received."""


class DripDecodeError(DripError):
    """Raised when a JSON response body is malformed or has the wrong shape."""


class DripUnexpectedResponseError(DripError):
    """Raised when Drip answers with a body that is not JSON.

    This covers HTML error pages and rate limit pages.  The numeric
    status code and the raw body text are kept on the exception.
    """

    def __init__(self, status_code: int, body: str) -> None:
        super().__init__(f"StatusCode({status_code}) {body}")
        self.status_code = status_code
        self.body = body
