"""Exceptions raised while talking to the archive site.

NetworkError covers everything that keeps a resource from arriving
(unreachable host, timeouts, non-2xx statuses). ParseError covers pages that
arrive but do not have the expected structure.
"""


class ClientError(Exception):
    """Base exception for all client errors."""

    def __init__(self, message: str, url: str | None = None):
        self.message = message
        self.url = url
        super().__init__(message)


class NetworkError(ClientError):
    """Raised when a resource cannot be retrieved from the archive."""

    pass


class ConnectionError(NetworkError):
    """Raised when the archive host is unreachable or keeps timing out."""

    pass


class APIError(NetworkError):
    """Raised when the archive answers with a non-2xx status."""

    def __init__(self, message: str, status_code: int, url: str | None = None):
        self.status_code = status_code
        super().__init__(message, url=url)


class RateLimitError(APIError):
    """Raised on 429 responses."""

    def __init__(self, message: str = "Rate limit exceeded", url: str | None = None):
        super().__init__(message, status_code=429, url=url)


class NotFoundError(APIError):
    """Raised on 404 responses, e.g. for an article number not published yet."""

    def __init__(self, message: str = "Resource not found", url: str | None = None):
        super().__init__(message, status_code=404, url=url)


class ParseError(ClientError):
    """Raised when a fetched page does not have the expected structure."""

    pass
