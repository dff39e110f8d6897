"""Network clients for the What If? archive."""

from .client import Client
from .exceptions import (
    APIError,
    ClientError,
    ConnectionError,
    NetworkError,
    NotFoundError,
    ParseError,
    RateLimitError,
)
from .whatif_client import WhatIfClient

__all__ = [
    "Client",
    "WhatIfClient",
    "ClientError",
    "ConnectionError",
    "NetworkError",
    "APIError",
    "RateLimitError",
    "NotFoundError",
    "ParseError",
]
