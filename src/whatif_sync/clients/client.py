"""Base client for reading pages and images from the archive host."""

import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Any

import httpx

from .exceptions import (
    APIError,
    ConnectionError,
    NotFoundError,
    RateLimitError,
)

logger = logging.getLogger(__name__)


class Client(ABC):
    """Base class for asynchronous clients of the archive host.

    Wraps a lazily created httpx.AsyncClient. Every request failure surfaces
    as a NetworkError subclass, so callers downloading many pages and images
    only need to handle one exception family per resource.

    Config keys:
        base_url (required): Base URL for all requests
        timeout: Request timeout in seconds (default: 30)
        retry_attempts: Number of retry attempts for transient failures (default: 3)
        retry_delay: Delay between retries in seconds (default: 1)
        headers: Additional headers to include in requests
        transport: Optional httpx transport (used to fake the network in tests)
    """

    def __init__(self, config: dict):
        if "base_url" not in config:
            raise ValueError("config must include 'base_url'")

        self._config = config
        self._client: httpx.AsyncClient | None = None

    @property
    def base_url(self) -> str:
        return str(self._config["base_url"]).rstrip("/")

    @property
    def timeout(self) -> float:
        return float(self._config.get("timeout", 30))

    @property
    def retry_attempts(self) -> int:
        return int(self._config.get("retry_attempts", 3))

    @property
    def retry_delay(self) -> float:
        return float(self._config.get("retry_delay", 1))

    @property
    def headers(self) -> dict[str, str]:
        return dict(self._config.get("headers", {}))

    @property
    def client(self) -> httpx.AsyncClient:
        """Lazy-initialized httpx client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                headers=self.headers,
                follow_redirects=True,
                transport=self._config.get("transport"),
            )
        return self._client

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
        return False

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    def _handle_response(self, response: httpx.Response) -> httpx.Response:
        """Map non-2xx statuses of page and image responses to exceptions.

        Raises:
            NotFoundError: For 404 responses
            RateLimitError: For 429 responses
            APIError: For other non-2xx responses
        """
        if response.is_success:
            return response

        status_code = response.status_code

        if status_code == 404:
            raise NotFoundError(f"Resource not found: {response.url}", url=str(response.url))
        elif status_code == 429:
            raise RateLimitError(f"Rate limit exceeded: {response.url}", url=str(response.url))
        else:
            raise APIError(
                f"HTTP {status_code} from {response.url}",
                status_code=status_code,
                url=str(response.url),
            )

    async def _request(
        self,
        method: str,
        path: str,
        **kwargs,
    ) -> httpx.Response:
        """Make a request, retrying connect errors and timeouts.

        Raises:
            ConnectionError: If retries run out or the request fails otherwise
            APIError: If the archive answers with a non-2xx status
        """
        last_exception: Exception | None = None

        for attempt in range(self.retry_attempts):
            try:
                response = await self.client.request(method, path, **kwargs)
                return self._handle_response(response)
            except httpx.ConnectError as e:
                last_exception = e
                logger.warning(
                    f"Connection error (attempt {attempt + 1}/{self.retry_attempts}): {e}"
                )
                if attempt < self.retry_attempts - 1:
                    await asyncio.sleep(self.retry_delay)
            except httpx.TimeoutException as e:
                last_exception = e
                logger.warning(
                    f"Timeout (attempt {attempt + 1}/{self.retry_attempts}): {e}"
                )
                if attempt < self.retry_attempts - 1:
                    await asyncio.sleep(self.retry_delay)
            except httpx.TransportError as e:
                raise ConnectionError(f"Transport error for {path}: {e}", url=path) from e
            except httpx.RequestError as e:
                # redirect loops and undecodable bodies
                raise ConnectionError(f"Request failed for {path}: {e}", url=path) from e

        msg = f"Connection failed after {self.retry_attempts} attempts"
        raise ConnectionError(msg, url=path) from last_exception

    async def get(self, path: str, **kwargs) -> httpx.Response:
        """GET an archive path (/archive/, /157/) or an absolute image URL."""
        return await self._request("GET", path, **kwargs)

    @abstractmethod
    async def fetch(self, *args, **kwargs) -> Any:
        """Fetch one archive resource. Must be implemented by subclasses."""
        pass
