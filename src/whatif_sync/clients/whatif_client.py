"""Client for the What If? archive site."""

import logging

from .client import Client

logger = logging.getLogger(__name__)


class WhatIfClient(Client):
    """Client for https://what-if.xkcd.com.

    Fetches the archive listing, individual article pages and illustration
    bytes. Pages are returned as markup text; parsing belongs to the callers.

    Example:
        config = {"base_url": "https://what-if.xkcd.com"}
        async with WhatIfClient(config) as client:
            page = await client.fetch(157)
    """

    ARCHIVE_PATH = "/archive/"

    async def fetch(self, number: int) -> str:
        """Fetch the page of a single article.

        Args:
            number: 1-based article number

        Returns:
            The article page markup

        Raises:
            NotFoundError: If the article does not exist
            APIError: If the site returns a non-2xx response
            ConnectionError: If the network connection fails
        """
        response = await self.get(self.article_path(number))
        return response.text

    async def fetch_archive(self) -> str:
        """Fetch the archive listing page."""
        response = await self.get(self.ARCHIVE_PATH)
        return response.text

    async def fetch_image(self, url: str) -> bytes:
        """Fetch raw image bytes from an absolute URL."""
        response = await self.get(url)
        logger.debug(f"Fetched {len(response.content)} bytes from {url}")
        return response.content

    def article_path(self, number: int) -> str:
        return f"/{number}/"
