"""Article Fetcher for storing articles and their illustrations offline."""

import asyncio
import logging

import lxml.html

from schemas.results import FetchResult
from whatif_sync.clients import ClientError, WhatIfClient
from whatif_sync.storage import AssetCache, DecodeError
from whatif_sync.transformers.markup import (
    ILLUSTRATION_CLASS,
    canonical_url,
    parse_document,
    select_class,
)

logger = logging.getLogger(__name__)


class ArticleFetcher:
    """Downloads an article page and its illustrations into the asset cache.

    Illustrations are stored as PNG under their 1-based position among the
    page's illustration elements. A failing illustration is logged and
    skipped; it never aborts the rest of the article.

    Example:
        async with WhatIfClient(config) as client:
            fetcher = ArticleFetcher(client, AssetCache(root))
            result = await fetcher.fetch_article(157)
    """

    def __init__(self, client: WhatIfClient, asset_cache: AssetCache):
        self.client = client
        self.asset_cache = asset_cache

    async def fetch_article(self, number: int) -> FetchResult:
        """Download one article for offline reading.

        Args:
            number: Article number

        Returns:
            FetchResult describing what was stored
        """
        try:
            markup = await self.client.fetch(number)
            await asyncio.to_thread(self.asset_cache.store_document, number, markup)
            doc = parse_document(markup, url=self.client.article_path(number))
        except (ClientError, OSError) as e:
            logger.error(f"At article {number}: {e}")
            return FetchResult(number=number, status="failed", error=str(e))

        result = FetchResult(number=number)
        for index, element in enumerate(select_class(doc, ILLUSTRATION_CLASS), start=1):
            if await self._fetch_illustration(number, index, element):
                result.images_saved.append(index)
            else:
                result.images_failed.append(index)

        if result.images_failed:
            result.status = "partial"

        logger.info(
            f"Downloaded article {number}: {len(result.images_saved)} images stored, "
            f"{len(result.images_failed)} failed"
        )
        return result

    async def _fetch_illustration(
        self, number: int, index: int, element: lxml.html.HtmlElement
    ) -> bool:
        try:
            url = canonical_url(element.get("src", ""), self.client.base_url)
            data = await self.client.fetch_image(url)
            await asyncio.to_thread(self.asset_cache.store_image, number, index, data)
        except (ClientError, DecodeError, OSError) as e:
            source = lxml.html.tostring(element, encoding="unicode", with_tail=False)
            logger.error(
                f"While downloading image #{index} for article {number} "
                f"element {source}: {e}"
            )
            return False
        return True
