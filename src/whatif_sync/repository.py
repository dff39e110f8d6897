"""Article repository tying synchronization, offline storage and rendering together."""

import asyncio
import logging
from collections.abc import AsyncIterator, Callable
from typing import Protocol

from schemas.article import Article, LoadedArticle
from schemas.progress import ProgressStatus
from schemas.results import FetchResult, SyncResult
from schemas.settings import ReaderSettings
from whatif_sync.aggregators import (
    ArticleFetcher,
    BatchDownloader,
    IndexSynchronizer,
)
from whatif_sync.clients import ClientError, WhatIfClient
from whatif_sync.storage import (
    ArticleUnavailableError,
    AssetCache,
    DocumentStore,
    LegacyPreferences,
    NoLegacyPreferences,
)
from whatif_sync.transformers import DocumentTransformer, canonical_url, parse_document
from whatif_sync.transformers.markup import ARCHIVE_IMAGE_CLASS, select_class

logger = logging.getLogger(__name__)


class ThreadLookup(Protocol):
    """Finds the discussion thread of an article by its title."""

    async def search(self, title: str) -> str | None: ...


class ArticleRepository:
    """Entry point for everything the reader does with archive articles.

    Example:
        settings = ReaderSettings.load(Path("settings.json"))
        async with WhatIfClient(settings.client_config()) as client:
            repository = ArticleRepository(settings, client, JsonDocumentStore(path))
            await repository.update_database()
            loaded = await repository.load_article(157)
    """

    def __init__(
        self,
        settings: ReaderSettings,
        client: WhatIfClient,
        store: DocumentStore,
        preferences: LegacyPreferences | None = None,
        thread_lookup: ThreadLookup | None = None,
    ):
        """Initialize the repository.

        Args:
            settings: Reader settings (offline mode, theme, storage root)
            client: Client for the archive site
            store: Record store of article metadata
            preferences: Legacy flags migrated on the first synchronization
            thread_lookup: Optional discussion-thread search service
        """
        self.settings = settings
        self.client = client
        self.store = store
        self.thread_lookup = thread_lookup
        self.asset_cache = AssetCache(settings.offline_root)
        self.fetcher = ArticleFetcher(client, self.asset_cache)
        self.synchronizer = IndexSynchronizer(
            client,
            store,
            self.fetcher,
            preferences or NoLegacyPreferences(),
            offline_mode=settings.offline_mode,
        )
        self.transformer = DocumentTransformer(
            self.asset_cache,
            base_url=settings.base_url,
            mathjax_url=settings.mathjax_url,
        )
        self.batch_downloader = BatchDownloader(settings.max_concurrency)

    def articles(self) -> list[Article]:
        return self.store.articles()

    def subscribe(self, listener: Callable[[list[Article]], None]) -> Callable[[], None]:
        return self.store.subscribe(listener)

    async def update_database(self) -> SyncResult:
        return await self.synchronizer.synchronize()

    async def get_discussion_thread(self, article: Article) -> str | None:
        if self.thread_lookup is None:
            return None
        return await self.thread_lookup.search(article.title)

    def set_favorite(self, number: int, favorite: bool) -> None:
        self.store.set_favorite(number, favorite)

    def set_read(self, number: int, read: bool) -> None:
        self.store.set_read(number, read)

    def set_all_read(self) -> None:
        self.store.set_all_read(True)

    def set_all_unread(self) -> None:
        self.store.set_all_read(False)

    def search_articles(self, query: str) -> list[Article]:
        return self.store.search(query)

    async def load_article(self, number: int) -> LoadedArticle | None:
        """Load an article for reading and mark it read.

        Returns:
            The rendered article, or None for an unknown number

        Raises:
            ArticleUnavailableError: In offline mode, when the article was
                never downloaded or its cached copy is empty
            ClientError: When online and the page cannot be fetched
        """
        article = self.store.get(number)
        if article is None:
            return None

        offline_mode = self.settings.offline_mode
        if offline_mode:
            if not self.asset_cache.has_document(number):
                raise ArticleUnavailableError(number)
            raw_document = await asyncio.to_thread(self.asset_cache.read_document, number)
            if not raw_document.strip():
                raise ArticleUnavailableError(
                    number, f"Offline copy of article {number} is empty"
                )
        else:
            raw_document = await self.client.fetch(number)

        self.store.set_read(number, True)
        article.read = True

        return self.transformer.transform(
            number, article, raw_document, offline_mode, self.settings.theme
        )

    async def download_article(self, number: int) -> FetchResult:
        return await self.fetcher.fetch_article(number)

    async def download_all_articles(self) -> AsyncIterator[ProgressStatus]:
        """Synchronize, then download every known article.

        Yields:
            Progress after each processed article
        """
        await self.update_database()

        numbers = [article.number for article in self.store.articles()]
        async for status in self.batch_downloader.run(
            numbers,
            self.fetcher.fetch_article,
            describe=lambda n: f"article {n}",
        ):
            yield status

    async def download_archive_images(self) -> AsyncIterator[ProgressStatus]:
        """Download the archive thumbnails to the overview directory.

        Yields:
            Progress after each processed thumbnail
        """
        try:
            markup = await self.client.fetch_archive()
            doc = parse_document(markup, url=self.client.ARCHIVE_PATH)
        except ClientError as e:
            logger.error(f"While downloading archive images: {e}")
            return

        urls = [
            canonical_url(element.get("src", ""), self.client.base_url)
            for element in select_class(doc, ARCHIVE_IMAGE_CLASS)
        ]

        async def download(item: tuple[int, str]) -> None:
            index, url = item
            data = await self.client.fetch_image(url)
            await asyncio.to_thread(self.asset_cache.store_overview_image, index, data)

        async for status in self.batch_downloader.run(
            list(enumerate(urls, start=1)),
            download,
            describe=lambda item: f"archive image {item[0]} ({item[1]})",
        ):
            yield status

    async def delete_all_offline_articles(self) -> None:
        await asyncio.to_thread(self.asset_cache.delete_all)
