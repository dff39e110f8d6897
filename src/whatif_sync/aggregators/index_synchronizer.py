"""Index Synchronizer for discovering new archive entries."""

import logging
from dataclasses import dataclass

from schemas.article import Article
from schemas.results import SyncResult
from whatif_sync.clients import ClientError, ParseError, WhatIfClient
from whatif_sync.storage import DocumentStore, LegacyPreferences
from whatif_sync.transformers.markup import (
    ARCHIVE_IMAGE_CLASS,
    canonical_url,
    parse_document,
    select_class,
)

from .article_fetcher import ArticleFetcher

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ArchiveEntry:
    """A title/thumbnail pair from the archive listing.

    Attributes:
        title: Article title
        thumbnail: Absolute thumbnail URL
    """

    title: str
    thumbnail: str


def parse_archive(markup: str, base_url: str) -> list[ArchiveEntry]:
    """Extract the archive entries in listing order.

    The n-th title heading pairs with the n-th archive image.

    Raises:
        ParseError: If the listing has no titles or too few thumbnails
    """
    doc = parse_document(markup, url="/archive/")
    titles = doc.xpath("//h1")
    thumbnails = [e for e in select_class(doc, ARCHIVE_IMAGE_CLASS) if e.tag == "img"]

    if not titles:
        raise ParseError("Archive listing contains no titles", url="/archive/")
    if len(thumbnails) < len(titles):
        raise ParseError(
            f"Archive listing has {len(titles)} titles but only "
            f"{len(thumbnails)} thumbnails",
            url="/archive/",
        )

    return [
        ArchiveEntry(
            title=title.text_content().strip(),
            thumbnail=canonical_url(image.get("src", ""), base_url),
        )
        for title, image in zip(titles, thumbnails)
    ]


def new_articles(entries: list[ArchiveEntry], known_count: int) -> list[Article]:
    """Build records for the entries past the ones already known.

    The archive only ever grows at the end, so entry n (1-based) is
    article n and everything up to known_count is already stored.
    """
    return [
        Article(number=number, title=entry.title, thumbnail=entry.thumbnail)
        for number, entry in enumerate(entries, start=1)
        if number > known_count
    ]


def migrate_legacy_flags(
    articles: list[Article], preferences: LegacyPreferences
) -> list[Article]:
    """Copy legacy read/favorite flags onto freshly created records."""
    return [
        article.model_copy(
            update={
                "read": preferences.check_read(article.number),
                "favorite": preferences.check_favorite(article.number),
            }
        )
        for article in articles
    ]


class IndexSynchronizer:
    """Reconciles the remote archive listing with the document store.

    Example:
        synchronizer = IndexSynchronizer(client, store, fetcher, preferences)
        result = await synchronizer.synchronize()
    """

    def __init__(
        self,
        client: WhatIfClient,
        store: DocumentStore,
        fetcher: ArticleFetcher,
        preferences: LegacyPreferences,
        offline_mode: bool = False,
    ):
        """Initialize the synchronizer.

        Args:
            client: Client for the archive site
            store: Record store receiving new articles
            fetcher: Fetcher used to download new articles in offline mode
            preferences: Legacy flags applied on the first synchronization
            offline_mode: Download every new article while synchronizing
        """
        self.client = client
        self.store = store
        self.fetcher = fetcher
        self.preferences = preferences
        self.offline_mode = offline_mode

    async def synchronize(self) -> SyncResult:
        """Insert the archive entries the store does not know yet.

        Failures leave the store untouched and are reported in the result.
        """
        try:
            markup = await self.client.fetch_archive()
            entries = parse_archive(markup, self.client.base_url)
        except ClientError as e:
            logger.error(f"Archive synchronization failed: {e}")
            return SyncResult(status="failed", error=str(e))

        known_count = self.store.count()
        first_run = known_count == 0

        if len(entries) < known_count:
            logger.warning(
                f"Archive lists {len(entries)} articles but {known_count} are stored"
            )

        articles = new_articles(entries, known_count)
        if first_run:
            articles = migrate_legacy_flags(articles, self.preferences)
            logger.info(f"Migrated legacy flags for {len(articles)} articles")

        if self.offline_mode:
            for article in articles:
                await self.fetcher.fetch_article(article.number)

        inserted = self.store.insert(articles)
        logger.info(f"Archive synchronized: {len(inserted)} new articles")
        return SyncResult(new_articles=inserted, migrated_legacy_flags=first_run)
