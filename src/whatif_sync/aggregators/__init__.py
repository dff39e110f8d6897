"""Aggregators for gathering archive content into local storage."""

from .article_fetcher import ArticleFetcher
from .batch_downloader import BatchDownloader, ProgressTracker
from .index_synchronizer import (
    ArchiveEntry,
    IndexSynchronizer,
    migrate_legacy_flags,
    new_articles,
    parse_archive,
)

__all__ = [
    "ArchiveEntry",
    "ArticleFetcher",
    "BatchDownloader",
    "IndexSynchronizer",
    "ProgressTracker",
    "migrate_legacy_flags",
    "new_articles",
    "parse_archive",
]
