"""Schema definitions for whatif-sync."""

from .article import Article, LoadedArticle
from .progress import ProgressStatus
from .results import FetchResult, SyncResult
from .settings import ReaderSettings, ThemeSettings

__all__ = [
    "Article",
    "FetchResult",
    "LoadedArticle",
    "ProgressStatus",
    "ReaderSettings",
    "SyncResult",
    "ThemeSettings",
]
