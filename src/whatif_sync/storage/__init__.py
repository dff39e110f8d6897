"""Local storage for article records and offline assets."""

from .asset_cache import AssetCache, encode_png
from .document_store import DocumentStore, JsonDocumentStore
from .exceptions import ArticleUnavailableError, DecodeError, StorageError
from .preferences import JsonLegacyPreferences, LegacyPreferences, NoLegacyPreferences

__all__ = [
    "AssetCache",
    "ArticleUnavailableError",
    "DecodeError",
    "DocumentStore",
    "JsonDocumentStore",
    "JsonLegacyPreferences",
    "LegacyPreferences",
    "NoLegacyPreferences",
    "StorageError",
    "encode_png",
]
