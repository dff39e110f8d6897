"""Transformers for rendering archive markup."""

from .document_transformer import DocumentTransformer, select_stylesheet
from .markup import canonical_url, inner_html, parse_document, select_class, serialize

__all__ = [
    "DocumentTransformer",
    "canonical_url",
    "inner_html",
    "parse_document",
    "select_class",
    "select_stylesheet",
    "serialize",
]
