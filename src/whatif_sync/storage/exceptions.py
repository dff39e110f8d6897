"""Exceptions raised by local storage."""


class StorageError(Exception):
    """Base exception for local storage errors."""

    def __init__(self, message: str, *args, **kwargs):
        self.message = message
        super().__init__(message, *args, **kwargs)


class DecodeError(StorageError):
    """Raised when downloaded image bytes cannot be decoded."""

    pass


class ArticleUnavailableError(StorageError):
    """Raised when an offline read finds no cached document."""

    def __init__(self, number: int, message: str | None = None):
        self.number = number
        super().__init__(message or f"Article {number} is not available offline")
