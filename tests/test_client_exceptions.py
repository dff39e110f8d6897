"""Tests for client and storage exception classes."""

from whatif_sync.clients import (
    APIError,
    ClientError,
    ConnectionError,
    NetworkError,
    NotFoundError,
    ParseError,
    RateLimitError,
)
from whatif_sync.storage import ArticleUnavailableError, DecodeError, StorageError


class TestClientExceptions:
    """Tests for the network error family."""

    def test_client_error_stores_message(self):
        """ClientError stores the error message."""
        error = ClientError("Something went wrong")

        assert error.message == "Something went wrong"
        assert str(error) == "Something went wrong"

    def test_network_error_family(self):
        """Connection and status errors are both NetworkErrors."""
        assert isinstance(ConnectionError("test"), NetworkError)
        assert isinstance(APIError("test", status_code=500), NetworkError)
        assert isinstance(NetworkError("test"), ClientError)
        assert not isinstance(ParseError("test"), NetworkError)

    def test_api_error_status_code(self):
        """APIError stores message and status code."""
        error = APIError("Server error", status_code=500)

        assert error.message == "Server error"
        assert error.status_code == 500

    def test_status_specific_errors(self):
        """NotFoundError and RateLimitError carry fixed status codes."""
        assert NotFoundError().status_code == 404
        assert RateLimitError().status_code == 429
        assert isinstance(NotFoundError(), APIError)

    def test_status_errors_record_url(self):
        """Status errors keep the URL that failed."""
        error = NotFoundError("gone", url="https://what-if.xkcd.com/9999/")

        assert error.url == "https://what-if.xkcd.com/9999/"
        assert error.status_code == 404

    def test_parse_error_url(self):
        """ParseError records the page it came from."""
        error = ParseError("No titles", url="/archive/")

        assert error.url == "/archive/"
        assert isinstance(error, ClientError)


class TestStorageExceptions:
    """Tests for local storage errors."""

    def test_decode_error(self):
        """DecodeError is a StorageError."""
        assert isinstance(DecodeError("bad bytes"), StorageError)

    def test_article_unavailable_default_message(self):
        """ArticleUnavailableError names the article."""
        error = ArticleUnavailableError(42)

        assert error.number == 42
        assert "42" in error.message
        assert isinstance(error, StorageError)
