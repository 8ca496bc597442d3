"""Contract for the generative-AI collaborator."""

from typing import Protocol

from src.models.preview import BookMetadata

BIO_UNAVAILABLE = "Unavailable."


class BookServiceError(RuntimeError):
    """Raised when book metadata cannot be fetched."""


class BookInfoService(Protocol):
    """Metadata, cover art, and author biographies for the tracker."""

    def fetch_book_metadata(self, query: str) -> BookMetadata:
        """Look up a book. Raises BookServiceError on any failure."""
        ...

    def generate_cover_image(self, title: str, author: str, style: str) -> str:
        """Generate a cover as a data URL; empty string when none was produced."""
        ...

    def fetch_author_bio(self, name: str) -> str:
        """Short literary biography, or BIO_UNAVAILABLE on failure."""
        ...
