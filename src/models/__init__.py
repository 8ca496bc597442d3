"""Data models for the book library tracker."""

from src.models.book import (
    DEFAULT_AUTHOR,
    DEFAULT_TITLE,
    MAX_RATING,
    Book,
    ReadingStatus,
    now_ms,
)
from src.models.preview import BookMetadata, PreviewRecord

__all__ = [
    "DEFAULT_AUTHOR",
    "DEFAULT_TITLE",
    "MAX_RATING",
    "Book",
    "BookMetadata",
    "PreviewRecord",
    "ReadingStatus",
    "now_ms",
]
