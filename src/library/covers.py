"""Cover resolution: which image source represents a book."""

import re
from urllib.parse import parse_qs, quote, urlparse

from src.config import CoverConfig
from src.models.book import Book

DRIVE_HOSTS = ("drive.google.com", "docs.google.com")

_PATH_ID = re.compile(r"/d/([^/?#]+)")

_DEFAULT_COVERS = CoverConfig()


def extract_drive_file_id(url: str) -> str | None:
    """Pull the file identifier out of a Google Drive sharing link.

    Recognizes ``.../d/<id>/...`` paths and ``?id=<id>`` query parameters.

    Returns:
        The identifier, or None when the link is not a recognizable
        Drive link.
    """
    parsed = urlparse(url.strip())
    host = (parsed.hostname or "").lower()
    if not any(host == h or host.endswith("." + h) for h in DRIVE_HOSTS):
        return None

    match = _PATH_ID.search(parsed.path)
    if match:
        return match.group(1)

    ids = parse_qs(parsed.query).get("id")
    if ids and ids[0].strip():
        return ids[0].strip()
    return None


def placeholder_cover(title: str, covers: CoverConfig | None = None) -> str:
    """Generated placeholder image showing the book title."""
    template = (covers or _DEFAULT_COVERS).placeholder_template
    return template.format(text=quote(title, safe=""))


def resolve_cover_source(book: Book, covers: CoverConfig | None = None) -> str:
    """Pick the displayable image reference for a book.

    Priority: the external drive link (rewritten to a direct image URL
    when a file id can be extracted), then the local cover, then a
    title placeholder. Pure; the same book always yields the same value.

    Rendering layers should fall back to :func:`placeholder_cover` when
    the returned image fails to load.
    """
    covers = covers or _DEFAULT_COVERS

    if book.drive_url:
        file_id = extract_drive_file_id(book.drive_url)
        if file_id:
            return covers.drive_image_template.format(file_id=file_id)
        return book.drive_url

    if book.cover_url:
        return book.cover_url

    return placeholder_cover(book.title, covers)
