"""Normalization of externally or locally sourced book records.

Every path that creates a Book (manual entry, AI preview commit, import,
snapshot load) funnels raw mappings through :func:`normalize`, which
fills defaults and resolves the drive/cover exclusivity rule.
"""

import logging
from collections.abc import Mapping
from typing import Any
from uuid import uuid4

from src.models.book import (
    DEFAULT_AUTHOR,
    DEFAULT_TITLE,
    MAX_RATING,
    Book,
    ReadingStatus,
    now_ms,
)

logger = logging.getLogger(__name__)

# Alternate spellings accepted for each canonical key, in lookup order
# after the canonical key itself.
FIELD_SYNONYMS: dict[str, tuple[str, ...]] = {
    "id": ("ID", "uuid"),
    "title": ("titulo", "título", "Titulo", "Título", "name"),
    "author": ("autor", "Autor", "authors"),
    "year": ("año", "anio", "ano", "published", "publishedDate"),
    "summary": ("resumen", "sinopsis", "description", "descripcion", "descripción"),
    "tags": ("etiquetas", "categorias", "categorías", "genres", "categories"),
    "coverUrl": ("cover_url", "portada", "cover", "coverImage"),
    "driveUrl": ("drive_url", "enlaceDrive", "driveLink"),
    "status": ("estado",),
    "rating": ("valoracion", "valoración", "puntuacion", "puntuación"),
    "dateAdded": ("date_added", "fechaAgregado", "fecha"),
}


class IncompleteRecordError(ValueError):
    """Raised when a record has neither a title nor an author."""


def canonicalize_keys(raw: Mapping[str, Any]) -> dict[str, Any]:
    """Map synonym keys onto canonical ones.

    The canonical key wins when both it and a synonym are present; an
    empty canonical value does not shadow a populated synonym.
    """
    result: dict[str, Any] = {}
    for canonical, synonyms in FIELD_SYNONYMS.items():
        for key in (canonical, *synonyms):
            value = raw.get(key)
            if not _is_blank(value):
                result[canonical] = value
                break
    return result


def has_identity(raw: Mapping[str, Any]) -> bool:
    """Minimal validity: a record needs a title or an author."""
    fields = canonicalize_keys(raw)
    return bool(_as_text(fields.get("title")) or _as_author(fields.get("author")))


def normalize(raw: Mapping[str, Any], *, fresh: bool = False, now: int | None = None) -> Book:
    """Build a canonical Book from a loosely shaped mapping.

    Args:
        raw: Record using canonical, camelCase, snake_case, or localized keys.
        fresh: True for brand-new books (manual entry, AI preview commit).
            Fresh books always start as want-to-read with no rating.
        now: Timestamp (epoch ms) used when dateAdded is missing.

    Returns:
        A validated Book.

    Raises:
        IncompleteRecordError: If the record has neither title nor author.
    """
    if not has_identity(raw):
        raise IncompleteRecordError("Record has neither a title nor an author")

    fields = canonicalize_keys(raw)
    drive_url = _as_text(fields.get("driveUrl"))

    return Book(
        id=_as_text(fields.get("id")) or str(uuid4()),
        title=_as_text(fields.get("title")) or DEFAULT_TITLE,
        author=_as_author(fields.get("author")) or DEFAULT_AUTHOR,
        year=_as_text(fields.get("year")),
        summary=_as_text(fields.get("summary")),
        tags=_as_tags(fields.get("tags")),
        cover_url="" if drive_url else _as_text(fields.get("coverUrl")),
        drive_url=drive_url,
        status=ReadingStatus.WANT_TO_READ if fresh else parse_status(fields.get("status")),
        rating=0 if fresh else _as_rating(fields.get("rating")),
        date_added=_as_timestamp(fields.get("dateAdded"), now if now is not None else now_ms()),
    )


def parse_status(value: Any) -> ReadingStatus:
    """Return the matching status, or want-to-read for missing/unknown values."""
    if isinstance(value, ReadingStatus):
        return value
    if isinstance(value, str):
        try:
            return ReadingStatus(value.strip().lower())
        except ValueError:
            logger.debug("Unknown status %r, defaulting to want-to-read", value)
    return ReadingStatus.WANT_TO_READ


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, tuple, dict)):
        return not value
    return False


def _as_text(value: Any) -> str:
    if value is None or isinstance(value, (dict, list, tuple, bool)):
        return ""
    return str(value).strip()


def _as_author(value: Any) -> str:
    if isinstance(value, (list, tuple)):
        return ", ".join(_as_text(v) for v in value if _as_text(v))
    return _as_text(value)


def _as_tags(value: Any) -> list[str]:
    if isinstance(value, str):
        return [part.strip() for part in value.split(",") if part.strip()]
    if isinstance(value, (list, tuple)):
        return [_as_text(v) for v in value if _as_text(v)]
    return []


def _as_rating(value: Any) -> int:
    if isinstance(value, bool):
        return 0
    try:
        rating = int(float(value))
    except (TypeError, ValueError, OverflowError):
        return 0
    return min(max(rating, 0), MAX_RATING)


def _as_timestamp(value: Any, default: int) -> int:
    if isinstance(value, bool):
        return default
    try:
        timestamp = int(float(value))
    except (TypeError, ValueError, OverflowError):
        return default
    return timestamp if timestamp >= 0 else default
