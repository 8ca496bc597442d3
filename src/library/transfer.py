"""Import and export of the library as a portable JSON document."""

import json
import logging
from pathlib import Path

from pydantic import BaseModel

from src.library.normalize import IncompleteRecordError, normalize
from src.library.store import LibraryStore
from src.models.book import Book, now_ms

logger = logging.getLogger(__name__)


class LibraryImportError(ValueError):
    """Raised when an import document is rejected. No state is changed."""


class ImportResult(BaseModel):
    """Outcome of a successful import."""

    found: int = 0  # elements in the document
    valid: int = 0  # elements that survived normalization
    added: int = 0  # records actually added
    duplicates: int = 0  # dropped because the id already existed
    invalid: int = 0  # dropped for missing title and author, or not an object


def export_library(store: LibraryStore) -> str:
    """Serialize the whole collection, in display order, as pretty JSON."""
    return json.dumps([b.to_document() for b in store.books], indent=2, ensure_ascii=False)


def export_filename(timestamp: int | None = None) -> str:
    return f"library_{timestamp if timestamp is not None else now_ms()}.json"


def export_to_path(store: LibraryStore, directory: str | Path) -> Path:
    """Write an export file into ``directory`` and return its path."""
    target = Path(directory) / export_filename()
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(export_library(store), encoding="utf-8")
    return target


def import_library(store: LibraryStore, document: str | bytes) -> ImportResult:
    """Merge an exported document into the store.

    Records whose id already exists locally are dropped: local edits
    always win over re-imported copies. The merged collection is
    committed in a single write.

    Args:
        store: Target library.
        document: JSON text whose top level is an array of book objects.

    Returns:
        Counts of what was found, added, and skipped.

    Raises:
        LibraryImportError: If the document does not parse, is not an
            array, or contains records but none that are valid.
    """
    try:
        data = json.loads(document)
    except (ValueError, RecursionError) as exc:
        raise LibraryImportError(f"Import document is not valid JSON: {exc}") from exc

    if not isinstance(data, list):
        raise LibraryImportError(
            f"Import document must be a list of books, got {type(data).__name__}"
        )

    result = ImportResult(found=len(data))
    known = {b.id for b in store.books}
    incoming: list[Book] = []
    now = now_ms()

    for index, record in enumerate(data):
        if not isinstance(record, dict):
            logger.warning("Skipping import element %d: not an object", index)
            result.invalid += 1
            continue
        try:
            book = normalize(record, now=now)
        except IncompleteRecordError:
            logger.warning("Skipping import element %d: no title or author", index)
            result.invalid += 1
            continue
        result.valid += 1
        if book.id in known:
            result.duplicates += 1
            continue
        known.add(book.id)
        incoming.append(book)

    if result.found and not result.valid:
        raise LibraryImportError("No valid books found in import document")

    result.added = len(incoming)
    if incoming:
        store.replace_all([*store.books, *incoming])
    logger.info(
        "Imported %d of %d books (%d duplicates, %d invalid)",
        result.added,
        result.found,
        result.duplicates,
        result.invalid,
    )
    return result


def import_from_path(store: LibraryStore, path: str | Path) -> ImportResult:
    """Import a JSON export file from disk.

    Raises:
        FileNotFoundError: If ``path`` does not exist.
        LibraryImportError: If the file is rejected.
    """
    file_path = Path(path)
    if not file_path.exists():
        raise FileNotFoundError(f"File not found: {file_path}")
    return import_library(store, file_path.read_bytes())
