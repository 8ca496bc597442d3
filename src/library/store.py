"""Library Store: the authoritative, write-through book collection."""

import json
import logging
from collections import Counter
from collections.abc import Callable, Iterable, Iterator
from typing import Any

from src.library.normalize import IncompleteRecordError, normalize
from src.library.status import next_status
from src.models.book import MAX_RATING, Book, ReadingStatus
from src.storage.kv import KeyValueStore

logger = logging.getLogger(__name__)

SCHEMA_VERSION = 1

Listener = Callable[[list[Book]], None]


def sort_books(books: Iterable[Book]) -> list[Book]:
    """Most recently added first; stable for equal timestamps."""
    return sorted(books, key=lambda b: b.date_added, reverse=True)


class LibraryStore:
    """In-memory book collection kept in lockstep with a key-value store.

    Every mutation is expressed as a new list handed to :meth:`replace_all`,
    which sorts, persists, and only then swaps the in-memory state. A
    failed write therefore leaves memory untouched.

    Args:
        kv: Persistence port holding the serialized snapshot.
        key: Slot name for the snapshot.
    """

    def __init__(self, kv: KeyValueStore, key: str = "library_v1") -> None:
        self._kv = kv
        self._key = key
        self._books: list[Book] = []
        self._listeners: list[Listener] = []

    # -- persistence -------------------------------------------------------

    def load(self) -> list[Book]:
        """Read the persisted snapshot into memory.

        Missing or corrupt snapshots yield an empty collection; corrupt
        data is logged and discarded. Accepts both the versioned envelope
        and the legacy bare array.

        Returns:
            The loaded books in display order.
        """
        raw = self._kv.get(self._key)
        self._books = [] if raw is None else self._decode_snapshot(raw)
        return list(self._books)

    def replace_all(self, books: Iterable[Book]) -> list[Book]:
        """Sort, persist, and install a new collection.

        Raises:
            ValueError: If two books share an id.
        """
        ordered = sort_books(books)
        ids = Counter(b.id for b in ordered)
        duplicates = sorted(i for i, n in ids.items() if n > 1)
        if duplicates:
            raise ValueError(f"Duplicate book ids: {', '.join(duplicates)}")

        self._kv.set(self._key, self._encode_snapshot(ordered))
        self._books = ordered
        self._notify()
        return list(ordered)

    # -- mutations ---------------------------------------------------------

    def add(self, book: Book) -> Book:
        """Add a book.

        Raises:
            ValueError: If a book with the same id already exists.
        """
        if book.id in self:
            raise ValueError(f"Book with id {book.id} already exists.")
        self.replace_all([book, *self._books])
        return book

    def create_book(self, **fields: Any) -> Book:
        """Normalize a directly entered book as brand-new and add it."""
        return self.add(normalize(fields, fresh=True))

    def update(self, book: Book) -> Book:
        """Replace the stored book with the same id.

        The stored dateAdded is kept; it never changes after creation.

        Raises:
            KeyError: If no book has that id.
        """
        current = self._require(book.id)
        updated = book.with_changes(date_added=current.date_added)
        self.replace_all(updated if b.id == book.id else b for b in self._books)
        return updated

    def delete(self, book_id: str) -> bool:
        """Remove a book. Returns False if it was not present."""
        if book_id not in self:
            return False
        self.replace_all(b for b in self._books if b.id != book_id)
        return True

    def set_status(self, book_id: str, status: ReadingStatus | str) -> Book:
        """Set a book's reading status.

        Raises:
            KeyError: If no book has that id.
            ValueError: If ``status`` is not a known reading status.
        """
        return self._change(book_id, status=ReadingStatus(status))

    def toggle_status(self, book_id: str) -> Book:
        """Advance a book to the next status in the reading cycle."""
        return self._change(book_id, status=next_status(self._require(book_id).status))

    def set_rating(self, book_id: str, rating: int) -> Book:
        """Set a 0-5 rating; 0 means unrated.

        Raises:
            KeyError: If no book has that id.
            ValueError: If ``rating`` is outside 0..5.
        """
        if isinstance(rating, bool) or not isinstance(rating, int) or not 0 <= rating <= MAX_RATING:
            raise ValueError(f"Rating must be an integer between 0 and {MAX_RATING}, got {rating!r}")
        return self._change(book_id, rating=rating)

    # -- reads -------------------------------------------------------------

    @property
    def books(self) -> list[Book]:
        return list(self._books)

    def get(self, book_id: str) -> Book | None:
        return next((b for b in self._books if b.id == book_id), None)

    def by_status(self, status: ReadingStatus | str) -> list[Book]:
        wanted = ReadingStatus(status)
        return [b for b in self._books if b.status == wanted]

    def by_tag(self, tag: str) -> list[Book]:
        wanted = tag.strip().casefold()
        return [b for b in self._books if any(t.casefold() == wanted for t in b.tags)]

    def tags(self) -> list[str]:
        """Distinct tags in display order of first appearance."""
        seen: dict[str, None] = {}
        for book in self._books:
            for tag in book.tags:
                seen.setdefault(tag, None)
        return list(seen)

    def counts(self) -> dict[ReadingStatus, int]:
        counts = {status: 0 for status in ReadingStatus}
        for book in self._books:
            counts[book.status] += 1
        return counts

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a change listener. Returns a function that unsubscribes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def __len__(self) -> int:
        return len(self._books)

    def __iter__(self) -> Iterator[Book]:
        return iter(list(self._books))

    def __contains__(self, book_id: object) -> bool:
        return any(b.id == book_id for b in self._books)

    # -- internals ---------------------------------------------------------

    def _require(self, book_id: str) -> Book:
        book = self.get(book_id)
        if book is None:
            raise KeyError(book_id)
        return book

    def _change(self, book_id: str, **changes: Any) -> Book:
        updated = self._require(book_id).with_changes(**changes)
        self.replace_all(updated if b.id == book_id else b for b in self._books)
        return updated

    def _notify(self) -> None:
        snapshot = list(self._books)
        for listener in list(self._listeners):
            try:
                listener(snapshot)
            except Exception:
                # The mutation is already committed; a listener cannot undo it
                logger.exception("Library change listener %r failed", listener)

    def _encode_snapshot(self, books: list[Book]) -> str:
        return json.dumps(
            {"schemaVersion": SCHEMA_VERSION, "books": [b.to_document() for b in books]},
            ensure_ascii=False,
        )

    def _decode_snapshot(self, raw: str) -> list[Book]:
        try:
            data = json.loads(raw)
        except (ValueError, RecursionError):
            logger.exception("Discarding corrupt library snapshot under key %s", self._key)
            return []

        if isinstance(data, list):
            records = data  # legacy bare array, rewritten on next save
        elif isinstance(data, dict) and data.get("schemaVersion") == SCHEMA_VERSION:
            records = data.get("books")
        else:
            logger.error("Discarding library snapshot with unsupported shape under key %s", self._key)
            return []

        if not isinstance(records, list):
            logger.error("Discarding library snapshot without a book list under key %s", self._key)
            return []

        books: list[Book] = []
        seen: set[str] = set()
        for record in records:
            if not isinstance(record, dict):
                logger.warning("Skipping non-object record in snapshot: %r", record)
                continue
            try:
                book = normalize(record)
            except IncompleteRecordError:
                logger.warning("Skipping snapshot record without title or author")
                continue
            if book.id in seen:
                logger.warning("Skipping duplicate book id %s in snapshot", book.id)
                continue
            seen.add(book.id)
            books.append(book)
        return sort_books(books)
