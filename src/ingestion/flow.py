"""AI-assisted ingestion: stage a preview, then commit or discard it."""

import logging
from enum import Enum

from src.library.normalize import normalize
from src.library.store import LibraryStore
from src.models.book import Book
from src.models.preview import PreviewRecord
from src.services.base import BookInfoService

logger = logging.getLogger(__name__)


class FlowState(str, Enum):
    IDLE = "idle"
    SEARCHING = "searching"
    PREVIEW = "preview"


class FlowBusyError(RuntimeError):
    """Raised when a request is submitted while another is in flight."""


class NoPreviewError(RuntimeError):
    """Raised when an operation needs a staged preview and there is none."""


class IngestionFlow:
    """Builds a candidate book from service output before it enters the store.

    Only one request runs at a time. Nothing reaches the store until
    :meth:`commit`, which adds a fully normalized book in one step.

    Args:
        service: Metadata and cover-image provider.
        store: Library that receives committed books.
    """

    def __init__(self, service: BookInfoService, store: LibraryStore) -> None:
        self._service = service
        self._store = store
        self._preview: PreviewRecord | None = None
        self._busy = False

    @property
    def state(self) -> FlowState:
        if self._busy:
            return FlowState.SEARCHING
        return FlowState.PREVIEW if self._preview is not None else FlowState.IDLE

    @property
    def busy(self) -> bool:
        return self._busy

    @property
    def preview(self) -> PreviewRecord | None:
        return self._preview

    def search(self, query: str) -> PreviewRecord | None:
        """Fetch metadata and a generated cover for ``query``.

        Blank queries are ignored. Any earlier preview is dropped.

        Returns:
            The staged preview, or None for a blank query.

        Raises:
            FlowBusyError: If a request is already running.
            BookServiceError: If the metadata lookup fails; the flow is
                back to idle with no preview.
        """
        if not query.strip():
            return None
        self._start()
        self._preview = None
        try:
            metadata = self._service.fetch_book_metadata(query.strip())
            cover = self._service.generate_cover_image(
                metadata.title, metadata.author, metadata.image_prompt
            )
            preview = PreviewRecord(
                metadata=metadata,
                generated_cover=cover,
                cover_attempts=1,
            )
        finally:
            self._busy = False
        self._preview = preview
        logger.info("Staged preview for %r", metadata.title)
        return preview

    def regenerate_cover(self) -> PreviewRecord:
        """Request a new cover for the staged metadata.

        The previous image is kept if the new attempt produces nothing.

        Raises:
            NoPreviewError: If nothing is staged.
            FlowBusyError: If a request is already running.
        """
        preview = self._require_preview()
        self._start()
        try:
            metadata = preview.metadata
            cover = self._service.generate_cover_image(
                metadata.title, metadata.author, metadata.image_prompt
            )
        finally:
            self._busy = False
        updated = preview.model_copy(
            update={
                "generated_cover": cover or preview.generated_cover,
                "cover_attempts": preview.cover_attempts + 1,
            }
        )
        self._preview = updated
        return updated

    def set_drive_link(self, url: str) -> PreviewRecord:
        """Attach a user-supplied external image link to the preview."""
        preview = self._require_preview()
        self._preview = preview.model_copy(update={"drive_url": url.strip()})
        return self._preview

    def commit(self) -> Book:
        """Normalize the preview into a new book and add it to the store.

        Raises:
            NoPreviewError: If nothing is staged.
            FlowBusyError: If a request is still running.
        """
        if self._busy:
            raise FlowBusyError("A request is still in progress")
        preview = self._require_preview()
        metadata = preview.metadata
        book = normalize(
            {
                "title": metadata.title,
                "author": metadata.author,
                "year": metadata.year,
                "summary": metadata.summary,
                "tags": metadata.tags,
                "coverUrl": preview.generated_cover,
                "driveUrl": preview.drive_url,
            },
            fresh=True,
        )
        self._store.add(book)
        self._preview = None
        logger.info("Committed book %s (%s)", book.id, book.title)
        return book

    def discard(self) -> None:
        """Drop the staged preview without touching the store."""
        self._preview = None

    def _start(self) -> None:
        if self._busy:
            raise FlowBusyError("A request is already in progress")
        self._busy = True

    def _require_preview(self) -> PreviewRecord:
        if self._preview is None:
            raise NoPreviewError("No preview is staged")
        return self._preview
