"""Author biography lookup."""

from src.ingestion.flow import FlowBusyError
from src.services.base import BIO_UNAVAILABLE, BookInfoService


class AuthorBioLookup:
    """Single in-flight author biography request with the last result cached."""

    def __init__(self, service: BookInfoService) -> None:
        self._service = service
        self._busy = False
        self.last: tuple[str, str] | None = None

    @property
    def busy(self) -> bool:
        return self._busy

    def lookup(self, name: str) -> str:
        """Fetch a biography for ``name``; never raises on service failure.

        Raises:
            FlowBusyError: If a lookup is already running.
        """
        if self._busy:
            raise FlowBusyError("An author lookup is already in progress")
        if not name.strip():
            return BIO_UNAVAILABLE
        self._busy = True
        try:
            bio = self._service.fetch_author_bio(name.strip()) or BIO_UNAVAILABLE
        finally:
            self._busy = False
        self.last = (name.strip(), bio)
        return bio
