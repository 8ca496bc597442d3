"""Book data model."""

import time
from enum import Enum
from typing import Any
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

DEFAULT_TITLE = "Untitled"
DEFAULT_AUTHOR = "Unknown author"
MAX_RATING = 5


def now_ms() -> int:
    """Current time as epoch milliseconds."""
    return int(time.time() * 1000)


class ReadingStatus(str, Enum):
    """Reading status of a catalogued book."""

    WANT_TO_READ = "want-to-read"
    READING = "reading"
    READ = "read"
    RE_READING = "re-reading"
    ABANDONED = "abandoned"


class Book(BaseModel):
    """A catalogued book.

    Instances are immutable; edits produce a new record through
    :meth:`with_changes`. Serialized with camelCase keys
    (``coverUrl``, ``driveUrl``, ``dateAdded``).
    """

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    id: str = Field(default_factory=lambda: str(uuid4()))
    title: str = DEFAULT_TITLE
    author: str = DEFAULT_AUTHOR
    year: str = ""
    summary: str = ""
    tags: list[str] = Field(default_factory=list)
    cover_url: str = ""
    drive_url: str = ""
    status: ReadingStatus = ReadingStatus.WANT_TO_READ
    rating: int = Field(default=0, ge=0, le=MAX_RATING)
    date_added: int = Field(default_factory=now_ms)

    @model_validator(mode="before")
    @classmethod
    def _drive_link_wins(cls, data: Any) -> Any:
        """Clear the local cover whenever an external drive link is present."""
        if not isinstance(data, dict):
            return data
        drive = data.get("driveUrl", data.get("drive_url"))
        if isinstance(drive, str) and drive.strip():
            data = {k: v for k, v in data.items() if k not in ("coverUrl", "cover_url")}
            data["cover_url"] = ""
        return data

    @field_validator("title")
    @classmethod
    def _title_not_blank(cls, value: str) -> str:
        return value.strip() or DEFAULT_TITLE

    @field_validator("author")
    @classmethod
    def _author_not_blank(cls, value: str) -> str:
        return value.strip() or DEFAULT_AUTHOR

    @field_validator("drive_url", "cover_url", "year")
    @classmethod
    def _strip(cls, value: str) -> str:
        return value.strip()

    @field_validator("tags")
    @classmethod
    def _unique_tags(cls, value: list[str]) -> list[str]:
        # Insertion order kept, blanks and repeats dropped
        seen: dict[str, None] = {}
        for tag in value:
            cleaned = tag.strip()
            if cleaned:
                seen.setdefault(cleaned, None)
        return list(seen)

    def with_changes(self, **changes: Any) -> "Book":
        """Return a validated copy with the given fields replaced."""
        data = self.model_dump()
        data.update(changes)
        return Book.model_validate(data)

    def to_document(self) -> dict[str, Any]:
        """Serialize with the canonical camelCase field names."""
        return self.model_dump(mode="json", by_alias=True)
