"""Metadata and preview models for AI-assisted ingestion."""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class BookMetadata(BaseModel):
    """Book details returned by the metadata service.

    All fields are required: a response missing any of them is rejected
    as a whole rather than partially applied.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    title: str
    author: str
    year: str
    summary: str
    tags: list[str]
    image_prompt: str  # style description for the cover generator


class PreviewRecord(BaseModel):
    """An uncommitted candidate book awaiting user review.

    Lacks the identity and lifecycle fields (id, status, rating,
    dateAdded) that only exist once it is committed as a Book.
    """

    metadata: BookMetadata
    generated_cover: str = ""  # data URL, empty when generation failed
    drive_url: str = ""
    cover_attempts: int = Field(default=0, ge=0)
