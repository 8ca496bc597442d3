"""Gemini REST client implementing the book information service."""

import json
import logging
import re
from typing import Any

import httpx
from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic.alias_generators import to_camel

from src.config import GenerationConfig
from src.models.preview import BookMetadata
from src.services.base import BIO_UNAVAILABLE, BookServiceError

logger = logging.getLogger(__name__)

METADATA_SCHEMA: dict[str, Any] = {
    "type": "OBJECT",
    "properties": {
        "title": {"type": "STRING"},
        "author": {"type": "STRING"},
        "year": {"type": "STRING"},
        "summary": {"type": "STRING"},
        "tags": {"type": "ARRAY", "items": {"type": "STRING"}},
        "imagePrompt": {"type": "STRING"},
    },
    "required": ["title", "author", "year", "summary", "tags", "imagePrompt"],
}

_JSON_FENCE = re.compile(r"^```(?:json)?\s*|\s*```$")


class GeminiClient:
    """Calls the Gemini ``generateContent`` endpoint over HTTP.

    Every request carries the configured timeout; expiry is handled like
    any other network error.

    Args:
        api_key: Gemini API key.
        config: Models, base URL, and timeout.
        http_client: Optional pre-built httpx client (tests inject a
            MockTransport-backed one).
    """

    def __init__(
        self,
        api_key: str | None,
        config: GenerationConfig | None = None,
        http_client: httpx.Client | None = None,
    ) -> None:
        if not api_key:
            raise ValueError("A Gemini API key is required (set GEMINI_API_KEY)")
        self._config = config or GenerationConfig()
        self._client = http_client or httpx.Client(
            base_url=self._config.base_url,
            timeout=httpx.Timeout(self._config.timeout_seconds),
        )
        self._api_key = api_key

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "GeminiClient":
        return self

    def __exit__(self, exc_type: object, exc_val: object, exc_tb: object) -> None:
        self.close()

    def fetch_book_metadata(self, query: str) -> BookMetadata:
        """Look up details for a book described by free text.

        Raises:
            BookServiceError: On network/HTTP failure, timeout, or a
                response that is not complete, well-formed metadata.
        """
        body = {
            "contents": [
                {
                    "parts": [
                        {
                            "text": (
                                f'Find details for the book "{query}". Return JSON with: '
                                "title, author, year, summary, tags, imagePrompt."
                            )
                        }
                    ]
                }
            ],
            "tools": [{"googleSearch": {}}],
            "generationConfig": {
                "responseMimeType": "application/json",
                "responseSchema": METADATA_SCHEMA,
            },
        }
        try:
            text = self._generate(self._config.text_model, body).text()
            data = json.loads(_JSON_FENCE.sub("", text.strip()))
            return BookMetadata.model_validate(data)
        except (httpx.HTTPError, ValueError, ValidationError, RecursionError) as exc:
            logger.warning("Metadata lookup failed for %r: %s", query, exc)
            raise BookServiceError(f"Could not fetch book information: {exc}") from exc

    def generate_cover_image(self, title: str, author: str, style: str) -> str:
        """Generate a cover image, returning a data URL or "" on any failure."""
        prompt = (
            f'A professional book cover for "{title}" by {author}. '
            f'The cover must clearly display the title "{title}" and the author name '
            f'"{author}" in elegant, readable typography. '
            f"Style: {style}. High quality graphic design, cinematic lighting."
        )
        body = {
            "contents": [{"parts": [{"text": prompt}]}],
            "generationConfig": {
                "responseModalities": ["IMAGE"],
                "imageConfig": {"aspectRatio": self._config.image_aspect_ratio},
            },
        }
        try:
            parts = self._generate(self._config.image_model, body).parts
        except (httpx.HTTPError, ValueError) as exc:
            logger.warning("Cover generation failed for %r: %s", title, exc)
            return ""

        for part in parts:
            if part.inline_data is not None and part.inline_data.data:
                return f"data:{part.inline_data.mime_type};base64,{part.inline_data.data}"
        logger.info("Cover generation for %r returned no image", title)
        return ""

    def fetch_author_bio(self, name: str) -> str:
        """Short literary biography of an author, or the unavailable sentinel."""
        body = {
            "contents": [{"parts": [{"text": f"Short literary biography of {name}."}]}],
            "tools": [{"googleSearch": {}}],
        }
        try:
            text = self._generate(self._config.text_model, body).text().strip()
        except (httpx.HTTPError, ValueError) as exc:
            logger.warning("Author bio lookup failed for %r: %s", name, exc)
            return BIO_UNAVAILABLE
        return text or BIO_UNAVAILABLE

    def _generate(self, model: str, body: dict[str, Any]) -> "GenerateContentResponse":
        """POST a generateContent request.

        Raises:
            httpx.HTTPError: On network failure, timeout, or error status.
            ValueError: If the body is not JSON or not a recognizable response.
        """
        response = self._client.post(
            f"/models/{model}:generateContent",
            json=body,
            headers={"x-goog-api-key": self._api_key},
        )
        response.raise_for_status()
        try:
            payload = response.json()
        except RecursionError as exc:
            raise ValueError("Response nesting too deep") from exc
        return GenerateContentResponse.model_validate(payload)


class InlineData(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    mime_type: str = "image/png"
    data: str = ""


class Part(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    text: str | None = None
    inline_data: InlineData | None = None


class Content(BaseModel):
    parts: list[Part] = Field(default_factory=list)


class Candidate(BaseModel):
    content: Content | None = None


class GenerateContentResponse(BaseModel):
    """The subset of a ``generateContent`` response the client reads."""

    candidates: list[Candidate] = Field(default_factory=list)

    @property
    def parts(self) -> list[Part]:
        if not self.candidates or self.candidates[0].content is None:
            return []
        return self.candidates[0].content.parts

    def text(self) -> str:
        """Concatenated text parts.

        Raises:
            ValueError: If the response holds no text.
        """
        texts = [p.text for p in self.parts if p.text is not None]
        if not texts:
            raise ValueError("Response contained no text")
        return "".join(texts)
