"""External generative-AI services."""

from src.services.base import BIO_UNAVAILABLE, BookInfoService, BookServiceError
from src.services.gemini import GeminiClient

__all__ = ["BIO_UNAVAILABLE", "BookInfoService", "BookServiceError", "GeminiClient"]
