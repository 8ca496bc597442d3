"""AI-assisted book ingestion and author lookups."""

from src.ingestion.author_bio import AuthorBioLookup
from src.ingestion.flow import FlowBusyError, FlowState, IngestionFlow, NoPreviewError

__all__ = ["AuthorBioLookup", "FlowBusyError", "FlowState", "IngestionFlow", "NoPreviewError"]
