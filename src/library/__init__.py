"""Library state: normalization, covers, status lifecycle, store, import/export."""

from src.library.covers import extract_drive_file_id, placeholder_cover, resolve_cover_source
from src.library.normalize import IncompleteRecordError, normalize
from src.library.status import STATUS_CYCLE, next_status
from src.library.store import LibraryStore
from src.library.transfer import (
    ImportResult,
    LibraryImportError,
    export_library,
    import_from_path,
    import_library,
)

__all__ = [
    "STATUS_CYCLE",
    "ImportResult",
    "IncompleteRecordError",
    "LibraryImportError",
    "LibraryStore",
    "export_library",
    "extract_drive_file_id",
    "import_from_path",
    "import_library",
    "next_status",
    "normalize",
    "placeholder_cover",
    "resolve_cover_source",
]
