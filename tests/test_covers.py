"""Tests for cover resolution."""

from src.config import CoverConfig
from src.library.covers import extract_drive_file_id, placeholder_cover, resolve_cover_source
from src.models import Book


class TestExtractDriveFileId:
    def test_path_segment(self) -> None:
        assert extract_drive_file_id("https://drive.google.com/file/d/XYZ123/view") == "XYZ123"

    def test_path_segment_without_suffix(self) -> None:
        assert extract_drive_file_id("https://drive.google.com/file/d/XYZ123") == "XYZ123"

    def test_query_parameter(self) -> None:
        url = "https://drive.google.com/open?id=ABC456&usp=sharing"
        assert extract_drive_file_id(url) == "ABC456"

    def test_docs_host(self) -> None:
        assert extract_drive_file_id("https://docs.google.com/uc?id=Q1") == "Q1"

    def test_non_drive_url(self) -> None:
        assert extract_drive_file_id("https://example.com/d/XYZ/view") is None

    def test_drive_url_without_id(self) -> None:
        assert extract_drive_file_id("https://drive.google.com/drive/my-drive") is None


class TestResolveCoverSource:
    def test_drive_link_becomes_direct_image(self) -> None:
        book = Book(title="T", drive_url="https://drive.google.com/file/d/XYZ123/view")
        resolved = resolve_cover_source(book)
        assert "XYZ123" in resolved
        assert resolved == "https://lh3.googleusercontent.com/u/0/d/XYZ123"

    def test_unrecognized_drive_link_used_verbatim(self) -> None:
        book = Book(title="T", drive_url="https://images.example.com/cover.jpg")
        assert resolve_cover_source(book) == "https://images.example.com/cover.jpg"

    def test_local_cover_used(self) -> None:
        book = Book(title="T", cover_url="data:image/png;base64,AAA")
        assert resolve_cover_source(book) == "data:image/png;base64,AAA"

    def test_placeholder_encodes_title(self) -> None:
        book = Book(title="El Aleph & otros")
        resolved = resolve_cover_source(book)
        assert resolved == placeholder_cover("El Aleph & otros")
        assert "El%20Aleph%20%26%20otros" in resolved

    def test_deterministic(self) -> None:
        book = Book(title="T", drive_url="https://drive.google.com/open?id=Z")
        assert resolve_cover_source(book) == resolve_cover_source(book)

    def test_custom_templates(self) -> None:
        covers = CoverConfig(
            drive_image_template="img://{file_id}", placeholder_template="ph://{text}"
        )
        assert resolve_cover_source(Book(title="A B"), covers) == "ph://A%20B"
        drive_book = Book(title="T", drive_url="https://drive.google.com/file/d/K/view")
        assert resolve_cover_source(drive_book, covers) == "img://K"
