"""Tests for record normalization."""

import pytest

from src.library.normalize import IncompleteRecordError, canonicalize_keys, has_identity, normalize
from src.models import DEFAULT_AUTHOR, DEFAULT_TITLE, ReadingStatus


class TestNormalizeDefaults:
    def test_fills_missing_fields(self) -> None:
        book = normalize({"title": "Dune"}, now=1234)
        assert book.id
        assert book.title == "Dune"
        assert book.author == DEFAULT_AUTHOR
        assert book.year == ""
        assert book.summary == ""
        assert book.tags == []
        assert book.status == ReadingStatus.WANT_TO_READ
        assert book.rating == 0
        assert book.date_added == 1234

    def test_author_only_gets_default_title(self) -> None:
        book = normalize({"author": "Borges"})
        assert book.title == DEFAULT_TITLE
        assert book.author == "Borges"

    def test_rejects_record_without_title_and_author(self) -> None:
        with pytest.raises(IncompleteRecordError):
            normalize({"year": "1999", "title": "  ", "author": None})

    @pytest.mark.parametrize(
        "record",
        [
            {"title": ["x"], "author": True},
            {"title": {"name": "x"}},
            {"author": [None, " "]},
        ],
    )
    def test_rejects_non_text_title_and_author(self, record: dict) -> None:
        assert not has_identity(record)
        with pytest.raises(IncompleteRecordError):
            normalize(record)

    def test_keeps_existing_id(self) -> None:
        assert normalize({"id": "abc", "title": "T"}).id == "abc"

    def test_generates_distinct_ids(self) -> None:
        assert normalize({"title": "T"}).id != normalize({"title": "T"}).id

    def test_coerces_loose_types(self) -> None:
        book = normalize(
            {"title": "T", "year": 1967, "rating": "4", "dateAdded": "1700000000000", "tags": "a, b,a"}
        )
        assert book.year == "1967"
        assert book.rating == 4
        assert book.date_added == 1700000000000
        assert book.tags == ["a", "b"]

    def test_clamps_rating(self) -> None:
        assert normalize({"title": "T", "rating": 9}).rating == 5
        assert normalize({"title": "T", "rating": -2}).rating == 0
        assert normalize({"title": "T", "rating": "great"}).rating == 0

    def test_invalid_date_uses_now(self) -> None:
        assert normalize({"title": "T", "dateAdded": "yesterday"}, now=77).date_added == 77

    def test_author_list_joined(self) -> None:
        assert normalize({"title": "T", "authors": ["A", "B"]}).author == "A, B"


class TestNormalizeStatus:
    def test_valid_status_preserved(self) -> None:
        assert normalize({"title": "T", "status": "reading"}).status == ReadingStatus.READING

    def test_status_case_insensitive(self) -> None:
        assert normalize({"title": "T", "status": " Read "}).status == ReadingStatus.READ

    def test_invalid_status_defaults(self) -> None:
        assert normalize({"title": "T", "status": "done"}).status == ReadingStatus.WANT_TO_READ

    def test_fresh_book_always_starts_unread(self) -> None:
        book = normalize({"title": "T", "status": "read", "rating": 5}, fresh=True)
        assert book.status == ReadingStatus.WANT_TO_READ
        assert book.rating == 0


class TestNormalizeCovers:
    def test_drive_url_clears_cover(self) -> None:
        book = normalize({"title": "T", "coverUrl": "data:x", "driveUrl": "https://d/1"})
        assert book.drive_url == "https://d/1"
        assert book.cover_url == ""

    def test_cover_kept_without_drive(self) -> None:
        book = normalize({"title": "T", "coverUrl": "data:x", "driveUrl": ""})
        assert book.cover_url == "data:x"


class TestSynonyms:
    def test_spanish_keys(self) -> None:
        book = normalize(
            {
                "título": "Rayuela",
                "autor": "Julio Cortázar",
                "año": "1963",
                "resumen": "Una novela.",
                "etiquetas": ["novela"],
                "portada": "data:img",
                "estado": "read",
                "valoracion": 5,
                "fechaAgregado": 10,
            }
        )
        assert book.title == "Rayuela"
        assert book.author == "Julio Cortázar"
        assert book.year == "1963"
        assert book.summary == "Una novela."
        assert book.tags == ["novela"]
        assert book.cover_url == "data:img"
        assert book.status == ReadingStatus.READ
        assert book.rating == 5
        assert book.date_added == 10

    def test_snake_case_keys(self) -> None:
        book = normalize({"title": "T", "drive_url": "https://d", "date_added": 3})
        assert book.drive_url == "https://d"
        assert book.date_added == 3

    def test_canonical_key_wins(self) -> None:
        assert canonicalize_keys({"title": "Canon", "titulo": "Synonym"})["title"] == "Canon"

    def test_blank_canonical_does_not_shadow_synonym(self) -> None:
        assert canonicalize_keys({"title": "", "titulo": "Synonym"})["title"] == "Synonym"

    def test_has_identity_with_synonym(self) -> None:
        assert has_identity({"autor": "Someone"})
        assert not has_identity({"resumen": "text"})
