"""Tests for the reading status cycle."""

import pytest

from src.library.status import STATUS_CYCLE, next_status
from src.models import ReadingStatus


class TestNextStatus:
    def test_forward_cycle(self) -> None:
        assert next_status(ReadingStatus.WANT_TO_READ) == ReadingStatus.READING
        assert next_status(ReadingStatus.READING) == ReadingStatus.READ
        assert next_status(ReadingStatus.READ) == ReadingStatus.RE_READING
        assert next_status(ReadingStatus.RE_READING) == ReadingStatus.ABANDONED
        assert next_status(ReadingStatus.ABANDONED) == ReadingStatus.WANT_TO_READ

    def test_accepts_string_values(self) -> None:
        assert next_status("read") == ReadingStatus.RE_READING

    @pytest.mark.parametrize("start", list(ReadingStatus))
    def test_cycle_closes_after_five_steps(self, start: ReadingStatus) -> None:
        status = start
        for _ in range(5):
            status = next_status(status)
        assert status == start

    def test_cycle_covers_every_status_once(self) -> None:
        assert sorted(STATUS_CYCLE) == sorted(ReadingStatus)

    def test_unknown_status_rejected(self) -> None:
        with pytest.raises(ValueError):
            next_status("finished")
