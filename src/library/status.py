"""Reading status lifecycle."""

from src.models.book import ReadingStatus

# Each status has exactly one successor; the cycle closes after five steps.
STATUS_CYCLE: tuple[ReadingStatus, ...] = (
    ReadingStatus.WANT_TO_READ,
    ReadingStatus.READING,
    ReadingStatus.READ,
    ReadingStatus.RE_READING,
    ReadingStatus.ABANDONED,
)


def next_status(status: ReadingStatus | str) -> ReadingStatus:
    """Return the successor of ``status`` in the reading cycle.

    Raises:
        ValueError: If ``status`` is not a known reading status.
    """
    current = ReadingStatus(status)
    index = STATUS_CYCLE.index(current)
    return STATUS_CYCLE[(index + 1) % len(STATUS_CYCLE)]
