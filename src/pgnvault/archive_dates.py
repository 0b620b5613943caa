"""Archive date parsing and cutoff filtering."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass

from pgnvault.errors import MalformedArchiveReference
from pgnvault.utils import to_int

ARCHIVE_DATE_SUFFIX_LENGTH = 7


@dataclass(frozen=True, order=True, slots=True)
class ArchiveDate:
    """Year and month of one monthly archive.

    Instances compare lexicographically by ``(year, month)``, which is the
    ordering used by the cutoff filter.

    Attributes:
        year: Four digit year.
        month: Month number, 1 to 12.
    """

    year: int
    month: int

    def __post_init__(self) -> None:
        if not 1 <= self.month <= 12:
            raise ValueError(f"Month must be between 1 and 12, got {self.month}")

    @property
    def label(self) -> str:
        """Return the ``YYYY-MM`` label used for monthly PGN files."""
        return f"{self.year:04d}-{self.month:02d}"

    @property
    def path_segment(self) -> str:
        """Return the ``YYYY/MM`` segment used by the chess.com API."""
        return f"{self.year:04d}/{self.month:02d}"


def parse_archive_date(reference: str) -> ArchiveDate:
    """Extract the archive date from the trailing ``YYYY/MM`` of a reference.

    Args:
        reference: Archive URL as returned by the archive index.

    Returns:
        Parsed archive date.

    Raises:
        MalformedArchiveReference: When the trailing segment is not ``YYYY/MM``.

    Example:
        >>> parse_archive_date("https://api.chess.com/pub/player/x/games/2024/06")
        ArchiveDate(year=2024, month=6)
    """

    if len(reference) < ARCHIVE_DATE_SUFFIX_LENGTH:
        raise MalformedArchiveReference(reference, "shorter than YYYY/MM")
    tokens = reference[-ARCHIVE_DATE_SUFFIX_LENGTH:].split("/")
    if len(tokens) != 2 or len(tokens[0]) != 4 or len(tokens[1]) != 2:
        raise MalformedArchiveReference(reference, "trailing segment is not YYYY/MM")
    year = to_int(tokens[0])
    month = to_int(tokens[1])
    if year is None or month is None:
        raise MalformedArchiveReference(reference, "year or month is not numeric")
    if not 1 <= month <= 12:
        raise MalformedArchiveReference(reference, f"month {month} out of range")
    return ArchiveDate(year=year, month=month)


def is_on_or_after(date: ArchiveDate, cutoff: ArchiveDate) -> bool:
    """Return True when the archive falls on or after the cutoff month."""
    if date.year != cutoff.year:
        return date.year > cutoff.year
    return date.month >= cutoff.month


def select_archives(
    references: Iterable[str],
    cutoff: ArchiveDate,
    *,
    on_excluded: Callable[[str, ArchiveDate], None] | None = None,
    on_malformed: Callable[[MalformedArchiveReference], None] | None = None,
) -> Iterator[tuple[str, ArchiveDate]]:
    """Yield the references on or after the cutoff, keeping index order.

    Args:
        references: Archive references in index order.
        cutoff: Earliest month to include.
        on_excluded: Called for every archive before the cutoff.
        on_malformed: Called for every reference that cannot be parsed.

    Yields:
        ``(reference, date)`` pairs for included archives.
    """

    for reference in references:
        try:
            date = parse_archive_date(reference)
        except MalformedArchiveReference as exc:
            if on_malformed is None:
                raise
            on_malformed(exc)
            continue
        if is_on_or_after(date, cutoff):
            yield reference, date
        elif on_excluded is not None:
            on_excluded(reference, date)
