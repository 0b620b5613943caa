"""PGN header parsing and game file naming."""

from __future__ import annotations

from collections.abc import Mapping
from io import StringIO

import chess.pgn
from pydantic import BaseModel, ConfigDict

from pgnvault.errors import MissingRequiredField

REQUIRED_HEADERS = ("White", "Black", "UTCDate", "UTCTime")
_UNSAFE_NAME_CHARS = str.maketrans({"/": "_", "\\": "_"})


def parse_pgn_headers(record: str) -> dict[str, str]:
    """Parse the ``[Tag "value"]`` lines of a single game record.

    Unknown tags are kept; tag order does not matter. Only tags present in the
    record are returned, so an absent ``White`` is missing rather than ``"?"``.
    The tags must form one contiguous block at the top of the record: parsing
    stops at the first line that is not a tag, and later tags are ignored.

    Args:
        record: Text of one game.

    Returns:
        Mapping of tag name to value.
    """

    headers = chess.pgn.read_headers(StringIO(record))
    if headers is None:
        return {}
    return dict(headers)


class GameFileKey(BaseModel):
    """Identity of a materialized game file.

    Attributes:
        white: White player's username.
        black: Black player's username.
        utc_date: ``UTCDate`` header as published (``YYYY.MM.DD``).
        utc_time: ``UTCTime`` header as published (``HH:MM:SS``).

    Example:
        >>> GameFileKey(white="A", black="B", utc_date="2024.06.01",
        ...             utc_time="10:00:00").filename()
        'A-B 2024-06-01 10:00:00.md'
    """

    model_config = ConfigDict(frozen=True)

    white: str
    black: str
    utc_date: str
    utc_time: str

    @classmethod
    def from_headers(cls, headers: Mapping[str, str]) -> GameFileKey:
        """Build a key from parsed headers.

        Raises:
            MissingRequiredField: When any of the required tags is absent or blank.
        """

        missing = [name for name in REQUIRED_HEADERS if not headers.get(name, "").strip()]
        if missing:
            raise MissingRequiredField(missing)
        return cls(
            white=headers["White"],
            black=headers["Black"],
            utc_date=headers["UTCDate"],
            utc_time=headers["UTCTime"],
        )

    def filename(self, extension: str = "md") -> str:
        """Return the file name for this game."""
        white = self.white.translate(_UNSAFE_NAME_CHARS)
        black = self.black.translate(_UNSAFE_NAME_CHARS)
        date = self.utc_date.replace(".", "-").translate(_UNSAFE_NAME_CHARS)
        time = self.utc_time.translate(_UNSAFE_NAME_CHARS)
        return f"{white}-{black} {date} {time}.{extension.lstrip('.')}"


def extract_game_file_key(record: str) -> GameFileKey:
    """Parse a record's headers and return its file key."""
    return GameFileKey.from_headers(parse_pgn_headers(record))
