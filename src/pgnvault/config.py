from __future__ import annotations

import os
from dataclasses import dataclass, field, replace
from enum import StrEnum
from pathlib import Path

from dotenv import load_dotenv

from pgnvault.archive_dates import ArchiveDate
from pgnvault.utils import to_int

DEFAULT_USER_AGENT = "pgnvault/0.1.0"
DEFAULT_OUTPUT_FOLDER = "chess"
DEFAULT_MONTHLY_PGN_FOLDER = "pgn"
DEFAULT_GAME_FILE_EXTENSION = "md"
DEFAULT_CUTOFF_YEAR = 1970
DEFAULT_CUTOFF_MONTH = 1


class MonthlyPgnPolicy(StrEnum):
    """How an existing monthly PGN file is treated on later runs."""

    OVERWRITE = "overwrite"
    SKIP_EXISTING = "skip_existing"


def _env_str(*names: str, default: str = "") -> str:
    for name in names:
        value = os.getenv(name)
        if value is not None and value.strip():
            return value.strip()
    return default


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return int(raw)


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return float(raw)


@dataclass(frozen=True, slots=True)
class Settings:
    """Immutable configuration for one sync run.

    Defaults are read from the environment when the instance is created, so a
    ``.env`` file loaded by ``get_settings`` is honored.
    """

    username: str = field(
        default_factory=lambda: _env_str("PGNVAULT_USERNAME", "CHESSCOM_USERNAME")
    )
    output_folder: str = field(
        default_factory=lambda: _env_str("PGNVAULT_OUTPUT_FOLDER", default=DEFAULT_OUTPUT_FOLDER)
    )
    vault_dir: Path = field(
        default_factory=lambda: Path(_env_str("PGNVAULT_VAULT_DIR", default="."))
    )
    cutoff_year: int = field(
        default_factory=lambda: _env_int("PGNVAULT_CUTOFF_YEAR", DEFAULT_CUTOFF_YEAR)
    )
    cutoff_month: int = field(
        default_factory=lambda: _env_int("PGNVAULT_CUTOFF_MONTH", DEFAULT_CUTOFF_MONTH)
    )
    monthly_pgn_folder: str = field(
        default_factory=lambda: _env_str(
            "PGNVAULT_MONTHLY_PGN_FOLDER", default=DEFAULT_MONTHLY_PGN_FOLDER
        )
    )
    game_file_extension: str = field(
        default_factory=lambda: _env_str(
            "PGNVAULT_GAME_FILE_EXTENSION", default=DEFAULT_GAME_FILE_EXTENSION
        )
    )
    monthly_pgn_policy: MonthlyPgnPolicy = field(
        default_factory=lambda: MonthlyPgnPolicy(
            _env_str("PGNVAULT_MONTHLY_PGN_POLICY", default=MonthlyPgnPolicy.OVERWRITE.value)
        )
    )
    request_timeout_s: float = field(
        default_factory=lambda: _env_float("PGNVAULT_REQUEST_TIMEOUT_S", 20.0)
    )
    max_retries: int = field(default_factory=lambda: _env_int("CHESSCOM_MAX_RETRIES", 2))
    retry_backoff_ms: int = field(
        default_factory=lambda: _env_int("CHESSCOM_RETRY_BACKOFF_MS", 500)
    )
    max_workers: int = field(default_factory=lambda: _env_int("PGNVAULT_MAX_WORKERS", 1))
    user_agent: str = field(
        default_factory=lambda: _env_str("PGNVAULT_USER_AGENT", default=DEFAULT_USER_AGENT)
    )

    def __post_init__(self) -> None:
        if not isinstance(self.monthly_pgn_policy, MonthlyPgnPolicy):
            object.__setattr__(
                self, "monthly_pgn_policy", MonthlyPgnPolicy(self.monthly_pgn_policy)
            )
        object.__setattr__(self, "vault_dir", Path(self.vault_dir))
        if not 1 <= self.cutoff_month <= 12:
            raise ValueError(f"cutoff_month must be between 1 and 12, got {self.cutoff_month}")
        if self.max_retries < 0:
            raise ValueError("max_retries must not be negative")
        if self.retry_backoff_ms < 0:
            raise ValueError("retry_backoff_ms must not be negative")
        if self.max_workers < 1:
            raise ValueError("max_workers must be at least 1")
        if self.request_timeout_s <= 0:
            raise ValueError("request_timeout_s must be positive")

    @property
    def cutoff(self) -> ArchiveDate:
        """Earliest archive month included in a sync."""
        return ArchiveDate(year=self.cutoff_year, month=self.cutoff_month)

    @property
    def retry_backoff_s(self) -> float:
        return self.retry_backoff_ms / 1000.0


def parse_cutoff(value: str) -> ArchiveDate:
    """Parse a ``YYYY-MM`` (or ``YYYY/MM``) cutoff string.

    Raises:
        ValueError: When the value is not a year and month.
    """

    tokens = value.strip().replace("/", "-").split("-")
    if len(tokens) != 2:
        raise ValueError(f"Expected YYYY-MM, got {value!r}")
    year, month = to_int(tokens[0]), to_int(tokens[1])
    if year is None or month is None:
        raise ValueError(f"Expected YYYY-MM, got {value!r}")
    return ArchiveDate(year=year, month=month)


def get_settings(**overrides: object) -> Settings:
    """Return Settings built from the environment (and ``.env``) plus overrides.

    Overrides whose value is ``None`` are ignored, so CLI arguments that were
    not given fall back to the environment.
    """

    load_dotenv()
    settings = Settings()
    explicit = {name: value for name, value in overrides.items() if value is not None}
    if not explicit:
        return settings
    return replace(settings, **explicit)
