"""Run summary for an archive sync."""

from pydantic import BaseModel, Field

from pgnvault.errors import ERROR_CATEGORIES, PgnVaultError


def _empty_error_counts() -> dict[str, int]:
    return dict.fromkeys(ERROR_CATEGORIES, 0)


class SyncSummary(BaseModel):
    """Counters reported at the end of a sync run.

    Attributes:
        archives_listed: Archive references returned by the index.
        archives_included: Archives on or after the cutoff.
        archives_excluded: Archives before the cutoff.
        archives_processed: Included archives whose PGN blob was downloaded.
        monthly_pgns_written: Monthly PGN files written.
        games_written: Game files created.
        games_skipped: Games whose file already existed.
        errors: Failure counts per error category.
        error_messages: One message per recorded failure.
        cancelled: Whether the run stopped early on request.
    """

    archives_listed: int = 0
    archives_included: int = 0
    archives_excluded: int = 0
    archives_processed: int = 0
    monthly_pgns_written: int = 0
    games_written: int = 0
    games_skipped: int = 0
    errors: dict[str, int] = Field(default_factory=_empty_error_counts)
    error_messages: list[str] = Field(default_factory=list)
    cancelled: bool = False

    @property
    def error_count(self) -> int:
        return sum(self.errors.values())

    def record_error(self, error: PgnVaultError) -> None:
        """Count a failure under its category."""
        self.errors[error.category] = self.errors.get(error.category, 0) + 1
        self.error_messages.append(str(error))

    def describe(self) -> str:
        """Return a one-line, human readable summary."""
        failures = ", ".join(f"{name}={count}" for name, count in self.errors.items())
        status = " (cancelled)" if self.cancelled else ""
        return (
            f"archives processed={self.archives_processed}/{self.archives_included} "
            f"(excluded={self.archives_excluded}), games written={self.games_written}, "
            f"games skipped={self.games_skipped}, errors: {failures}{status}"
        )
