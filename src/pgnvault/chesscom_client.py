"""Client for the chess.com published-data archive endpoints."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import UTC, datetime
from email.utils import parsedate_to_datetime

import requests

from pgnvault.archive_dates import ArchiveDate
from pgnvault.config import Settings
from pgnvault.errors import RateLimitError, RemoteUnavailable
from pgnvault.utils import get_logger

logger = get_logger(__name__)

ARCHIVES_URL = "https://api.chess.com/pub/player/{username}/games/archives"
MONTHLY_PGN_URL = "https://api.chess.com/pub/player/{username}/games/{year:04d}/{month:02d}/pgn"
HTTP_STATUS_TOO_MANY_REQUESTS = 429


@dataclass(slots=True)
class ChesscomClientContext:
    """Shared context for chess.com API calls.

    Attributes:
        settings: Settings used for API calls.
        logger: Logger for client-specific messages.
    """

    settings: Settings
    logger: logging.Logger


class ChesscomArchiveClient:
    """Fetches the archive index and monthly PGN blobs for one account.

    The client does not retry; callers decide the retry policy.
    """

    def __init__(self, context: ChesscomClientContext) -> None:
        self._context = context

    @classmethod
    def for_settings(cls, settings: Settings) -> ChesscomArchiveClient:
        return cls(ChesscomClientContext(settings=settings, logger=logger))

    @property
    def settings(self) -> Settings:
        return self._context.settings

    @property
    def logger(self) -> logging.Logger:
        return self._context.logger

    def fetch_archive_index(self) -> list[str]:
        """Fetch the monthly archive URLs for the configured account.

        Returns:
            Archive URLs in the order the API returned them.

        Raises:
            RemoteUnavailable: On transport errors, error statuses or an
                unexpected payload.
        """

        url = ARCHIVES_URL.format(username=self.settings.username)
        response = self._get(url)
        try:
            payload = response.json()
        except ValueError as exc:
            raise RemoteUnavailable(
                f"Archive index is not JSON: {exc}", url=url, response=response
            ) from exc
        archives = payload.get("archives") if isinstance(payload, dict) else None
        if not isinstance(archives, list) or not all(isinstance(a, str) for a in archives):
            raise RemoteUnavailable(
                "Archive index payload has no list of archive URLs",
                url=url,
                response=response,
            )
        if not archives:
            self.logger.info("No archives returned for %s", self.settings.username)
        return list(archives)

    def fetch_monthly_pgn(self, date: ArchiveDate) -> str:
        """Fetch the PGN blob holding every game of one month.

        Args:
            date: Archive month to fetch.

        Returns:
            Raw PGN text.

        Raises:
            RemoteUnavailable: On transport errors or error statuses.
        """

        url = MONTHLY_PGN_URL.format(
            username=self.settings.username, year=date.year, month=date.month
        )
        response = self._get(url)
        response.encoding = response.encoding or "utf-8"
        return response.text

    def _get(self, url: str) -> requests.Response:
        """Issue a GET and translate failures into ``RemoteUnavailable``."""
        try:
            response = requests.get(
                url,
                headers={"User-Agent": self.settings.user_agent},
                timeout=self.settings.request_timeout_s,
            )
        except requests.RequestException as exc:
            raise RemoteUnavailable(f"Request to {url} failed: {exc}", url=url) from exc
        if response.status_code == HTTP_STATUS_TOO_MANY_REQUESTS:
            raise RateLimitError(
                "Chess.com rate limit exceeded",
                url=url,
                response=response,
                retry_after=_parse_retry_after((response.headers or {}).get("Retry-After")),
            )
        try:
            response.raise_for_status()
        except requests.HTTPError as exc:
            raise RemoteUnavailable(str(exc), url=url, response=response) from exc
        return response


def _parse_retry_after(value: str | None) -> float | None:
    """Parse a Retry-After header given in seconds or as an HTTP date."""
    if not value:
        return None
    try:
        return max(float(value), 0.0)
    except ValueError:
        pass
    try:
        when = parsedate_to_datetime(value)
    except (TypeError, ValueError):
        return None
    if when.tzinfo is None:
        when = when.replace(tzinfo=UTC)
    return max((when - datetime.now(UTC)).total_seconds(), 0.0)
