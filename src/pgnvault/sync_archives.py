"""Mirror chess.com monthly archives into a vault folder."""

from __future__ import annotations

import logging
import threading
import time
from collections import deque
from collections.abc import Callable, Iterator
from concurrent.futures import Future, ThreadPoolExecutor
from typing import TypeVar

from tenacity import (
    RetryCallState,
    Retrying,
    before_sleep_log,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

from pgnvault.archive_dates import ArchiveDate, select_archives
from pgnvault.chesscom_client import ChesscomArchiveClient
from pgnvault.config import Settings
from pgnvault.errors import (
    FilesystemFailure,
    MissingRequiredField,
    PgnVaultError,
    RateLimitError,
    RemoteUnavailable,
)
from pgnvault.materialize_game_record__sync import MaterializeOutcome, materialize_game_record
from pgnvault.persist_monthly_pgn__sync import persist_monthly_pgn
from pgnvault.split_pgn_records import split_pgn_records
from pgnvault.sync_summary import SyncSummary
from pgnvault.utils import get_logger
from pgnvault.vault_fs import LocalVaultFilesystem, VaultFilesystem

logger = get_logger(__name__)

MAX_BACKOFF_S = 10.0
MAX_RETRY_AFTER_S = 60.0

T = TypeVar("T")
MonthFetch = tuple[str, ArchiveDate, str | RemoteUnavailable]


def _backoff_wait(base_backoff_s: float) -> Callable[[RetryCallState], float]:
    """Exponential backoff that honors a longer Retry-After from a 429."""
    exponential = wait_exponential(multiplier=base_backoff_s, max=MAX_BACKOFF_S)

    def _wait(retry_state: RetryCallState) -> float:
        delay = exponential(retry_state)
        outcome = retry_state.outcome
        error = outcome.exception() if outcome is not None else None
        retry_after = getattr(error, "retry_after", None) or 0.0
        return max(delay, min(retry_after, MAX_RETRY_AFTER_S))

    return _wait


def _is_transient(error: BaseException) -> bool:
    """Transport errors, 5xx and 429 are retried; other 4xx answers are final."""
    if not isinstance(error, RemoteUnavailable):
        return False
    status = getattr(error.response, "status_code", None)
    if status is None or isinstance(error, RateLimitError):
        return True
    return not 400 <= status < 500


class ArchiveSync:
    """One sync run: index, filter, fetch, split and materialize.

    Archives are handled in index order. Downloads may run on a bounded worker
    pool (``Settings.max_workers``) but every filesystem call happens on the
    calling thread, one archive at a time.
    """

    def __init__(
        self,
        settings: Settings,
        filesystem: VaultFilesystem,
        client: ChesscomArchiveClient | None = None,
        *,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.settings = settings
        self.filesystem = filesystem
        self.client = client or ChesscomArchiveClient.for_settings(settings)
        self.logger = logger
        self._sleep = sleep

    def run(self, cancel_event: threading.Event | None = None) -> SyncSummary:
        """Run the sync.

        Args:
            cancel_event: When set, the run stops before the next archive.

        Returns:
            Counters for the run.

        Raises:
            ValueError: When no username is configured.
            RemoteUnavailable: When the archive index cannot be fetched.
        """

        if not self.settings.username:
            raise ValueError("A chess.com username is required")
        summary = SyncSummary()
        references = self._call_with_retry(self.client.fetch_archive_index)
        summary.archives_listed = len(references)
        self.logger.info(
            "Found %s archives for %s", len(references), self.settings.username
        )
        included = list(
            select_archives(
                references,
                self.settings.cutoff,
                on_excluded=lambda reference, _date: self._count_excluded(summary, reference),
                on_malformed=lambda error: self._record_failure(summary, error),
            )
        )
        summary.archives_included = len(included)
        handled = 0
        for reference, date, fetched in self._iter_monthly_pgns(included, cancel_event):
            self._process_month(summary, reference, date, fetched)
            handled += 1
        if handled < len(included):
            summary.cancelled = True
            self.logger.warning(
                "Sync cancelled after %s of %s archives", handled, len(included)
            )
        self.logger.info("Sync finished: %s", summary.describe())
        return summary

    def _count_excluded(self, summary: SyncSummary, reference: str) -> None:
        summary.archives_excluded += 1
        self.logger.debug("Skipping %s; before cutoff %s", reference, self.settings.cutoff.label)

    def _record_failure(self, summary: SyncSummary, error: PgnVaultError) -> None:
        self.logger.warning("%s", error)
        summary.record_error(error)

    def _call_with_retry(self, func: Callable[..., T], *args: object) -> T:
        retrying = Retrying(
            retry=retry_if_exception(_is_transient),
            stop=stop_after_attempt(self.settings.max_retries + 1),
            wait=_backoff_wait(self.settings.retry_backoff_s),
            reraise=True,
            before_sleep=before_sleep_log(self.logger, logging.WARNING),
            sleep=self._sleep,
        )
        return retrying(func, *args)

    def _fetch_month(self, date: ArchiveDate) -> str | RemoteUnavailable:
        try:
            return self._call_with_retry(self.client.fetch_monthly_pgn, date)
        except RemoteUnavailable as exc:
            return exc

    def _iter_monthly_pgns(
        self,
        included: list[tuple[str, ArchiveDate]],
        cancel_event: threading.Event | None,
    ) -> Iterator[MonthFetch]:
        """Yield each included archive with its PGN text or fetch error, in order."""
        if self.settings.max_workers <= 1 or len(included) <= 1:
            for reference, date in included:
                if cancel_event is not None and cancel_event.is_set():
                    return
                yield reference, date, self._fetch_month(date)
            return
        # At most max_workers downloads are queued or held at any time.
        months = iter(included)
        pending: deque[tuple[str, ArchiveDate, Future[str | RemoteUnavailable]]] = deque()
        with ThreadPoolExecutor(
            max_workers=self.settings.max_workers, thread_name_prefix="pgnvault-fetch"
        ) as executor:

            def _submit_next() -> None:
                month = next(months, None)
                if month is not None:
                    reference, date = month
                    pending.append((reference, date, executor.submit(self._fetch_month, date)))

            try:
                for _ in range(self.settings.max_workers):
                    _submit_next()
                while pending:
                    if cancel_event is not None and cancel_event.is_set():
                        return
                    reference, date, future = pending.popleft()
                    fetched = future.result()
                    _submit_next()
                    yield reference, date, fetched
            finally:
                for _, _, future in pending:
                    future.cancel()

    def _process_month(
        self,
        summary: SyncSummary,
        reference: str,
        date: ArchiveDate,
        fetched: str | RemoteUnavailable,
    ) -> None:
        if isinstance(fetched, RemoteUnavailable):
            self.logger.warning("Failed to fetch archive %s: %s", reference, fetched)
            summary.record_error(fetched)
            return
        summary.archives_processed += 1
        try:
            if persist_monthly_pgn(
                self.filesystem,
                self.settings.output_folder,
                self.settings.monthly_pgn_folder,
                date,
                fetched,
                policy=self.settings.monthly_pgn_policy,
            ):
                summary.monthly_pgns_written += 1
        except FilesystemFailure as exc:
            self._record_failure(summary, exc)
        records = split_pgn_records(fetched)
        self.logger.info("Found %s games in %s", len(records), date.label)
        for record in records:
            self._materialize(summary, record)

    def _materialize(self, summary: SyncSummary, record: str) -> None:
        try:
            outcome = materialize_game_record(
                self.filesystem,
                self.settings.output_folder,
                record,
                extension=self.settings.game_file_extension,
            )
        except (MissingRequiredField, FilesystemFailure) as exc:
            self._record_failure(summary, exc)
            return
        if outcome is MaterializeOutcome.WRITTEN:
            summary.games_written += 1
        else:
            summary.games_skipped += 1


def run_sync(
    settings: Settings,
    *,
    filesystem: VaultFilesystem | None = None,
    client: ChesscomArchiveClient | None = None,
    cancel_event: threading.Event | None = None,
) -> SyncSummary:
    """Run one sync into ``settings.vault_dir`` (or the given filesystem)."""
    vault = filesystem or LocalVaultFilesystem(settings.vault_dir)
    return ArchiveSync(settings, vault, client).run(cancel_event)


__all__ = [
    "ArchiveSync",
    "run_sync",
]
