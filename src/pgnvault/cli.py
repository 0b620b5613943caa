"""Command line entry point for a one-off sync."""

from __future__ import annotations

import argparse
import logging
import signal
import threading
from collections.abc import Sequence

from pgnvault.config import MonthlyPgnPolicy, get_settings, parse_cutoff
from pgnvault.errors import RemoteUnavailable
from pgnvault.sync_archives import run_sync
from pgnvault.utils import get_logger, set_level

logger = get_logger(__name__)

EXIT_OK = 0
EXIT_INDEX_UNAVAILABLE = 1
EXIT_BAD_CONFIG = 2
EXIT_CANCELLED = 130


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pgnvault",
        description="Mirror chess.com monthly game archives into a folder of Markdown files.",
    )
    parser.add_argument("--user", dest="username", help="chess.com username")
    parser.add_argument("--folder", dest="output_folder", help="Folder for game files, inside the vault")
    parser.add_argument("--vault-dir", dest="vault_dir", help="Vault root directory")
    parser.add_argument(
        "--since",
        help="Only sync archives on or after this month (YYYY-MM)",
    )
    parser.add_argument("--workers", dest="max_workers", type=int, help="Concurrent archive downloads")
    parser.add_argument(
        "--monthly-pgn-policy",
        choices=[policy.value for policy in MonthlyPgnPolicy],
        help="Overwrite monthly PGN files on every run or keep existing ones",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Parse arguments, run one sync and print its summary.

    Returns:
        Process exit code.
    """

    args = build_parser().parse_args(argv)
    if args.verbose:
        set_level(logging.DEBUG)
    try:
        cutoff = parse_cutoff(args.since) if args.since else None
        settings = get_settings(
            username=args.username,
            output_folder=args.output_folder,
            vault_dir=args.vault_dir,
            cutoff_year=cutoff.year if cutoff else None,
            cutoff_month=cutoff.month if cutoff else None,
            max_workers=args.max_workers,
            monthly_pgn_policy=args.monthly_pgn_policy,
        )
        if not settings.username:
            raise ValueError("A chess.com username is required (--user or PGNVAULT_USERNAME)")
    except ValueError as exc:
        logger.error("Invalid configuration: %s", exc)
        return EXIT_BAD_CONFIG

    cancel_event = threading.Event()
    previous_handler = signal.getsignal(signal.SIGINT)

    def _request_cancel(_signum: int, _frame: object) -> None:
        logger.warning("Interrupt received; stopping after the current archive")
        cancel_event.set()

    if threading.current_thread() is threading.main_thread():
        signal.signal(signal.SIGINT, _request_cancel)
    try:
        summary = run_sync(settings, cancel_event=cancel_event)
    except RemoteUnavailable as exc:
        logger.error("Could not fetch the archive index for %s: %s", settings.username, exc)
        return EXIT_INDEX_UNAVAILABLE
    finally:
        if threading.current_thread() is threading.main_thread():
            signal.signal(signal.SIGINT, previous_handler)

    print(summary.describe())
    return EXIT_CANCELLED if summary.cancelled else EXIT_OK
