"""Persist the raw PGN blob of one archive month."""

from __future__ import annotations

from pgnvault.archive_dates import ArchiveDate
from pgnvault.config import MonthlyPgnPolicy
from pgnvault.errors import FilesystemFailure
from pgnvault.materialize_game_record__sync import ensure_folder
from pgnvault.utils import get_logger
from pgnvault.vault_fs import VaultFilesystem, join_vault_path

logger = get_logger(__name__)


def monthly_pgn_path(folder: str, monthly_pgn_folder: str, date: ArchiveDate) -> str:
    return join_vault_path(folder, monthly_pgn_folder, f"{date.label}.pgn")


def persist_monthly_pgn(
    filesystem: VaultFilesystem,
    folder: str,
    monthly_pgn_folder: str,
    date: ArchiveDate,
    text: str,
    *,
    policy: MonthlyPgnPolicy = MonthlyPgnPolicy.OVERWRITE,
) -> bool:
    """Write the month's PGN blob to ``<folder>/<monthly_pgn_folder>/YYYY-MM.pgn``.

    Returns:
        True when the file was written, False when ``policy`` kept an
        existing file.

    Raises:
        FilesystemFailure: When the filesystem rejects an operation.
    """

    pgn_folder = join_vault_path(folder, monthly_pgn_folder)
    path = monthly_pgn_path(folder, monthly_pgn_folder, date)
    ensure_folder(filesystem, pgn_folder)
    try:
        if policy is MonthlyPgnPolicy.SKIP_EXISTING and filesystem.exists(path):
            logger.debug("Keeping existing monthly PGN %s", path)
            return False
        filesystem.write(path, text)
    except OSError as exc:
        raise FilesystemFailure(path, exc) from exc
    logger.info("Saved monthly PGN %s", path)
    return True
