"""PGNVAULT package entrypoints."""

from pgnvault.archive_dates import ArchiveDate, is_on_or_after, parse_archive_date
from pgnvault.config import MonthlyPgnPolicy, Settings, get_settings
from pgnvault.pgn_headers import GameFileKey, extract_game_file_key, parse_pgn_headers
from pgnvault.split_pgn_records import split_pgn_records
from pgnvault.sync_archives import ArchiveSync, run_sync
from pgnvault.sync_summary import SyncSummary
from pgnvault.vault_fs import LocalVaultFilesystem, VaultFilesystem, normalize_vault_path

__version__ = "0.1.0"

__all__ = [
    "ArchiveDate",
    "ArchiveSync",
    "GameFileKey",
    "LocalVaultFilesystem",
    "MonthlyPgnPolicy",
    "Settings",
    "SyncSummary",
    "VaultFilesystem",
    "extract_game_file_key",
    "get_settings",
    "is_on_or_after",
    "normalize_vault_path",
    "parse_archive_date",
    "parse_pgn_headers",
    "run_sync",
    "split_pgn_records",
]
