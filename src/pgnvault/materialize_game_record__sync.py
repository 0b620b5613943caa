"""Write one game record to its own file unless it already exists."""

from __future__ import annotations

from enum import StrEnum

from pgnvault.errors import FilesystemFailure
from pgnvault.pgn_headers import extract_game_file_key
from pgnvault.utils import get_logger
from pgnvault.vault_fs import VaultFilesystem, join_vault_path, normalize_vault_path

logger = get_logger(__name__)

FENCE_OPEN = "```\n"
FENCE_CLOSE = "\n```\n"


class MaterializeOutcome(StrEnum):
    WRITTEN = "written"
    SKIPPED = "skipped"


def ensure_folder(filesystem: VaultFilesystem, folder: str) -> None:
    """Create ``folder`` if it does not exist yet.

    Raises:
        FilesystemFailure: When the check or the mkdir is rejected.
    """

    path = normalize_vault_path(folder)
    try:
        if not filesystem.exists(path):
            filesystem.mkdir(path)
    except OSError as exc:
        raise FilesystemFailure(path, exc) from exc


def materialize_game_record(
    filesystem: VaultFilesystem,
    folder: str,
    record: str,
    *,
    extension: str = "md",
) -> MaterializeOutcome:
    """Materialize ``record`` as a fenced file under ``folder``.

    The file is created with the opening fence and then appended to, so an
    interrupted write leaves a file without its closing fence.

    Args:
        filesystem: Vault filesystem to write to.
        folder: Vault-relative folder holding game files.
        record: Text of one game.
        extension: File extension for game files.

    Returns:
        Whether the file was written or skipped because it already existed.

    Raises:
        MissingRequiredField: When the record lacks a header used in the name.
        FilesystemFailure: When the filesystem rejects an operation.
    """

    key = extract_game_file_key(record)
    path = join_vault_path(folder, key.filename(extension))
    try:
        if filesystem.exists(path):
            logger.debug("Skipping %s; file exists", path)
            return MaterializeOutcome.SKIPPED
    except OSError as exc:
        raise FilesystemFailure(path, exc) from exc
    ensure_folder(filesystem, folder)
    try:
        filesystem.write(path, FENCE_OPEN)
        filesystem.append(path, record)
        filesystem.append(path, FENCE_CLOSE)
    except OSError as exc:
        raise FilesystemFailure(path, exc) from exc
    return MaterializeOutcome.WRITTEN
