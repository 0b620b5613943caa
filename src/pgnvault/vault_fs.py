"""Vault filesystem capability and its local-disk implementation."""

from __future__ import annotations

import re
import unicodedata
from pathlib import Path
from typing import Protocol

_REPEATED_SLASHES = re.compile(r"/+")
_NON_BREAKING_SPACES = str.maketrans({"\u00a0": " ", "\u202f": " "})


def normalize_vault_path(path: str) -> str:
    """Normalize a vault-relative path.

    Backslashes become ``/``, repeated slashes collapse, leading and trailing
    slashes are removed, non-breaking spaces become spaces and the result is
    NFC-normalized. The vault root normalizes to ``"/"``.

    Example:
        >>> normalize_vault_path("//chess\\\\pgn//2024-06.pgn/")
        'chess/pgn/2024-06.pgn'
    """

    value = path.replace("\\", "/").translate(_NON_BREAKING_SPACES)
    value = _REPEATED_SLASHES.sub("/", value).strip("/")
    value = unicodedata.normalize("NFC", value)
    return value or "/"


def join_vault_path(*parts: str) -> str:
    """Join path parts with ``/`` and normalize the result."""
    return normalize_vault_path("/".join(part for part in parts if part))


class VaultFilesystem(Protocol):
    """Filesystem operations the sync needs from its host.

    Paths are vault-relative and already normalized. Implementations signal
    failures by raising ``OSError``.
    """

    def exists(self, path: str) -> bool: ...

    def mkdir(self, path: str) -> None: ...

    def write(self, path: str, content: str) -> None: ...

    def append(self, path: str, content: str) -> None: ...


class LocalVaultFilesystem:
    """``VaultFilesystem`` backed by a directory on local disk."""

    def __init__(self, base_dir: Path | str) -> None:
        self.base_dir = Path(base_dir)

    def _resolve(self, path: str) -> Path:
        relative = normalize_vault_path(path)
        if relative == "/":
            return self.base_dir
        if ".." in relative.split("/"):
            raise PermissionError(f"Path escapes the vault: {path}")
        return self.base_dir / relative

    def exists(self, path: str) -> bool:
        return self._resolve(path).exists()

    def mkdir(self, path: str) -> None:
        self._resolve(path).mkdir(parents=True, exist_ok=True)

    def write(self, path: str, content: str) -> None:
        self._resolve(path).write_text(content, encoding="utf-8")

    def append(self, path: str, content: str) -> None:
        with self._resolve(path).open("a", encoding="utf-8") as handle:
            handle.write(content)
