"""Custom error types used in pgnvault.

Every error carries a ``category`` used by the sync summary to count failures.
"""

from __future__ import annotations

import requests


class PgnVaultError(Exception):
    """Base class for pgnvault failures."""

    category = "error"


class RemoteUnavailable(PgnVaultError, requests.RequestException):
    """The chess.com endpoint could not be reached or answered with an error."""

    category = "remote_unavailable"

    def __init__(
        self,
        message: str,
        *,
        url: str | None = None,
        response: requests.Response | None = None,
    ) -> None:
        super().__init__(message, response=response)
        self.url = url


class RateLimitError(RemoteUnavailable):
    """HTTP rate limit error."""

    def __init__(
        self,
        message: str,
        *,
        url: str | None = None,
        response: requests.Response | None = None,
        retry_after: float | None = None,
    ) -> None:
        super().__init__(message, url=url, response=response)
        self.retry_after = retry_after


class MalformedArchiveReference(PgnVaultError, ValueError):
    """An archive URL does not end in ``YYYY/MM``."""

    category = "malformed_archive_reference"

    def __init__(self, reference: str, reason: str) -> None:
        super().__init__(f"Malformed archive reference {reference!r}: {reason}")
        self.reference = reference


class MissingRequiredField(PgnVaultError, ValueError):
    """A game record lacks one or more of the tags used to name its file."""

    category = "missing_required_field"

    def __init__(self, missing: list[str]) -> None:
        super().__init__(f"Game record is missing required tags: {', '.join(missing)}")
        self.missing = list(missing)


class FilesystemFailure(PgnVaultError, OSError):
    """The vault filesystem rejected a mkdir, write or append."""

    category = "filesystem_failure"

    def __init__(self, path: str, cause: BaseException) -> None:
        super().__init__(f"Filesystem operation failed for {path}: {cause}")
        self.path = path


ERROR_CATEGORIES = (
    RemoteUnavailable.category,
    MalformedArchiveReference.category,
    MissingRequiredField.category,
    FilesystemFailure.category,
)

__all__ = [
    "ERROR_CATEGORIES",
    "FilesystemFailure",
    "MalformedArchiveReference",
    "MissingRequiredField",
    "PgnVaultError",
    "RateLimitError",
    "RemoteUnavailable",
]
