"""Exception hierarchy for localdrive."""

from __future__ import annotations


class DriveError(Exception):
    """Base error raised by drive operations.

    Attributes:
        path: The id or backing path the failure refers to, when known.
    """

    def __init__(self, message: str, *, path: str | None = None) -> None:
        super().__init__(message)
        self.path = path


class AccessDeniedError(DriveError):
    """Raised when a policy rejects an operation."""


class StorageError(DriveError):
    """Raised when the backing store fails."""


class NotFoundError(StorageError):
    """Raised when the backing store has nothing at the requested path."""


class ConflictError(DriveError):
    """Raised for folder/file mismatches and folders copied into themselves."""


class ConfigError(DriveError):
    """Raised when a drive cannot be constructed from its configuration."""


__all__ = [
    "DriveError",
    "AccessDeniedError",
    "StorageError",
    "NotFoundError",
    "ConflictError",
    "ConfigError",
]
