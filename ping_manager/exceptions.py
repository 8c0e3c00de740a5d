"""Custom exceptions for the Ping Manager bot."""

from __future__ import annotations


class PingManagerError(Exception):
    """Base exception for Ping Manager errors."""


class StartupError(PingManagerError):
    """Raised when the bot cannot start (missing configuration, failed login)."""


class ValidationError(PingManagerError):
    """Raised when operator input is rejected."""


class RemoteError(PingManagerError):
    """Raised when a call to the CRCON API fails."""

    def __init__(self, status: int | None, message: str) -> None:
        """Initialize the error."""
        super().__init__(message)
        self.status = status
        self.message = message


class StorageError(PingManagerError):
    """Raised when there is an error with storage operations."""


class StorageLoadError(StorageError):
    """Error raised when loading storage fails."""


class StorageSaveError(StorageError):
    """Error raised when saving storage fails."""
