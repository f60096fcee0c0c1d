"""Exception hierarchy for the persistence pipeline."""

from __future__ import annotations

from typing import Any, Dict, Optional


class SlackVaultError(Exception):
    """Root error; never raised directly."""

    def __init__(self, message: str, *, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} ({self.details})"
        return self.message


class InvalidResultError(SlackVaultError):
    """The fetched result has neither a failure nor a usable structured shape."""


class StorageError(SlackVaultError):
    """A file-store call failed."""

    def __init__(self, message: str, *, path: str | None = None, details=None) -> None:
        super().__init__(message, details=details)
        self.path = path


class FileAlreadyExistsError(StorageError):
    """Creation refused because the path already holds a file."""


class TransportError(SlackVaultError):
    """Attachment download failed or returned a non-2xx status."""

    def __init__(self, message: str, *, url: str, status_code: int | None = None) -> None:
        super().__init__(message, details={"url": url, "status_code": status_code})
        self.url = url
        self.status_code = status_code
