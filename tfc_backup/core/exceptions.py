"""Exception classes for TFC Backup."""

from typing import Any


class TfcBackupError(Exception):
    """Base exception for TFC Backup operations."""

    def __init__(self, message: str, context: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.context = context or {}


class PreconditionError(TfcBackupError):
    """A run cannot start: missing credential or malformed arguments."""


class TransportError(TfcBackupError):
    """An API request failed in transport or returned a non-2xx status."""

    def __init__(self, url: str, status: int | None = None, reason: str | None = None) -> None:
        detail = f"HTTP {status}" if status is not None else (reason or "transport failure")
        if status is not None and reason:
            detail = f"{detail}: {reason}"
        super().__init__(f"Request to {url} failed ({detail})", {"url": url, "status": status})
        self.url = url
        self.status = status


class ListingError(TfcBackupError):
    """Discovery of workspaces or variable sets failed."""


class PaginationError(ListingError):
    """A page of a paginated collection could not be fetched or decoded."""

    def __init__(self, page: int, reason: str) -> None:
        super().__init__(f"Failed to fetch variable sets page {page}: {reason}", {"page": page})
        self.page = page


class WorkspaceNotFound(ListingError):
    """A single workspace could not be resolved by name."""

    def __init__(self, name: str, reason: str | None = None) -> None:
        message = f"Workspace not found: {name}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message, {"name": name})
        self.name = name
