"""Error taxonomy for clone-target harvesting."""

from __future__ import annotations

from pathlib import Path
from typing import Any


class HarvestError(Exception):
    """Base exception for harvester errors."""
    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ConfigurationError(HarvestError):
    """Raised when environment or CLI settings are invalid."""


class ClientConstructionError(HarvestError):
    """Raised when a GitLab client cannot be built from the given settings."""


class PageFetchError(HarvestError):
    """
    Raised when a listing call fails.

    Not-found, unauthorized and network failures all surface as this one type.
    Callers that need finer handling can inspect ``status_code`` or ``cause``.
    """
    def __init__(
        self,
        message: str,
        scope: str | None = None,
        page: int | None = None,
        status_code: int | None = None,
        response: Any = None,
        cause: Exception | None = None,
    ):
        super().__init__(message)
        self.scope = scope
        self.page = page
        self.status_code = status_code
        self.response = response
        self.cause = cause


class SnapshotWriteError(HarvestError):
    """Raised when a metadata snapshot cannot be written."""
    def __init__(self, message: str, path: Path | None = None, cause: Exception | None = None):
        super().__init__(message)
        self.path = path
        self.cause = cause
