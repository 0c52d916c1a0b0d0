"""Custom exception hierarchy for Pagedex.

These exceptions allow callers to discriminate error categories
and handle them appropriately while preserving the original context.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional


class PagedexError(Exception):
    """Base class for all Pagedex exceptions."""


class ConfigError(PagedexError):
    """Raised when configuration loading or validation fails."""


class ParsingError(PagedexError):
    """Raised when page markup fails to parse."""


class SearchError(PagedexError):
    """Raised for search indexing/query issues."""


class StorageError(PagedexError):
    """Raised when the snapshot file cannot be read or written."""


class PersistenceError(StorageError):
    """Raised when a snapshot could not be written by either the atomic or the direct path."""


class SnapshotReadError(StorageError):
    """Raised when the snapshot file exists but cannot be read."""


class SnapshotCorruptionError(StorageError):
    """Raised (or recorded on a load outcome) when the snapshot file cannot be decoded."""

    def __init__(self, path: Path, detail: str, *, cause: Optional[BaseException] = None) -> None:
        super().__init__(f"Corrupt snapshot at {path}: {detail}")
        self.path = path
        self.detail = detail
        self.cause = cause
