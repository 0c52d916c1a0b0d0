"""Whole-file JSON persistence for the search index.

The snapshot is written to a temporary file beside the target and renamed
over it; if the rename fails a single direct write is attempted. Loading never
raises: a missing file and a corrupt file both produce an empty snapshot, but
the returned `LoadOutcome` tells them apart and carries the decode error.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import List, Literal, Optional

from pydantic import ValidationError

from pagedex.exceptions import (
    PersistenceError,
    SnapshotCorruptionError,
    SnapshotReadError,
)
from pagedex.storage.models import Document, DocumentList, Snapshot

logger = logging.getLogger(__name__)

LoadStatus = Literal["ok", "missing", "corrupt"]


@dataclass(slots=True)
class LoadOutcome:
    """Result of `SnapshotStore.load()`."""

    snapshot: Snapshot
    status: LoadStatus
    corruption: Optional[SnapshotCorruptionError] = None

    @property
    def recovered(self) -> bool:
        """True when the snapshot is empty because the file was unreadable or corrupt."""
        return self.status == "corrupt"


class SnapshotStore:
    """Reads and writes a single snapshot file."""

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)

    @property
    def temp_path(self) -> Path:
        return self.path.with_name(self.path.name + ".tmp")

    def exists(self) -> bool:
        return self.path.exists()

    def load(self) -> LoadOutcome:
        """Load the snapshot, recovering to an empty one on any read or decode failure."""
        if not self.path.exists():
            return LoadOutcome(snapshot=Snapshot(), status="missing")
        try:
            raw = self.path.read_text(encoding="utf-8")
            snapshot = Snapshot.model_validate_json(raw)
        except (OSError, UnicodeDecodeError, ValidationError) as exc:
            corruption = SnapshotCorruptionError(self.path, str(exc), cause=exc)
            logger.warning("Ignoring unreadable index snapshot at %s: %s", self.path, exc)
            return LoadOutcome(snapshot=Snapshot(), status="corrupt", corruption=corruption)
        return LoadOutcome(snapshot=snapshot, status="ok")

    def read_documents(self) -> List[Document]:
        """Strictly read only the document list, ignoring the persisted inverted index.

        Raises `SnapshotReadError` on I/O failure and `SnapshotCorruptionError`
        when the file cannot be decoded. A missing file yields no documents.
        """
        if not self.path.exists():
            return []
        try:
            raw = self.path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise SnapshotReadError(f"Failed to read index file {self.path}: {exc}") from exc
        try:
            return DocumentList.model_validate_json(raw).docs
        except ValidationError as exc:
            raise SnapshotCorruptionError(self.path, str(exc), cause=exc) from exc

    def save(self, snapshot: Snapshot) -> None:
        """Persist `snapshot` atomically, falling back once to a direct write."""
        try:
            serialized = snapshot.model_dump_json(indent=2)
        except (ValueError, TypeError) as exc:
            raise PersistenceError(f"Failed to serialize index: {exc}") from exc

        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise PersistenceError(f"Failed to create index directory {self.path.parent}: {exc}") from exc

        tmp = self.temp_path
        try:
            tmp.write_text(serialized, encoding="utf-8")
            os.replace(tmp, self.path)
            return
        except OSError as exc:
            logger.warning("Atomic write of %s failed (%s); writing in place", self.path, exc)
            atomic_error = exc

        try:
            self.path.write_text(serialized, encoding="utf-8")
        except OSError as exc:
            raise PersistenceError(
                f"Failed to write index file {self.path}: {atomic_error}; {exc}"
            ) from exc
        finally:
            if tmp.exists():
                try:
                    tmp.unlink()
                except OSError:
                    logger.debug("Could not remove temporary file %s", tmp)
