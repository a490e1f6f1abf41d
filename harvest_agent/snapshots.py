"""
Best-effort JSON snapshots of raw project records.

Layout: ``{root}/{path_with_namespace}/{id}.json``. Rewriting a record
overwrites its file in place, so repeated runs never duplicate snapshots.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from .errors import SnapshotWriteError
from .utils import write_json

logger = logging.getLogger(__name__)

SNAPSHOT_INDENT = 1


class SnapshotWriter:
    """Persist accepted project records under a snapshot root."""

    def __init__(self, root: Path | str):
        self.root = Path(root)

    def path_for(self, record: dict[str, Any]) -> Path:
        """Return the snapshot file path for a record."""
        return self.root / record["path_with_namespace"] / f"{record['id']}.json"

    def write(self, record: dict[str, Any]) -> Path:
        """
        Write the record as indented JSON, replacing any previous snapshot.

        Raises:
            SnapshotWriteError: If the record lacks its path or id, or the
                directory or file cannot be written
        """
        path = None
        try:
            path = self.path_for(record)
            write_json(path, record, indent=SNAPSHOT_INDENT)
        except (KeyError, OSError, TypeError, ValueError) as e:
            where = path if path is not None else record.get("path_with_namespace")
            raise SnapshotWriteError(f"Error writing snapshot {where}: {e}", path=path, cause=e) from e

        logger.debug(f"Wrote snapshot {path}")
        return path
