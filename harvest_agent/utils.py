"""
Utility functions for the harvester.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any


def write_json(path: Path, data: Any, indent: int = 2) -> None:
    """
    Write data to JSON file, creating parent directories.

    Args:
        path: File path
        data: Data to serialize
        indent: JSON indentation
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=indent, ensure_ascii=False, sort_keys=False)
