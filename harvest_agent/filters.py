"""Inclusion policy applied to each raw project record."""

from __future__ import annotations

from typing import Any

from .config import ClonePolicy

REASON_NAMESPACE = "namespace"
REASON_ARCHIVED = "archived"


def rejection_reason(record: dict[str, Any], policy: ClonePolicy) -> str | None:
    """
    Return why a record is excluded, or None if it is accepted.

    Both checks are evaluated independently of any other record.
    """
    if policy.namespace_filter_enabled:
        path = str(record.get("path_with_namespace", "")).lower()
        if not path.startswith(policy.namespace.lower()):
            return REASON_NAMESPACE

    if policy.skip_archived and record.get("archived") is True:
        return REASON_ARCHIVED

    return None


def accepts(record: dict[str, Any], policy: ClonePolicy) -> bool:
    """Return True if the record should become a clone target."""
    return rejection_reason(record, policy) is None
