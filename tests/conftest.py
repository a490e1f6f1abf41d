"""Shared fixtures for harvester tests."""

from __future__ import annotations

from typing import Any

import pytest

from harvest_agent.config import ClonePolicy
from harvest_agent.pagination import PageInfo


def make_project(
    path: str,
    project_id: int,
    archived: bool = False,
    host: str = "gitlab.com",
) -> dict[str, Any]:
    """Build a GitLab project record with the fields the harvester reads."""
    return {
        "id": project_id,
        "name": path.rsplit("/", 1)[-1],
        "path_with_namespace": path,
        "archived": archived,
        "http_url_to_repo": f"https://{host}/{path}.git",
        "ssh_url_to_repo": f"git@{host}:{path}.git",
        "visibility": "private",
    }


class FakeLister:
    """
    Listing function serving pre-built pages.

    ``pages`` maps page index to a record list; ``fail_on`` maps page index to
    an exception raised instead of returning that page.
    """

    def __init__(self, pages: dict[int, list[dict[str, Any]]], fail_on: dict[int, Exception] | None = None):
        self.pages = pages
        self.fail_on = fail_on or {}
        self.calls: list[tuple[str, int, int]] = []

    def __call__(self, scope, cursor):
        self.calls.append((scope, cursor.page, cursor.page_size))
        if cursor.page in self.fail_on:
            raise self.fail_on[cursor.page]
        total = len(self.pages)
        next_page = cursor.page + 1 if cursor.page < total else None
        return self.pages[cursor.page], PageInfo(
            current_page=cursor.page,
            total_pages=total,
            next_page=next_page,
        )

    @property
    def visited_pages(self) -> list[int]:
        return [page for _, page, _ in self.calls]


@pytest.fixture
def policy() -> ClonePolicy:
    """Default policy: no filters, HTTPS with a token."""
    return ClonePolicy(token="TOK123", org_label="org")


@pytest.fixture
def clean_env(monkeypatch):
    """Remove harvester variables from the environment and skip .env loading."""
    for key in (
        "GHORG_GITLAB_DEFAULT_NAMESPACE",
        "GHORG_SKIP_ARCHIVED",
        "GHORG_CLONE_PROTOCOL",
        "GHORG_GITLAB_TOKEN",
        "GHORG_SCM_BASE_URL",
        "GHORG_ABSOLUTE_PATH_TO_CLONE_TO",
        "GHORG_ORG_TO_CLONE",
        "GHORG_TIMEOUT",
        "GHORG_VERIFY_SSL",
    ):
        monkeypatch.delenv(key, raising=False)
    monkeypatch.setattr("harvest_agent.config.load_dotenv", lambda *a, **kw: False)
    return monkeypatch
