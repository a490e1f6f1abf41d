"""
Tests for clone target derivation.
"""

import pytest

from conftest import make_project
from harvest_agent.config import CloneProtocol
from harvest_agent.targets import CloneTarget, build_clone_target, insert_credential


class TestInsertCredential:
    """Tests for insert_credential."""

    def test_basic(self):
        assert insert_credential("https://gitlab.com/a/b.git", "TOK123") == "https://TOK123@gitlab.com/a/b.git"

    def test_preserves_port_and_path(self):
        url = "https://git.example.com:8443/group/sub/repo.git"
        assert insert_credential(url, "T") == "https://T@git.example.com:8443/group/sub/repo.git"

    def test_replaces_existing_userinfo(self):
        assert insert_credential("https://old@gitlab.com/a/b.git", "new") == "https://new@gitlab.com/a/b.git"

    def test_http_scheme_kept(self):
        assert insert_credential("http://gitlab.local/a/b.git", "T") == "http://T@gitlab.local/a/b.git"

    def test_empty_credential(self):
        """An empty credential still produces an (unauthenticated) userinfo segment."""
        assert insert_credential("https://gitlab.com/a/b.git", "") == "https://@gitlab.com/a/b.git"


class TestBuildCloneTarget:
    """Tests for build_clone_target."""

    def test_https(self):
        record = make_project("a/b", 1)

        target = build_clone_target(record, CloneProtocol.HTTPS, "TOK123")

        assert target.path == "a/b"
        assert target.url == "https://gitlab.com/a/b.git"
        assert target.clone_url == "https://TOK123@gitlab.com/a/b.git"

    def test_ssh(self):
        record = make_project("a/b", 1)

        target = build_clone_target(record, CloneProtocol.SSH, "TOK123")

        assert target.url == "git@gitlab.com:a/b.git"
        assert target.clone_url == "git@gitlab.com:a/b.git"

    def test_record_not_mutated(self):
        record = make_project("a/b", 1)
        before = dict(record)

        build_clone_target(record, CloneProtocol.HTTPS, "TOK123")

        assert record == before


class TestCloneTarget:
    """Tests for the CloneTarget value object."""

    def test_to_dict(self):
        target = CloneTarget(path="a/b", url="u", clone_url="c")
        assert target.to_dict() == {"path": "a/b", "url": "u", "clone_url": "c"}

    def test_repr_masks_credential(self):
        target = CloneTarget(
            path="a/b",
            url="https://gitlab.com/a/b.git",
            clone_url="https://TOK123@gitlab.com/a/b.git",
        )
        assert "TOK123" not in repr(target)

    def test_immutable(self):
        target = CloneTarget(path="a/b", url="u", clone_url="c")
        with pytest.raises(AttributeError):
            target.path = "x"
