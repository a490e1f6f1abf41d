"""
Tests for the command line entry point.
"""

import json
import logging
from unittest.mock import patch

import pytest

from harvest_agent.__main__ import build_parser, main
from harvest_agent.config import CloneProtocol
from harvest_agent.errors import PageFetchError
from harvest_agent.targets import CloneTarget


@pytest.fixture(autouse=True)
def restore_logging():
    """Undo the handlers and levels main() installs."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    package_level = logging.getLogger("harvest_agent").level
    yield
    for handler in root.handlers[:]:
        root.removeHandler(handler)
    for handler in handlers:
        root.addHandler(handler)
    root.setLevel(level)
    logging.getLogger("harvest_agent").setLevel(package_level)


TARGETS = [
    CloneTarget(path="org/a", url="https://gitlab.com/org/a.git", clone_url="https://T@gitlab.com/org/a.git"),
    CloneTarget(path="org/b", url="https://gitlab.com/org/b.git", clone_url="https://T@gitlab.com/org/b.git"),
]


def test_parser_scope_choices():
    with pytest.raises(SystemExit):
        build_parser().parse_args(["project", "org"])


class TestMain:
    """Tests for main()."""

    def test_group_prints_targets(self, clean_env, capsys):
        with patch("harvest_agent.__main__.get_group_clone_targets", return_value=TARGETS) as harvest:
            code = main(["group", "org", "--token", "T", "-q"])

        assert code == 0
        policy, group = harvest.call_args[0]
        assert group == "org"
        assert policy.token == "T"
        assert policy.org_label == "org"
        out = capsys.readouterr().out.splitlines()
        assert out == ["org/a\thttps://gitlab.com/org/a.git", "org/b\thttps://gitlab.com/org/b.git"]

    def test_user_scope_with_options(self, clean_env):
        with patch("harvest_agent.__main__.get_user_clone_targets", return_value=[]) as harvest:
            code = main([
                "user", "jdoe", "--token", "T", "--protocol", "ssh",
                "--skip-archived", "--namespace", "jdoe/x", "--org-label", "people", "-q",
            ])

        assert code == 0
        policy, user = harvest.call_args[0]
        assert user == "jdoe"
        assert policy.clone_protocol is CloneProtocol.SSH
        assert policy.skip_archived is True
        assert policy.namespace == "jdoe/x"
        assert policy.org_label == "people"

    def test_out_writes_json(self, clean_env, tmp_path):
        out_file = tmp_path / "targets.json"
        with patch("harvest_agent.__main__.get_group_clone_targets", return_value=TARGETS):
            code = main(["group", "org", "--token", "T", "--out", str(out_file), "-q"])

        assert code == 0
        data = json.loads(out_file.read_text(encoding="utf-8"))
        assert data[0] == {
            "path": "org/a",
            "url": "https://gitlab.com/org/a.git",
            "clone_url": "https://T@gitlab.com/org/a.git",
        }

    def test_fetch_error_exits_nonzero(self, clean_env, capsys):
        error = PageFetchError("Listing org failed at page 1 with status 404", status_code=404)
        with patch("harvest_agent.__main__.get_group_clone_targets", side_effect=error):
            code = main(["group", "org", "--token", "T", "-q"])

        assert code == 1
        assert capsys.readouterr().out == ""

    def test_runs_without_token(self, clean_env):
        """No token means unauthenticated listing, not a failure."""
        with patch("harvest_agent.__main__.get_group_clone_targets", return_value=[]) as harvest:
            code = main(["group", "org", "--protocol", "ssh", "-q"])

        assert code == 0
        policy, _ = harvest.call_args[0]
        assert policy.token == ""

    def test_malformed_token_exits_nonzero(self, clean_env):
        """Client construction rejects a token containing whitespace."""
        assert main(["group", "org", "--token", "bad token", "-q"]) == 1

    def test_invalid_env_protocol_exits_nonzero(self, clean_env):
        clean_env.setenv("GHORG_CLONE_PROTOCOL", "ftp")
        assert main(["group", "org", "--token", "T", "-q"]) == 1
