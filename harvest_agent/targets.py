"""Clone target derivation from raw project records."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any
from urllib.parse import urlsplit, urlunsplit

from .config import CloneProtocol
from .logging_config import mask_credentials


@dataclass(frozen=True)
class CloneTarget:
    """A repository ready to be cloned."""
    path: str
    url: str
    clone_url: str

    def to_dict(self) -> dict[str, str]:
        return {"path": self.path, "url": self.url, "clone_url": self.clone_url}

    def __repr__(self) -> str:
        return (
            f"CloneTarget(path={self.path!r}, url={self.url!r}, "
            f"clone_url={mask_credentials(self.clone_url)!r})"
        )


def insert_credential(url: str, credential: str) -> str:
    """
    Put ``credential`` into the userinfo part of an HTTP(S) URL.

    Scheme, host, port, path, query and fragment are kept as-is. Any userinfo
    already present is replaced. An empty credential still yields ``scheme://@host``.
    """
    parts = urlsplit(url)
    host = parts.netloc.rpartition("@")[2]
    return urlunsplit((parts.scheme, f"{credential}@{host}", parts.path, parts.query, parts.fragment))


def build_clone_target(
    record: dict[str, Any],
    protocol: CloneProtocol,
    credential: str = "",
) -> CloneTarget:
    """
    Convert an accepted project record into a CloneTarget.

    Args:
        record: Raw GitLab project record
        protocol: https embeds the credential, ssh uses the remote unchanged
        credential: Token placed into HTTPS clone URLs

    Returns:
        CloneTarget for the record
    """
    path = record["path_with_namespace"]

    if protocol == CloneProtocol.HTTPS:
        url = record["http_url_to_repo"]
        return CloneTarget(path=path, url=url, clone_url=insert_credential(url, credential))

    url = record["ssh_url_to_repo"]
    return CloneTarget(path=path, url=url, clone_url=url)
