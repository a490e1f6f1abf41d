"""
GitLab Harvest Agent - Lists the repositories of a GitLab group or user and
derives clone targets for a bulk clone.

Read-only: no write operations are performed against GitLab.
"""

__version__ = "0.1.0"

from .config import ClonePolicy, CloneProtocol
from .errors import (
    ClientConstructionError,
    ConfigurationError,
    HarvestError,
    PageFetchError,
    SnapshotWriteError,
)
from .gitlab_client import GitLabClient, create_client
from .harvester import GitLabHarvester, get_group_clone_targets, get_user_clone_targets
from .targets import CloneTarget

__all__ = [
    "ClonePolicy",
    "CloneProtocol",
    "CloneTarget",
    "GitLabClient",
    "GitLabHarvester",
    "create_client",
    "get_group_clone_targets",
    "get_user_clone_targets",
    "HarvestError",
    "ConfigurationError",
    "ClientConstructionError",
    "PageFetchError",
    "SnapshotWriteError",
    "__version__",
]
