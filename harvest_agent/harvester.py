"""
Harvester - enumerates GitLab projects and turns them into clone targets.

Group scope lists every project in a group and its subgroups and snapshots
each accepted record; user scope lists the projects owned by one account.
"""

from __future__ import annotations

import logging
from typing import Any, Iterator

from .config import ClonePolicy
from .errors import SnapshotWriteError
from .filters import rejection_reason
from .gitlab_client import GitLabClient, create_client
from .pagination import DEFAULT_PAGE_SIZE, ListPage, walk_pages
from .snapshots import SnapshotWriter
from .targets import CloneTarget, build_clone_target

logger = logging.getLogger(__name__)


class GitLabHarvester:
    """
    Produces clone targets for a group or a user.

    Records flow through the filter, the optional snapshot writer and the
    target builder one at a time, in the order the server returns them.
    """

    def __init__(
        self,
        client: GitLabClient,
        policy: ClonePolicy,
        snapshot_writer: SnapshotWriter | None = None,
        page_size: int = DEFAULT_PAGE_SIZE,
    ):
        """
        Initialize the harvester.

        Args:
            client: Client used for the listing endpoints
            policy: Filter and protocol settings
            snapshot_writer: Writer for group-scope snapshots, None to skip them
            page_size: Records requested per page
        """
        self.client = client
        self.policy = policy
        self.snapshot_writer = snapshot_writer
        self.page_size = page_size

    def _snapshot(self, record: dict[str, Any]) -> None:
        try:
            self.snapshot_writer.write(record)
        except SnapshotWriteError as e:
            logger.warning(str(e))

    def _iter_targets(
        self,
        list_page: ListPage,
        scope: str,
        snapshots: bool,
    ) -> Iterator[CloneTarget]:
        for records in walk_pages(list_page, scope, self.page_size):
            for record in records:
                reason = rejection_reason(record, self.policy)
                if reason is not None:
                    logger.debug(f"Skipping {record.get('path_with_namespace')} ({reason})")
                    continue

                if snapshots and self.snapshot_writer is not None:
                    self._snapshot(record)

                yield build_clone_target(record, self.policy.clone_protocol, self.policy.token)

    def iter_group_targets(self, group: str) -> Iterator[CloneTarget]:
        """
        Lazily yield clone targets for every project under a group.

        The generator is single-use; a new call restarts from page 1.

        Raises:
            PageFetchError: When any page fails to load
        """
        if not self.policy.namespace_filter_enabled:
            logger.info(
                "No namespace set, to reduce results use namespace flag "
                "e.g. --namespace=gitlab-org/security-products"
            )
        logger.info(f"Getting GitLab project information for group {group}...")
        return self._iter_targets(self.client.list_group_projects, group, snapshots=True)

    def iter_user_targets(self, user: str) -> Iterator[CloneTarget]:
        """
        Lazily yield clone targets for every project owned by a user.

        Raises:
            PageFetchError: When any page fails to load
        """
        logger.info(f"Getting GitLab project information for user {user}...")
        for target in self._iter_targets(self.client.list_user_projects, user, snapshots=False):
            logger.info(f"Project Path: {target.path}")
            yield target

    def group_clone_targets(self, group: str) -> list[CloneTarget]:
        """Return all clone targets for a group, or raise without a partial list."""
        targets = list(self.iter_group_targets(group))
        logger.info(f"Got GitLab project information: {len(targets)} projects in {group}")
        return targets

    def user_clone_targets(self, user: str) -> list[CloneTarget]:
        """Return all clone targets for a user, or raise without a partial list."""
        targets = list(self.iter_user_targets(user))
        logger.info(f"Got GitLab project information: {len(targets)} projects for {user}")
        return targets


def get_group_clone_targets(policy: ClonePolicy, group: str) -> list[CloneTarget]:
    """
    Build a client from the policy and collect a group's clone targets.

    Snapshots are written under ``policy.snapshot_root``.

    Raises:
        ClientConstructionError: If the client cannot be built
        PageFetchError: If any page fails to load
    """
    with create_client(policy) as client:
        harvester = GitLabHarvester(client, policy, snapshot_writer=SnapshotWriter(policy.snapshot_root))
        return harvester.group_clone_targets(group)


def get_user_clone_targets(policy: ClonePolicy, user: str) -> list[CloneTarget]:
    """
    Build a client from the policy and collect a user's clone targets.

    Raises:
        ClientConstructionError: If the client cannot be built
        PageFetchError: If any page fails to load
    """
    with create_client(policy) as client:
        harvester = GitLabHarvester(client, policy)
        return harvester.user_clone_targets(user)
