"""
GitLab REST API client for listing group and user projects.

Supports both GitLab SaaS and self-managed instances.
Only performs GET requests (read-only, safe operations).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any
from urllib.parse import quote, urlsplit

import requests
from requests.exceptions import RequestException

from . import __version__
from .config import ClonePolicy
from .errors import ClientConstructionError, PageFetchError
from .pagination import PageCursor, PageInfo

logger = logging.getLogger(__name__)

API_PREFIX = "/api/v4"


@dataclass
class APICallStats:
    """Track API call statistics."""
    total_calls: int = 0
    successful_calls: int = 0
    failed_calls: int = 0


def _int_or_none(value: str | None) -> int | None:
    if value is None or value == "":
        return None
    try:
        return int(value)
    except ValueError:
        return None


@dataclass
class GitLabResponse:
    """Wrapper for GitLab API responses."""
    status_code: int
    data: Any
    headers: dict[str, str]

    def _header(self, name: str) -> str | None:
        return self.headers.get(name) or self.headers.get(name.lower())

    @property
    def is_success(self) -> bool:
        return 200 <= self.status_code < 300

    @property
    def current_page(self) -> int | None:
        """Get current page number from GitLab pagination headers."""
        return _int_or_none(self._header("X-Page"))

    @property
    def next_page(self) -> int | None:
        """Get next page number from GitLab pagination headers."""
        return _int_or_none(self._header("X-Next-Page"))

    @property
    def total_pages(self) -> int | None:
        """Get total pages from GitLab pagination headers."""
        return _int_or_none(self._header("X-Total-Pages"))

    @property
    def total_items(self) -> int | None:
        """Get total items from GitLab pagination headers."""
        return _int_or_none(self._header("X-Total"))

    def page_info(self, requested_page: int) -> PageInfo:
        """Build pagination info, falling back to the requested page index."""
        current = self.current_page
        return PageInfo(
            current_page=current if current is not None else requested_page,
            total_pages=self.total_pages,
            next_page=self.next_page,
            total_items=self.total_items,
        )


class GitLabClient:
    """
    GitLab REST API client bound to one instance and one token.

    Each listing call issues exactly one request; failures are raised as
    PageFetchError without retrying.

    Usage:
        with GitLabClient("https://gitlab.com", "your-token") as client:
            records, info = client.list_group_projects("my-org", PageCursor())
    """

    DEFAULT_TIMEOUT = 30

    def __init__(
        self,
        base_url: str,
        token: str,
        timeout: int = DEFAULT_TIMEOUT,
        verify_ssl: bool = True,
    ):
        """
        Initialize GitLab client.

        Args:
            base_url: GitLab instance URL (e.g., "https://gitlab.com")
            token: Personal Access Token for authentication
            timeout: Request timeout in seconds
            verify_ssl: Whether to verify SSL certificates
        """
        base_url = base_url.rstrip("/")
        if base_url.endswith(API_PREFIX):
            base_url = base_url[: -len(API_PREFIX)]
        self.base_url = base_url
        self.token = token
        self.timeout = timeout
        self.verify_ssl = verify_ssl
        self.stats = APICallStats()

        # Create session for connection pooling
        self._session = requests.Session()
        self._session.headers.update({
            "Accept": "application/json",
            "User-Agent": f"GitLab-Harvest-Agent/{__version__}",
        })
        if token:
            self._session.headers["PRIVATE-TOKEN"] = token
        self._session.verify = verify_ssl

    def _build_url(self, path: str) -> str:
        """Build full URL from an API path."""
        if not path.startswith("/"):
            path = "/" + path
        return f"{self.base_url}{API_PREFIX}{path}"

    def get(
        self,
        path: str,
        params: dict[str, Any] | None = None,
    ) -> GitLabResponse:
        """
        Perform a single GET request.

        Args:
            path: API path below /api/v4 (e.g., "/groups/123/projects")
            params: Query parameters

        Returns:
            GitLabResponse with status, decoded body and headers

        Raises:
            requests.RequestException: On transport failures
        """
        url = self._build_url(path)
        params = params or {}

        self.stats.total_calls += 1
        logger.debug(f"GET {url} params={params}")
        try:
            response = self._session.get(url, params=params, timeout=self.timeout)
        except RequestException:
            self.stats.failed_calls += 1
            raise

        headers = dict(response.headers)
        try:
            data = response.json()
        except ValueError:
            data = response.text

        if response.status_code < 400:
            self.stats.successful_calls += 1
        else:
            self.stats.failed_calls += 1

        return GitLabResponse(response.status_code, data, headers)

    def _list_page(
        self,
        path: str,
        scope: str,
        cursor: PageCursor,
        params: dict[str, Any] | None = None,
    ) -> tuple[list[dict[str, Any]], PageInfo]:
        params = dict(params or {})
        params["per_page"] = cursor.page_size
        params["page"] = cursor.page

        try:
            response = self.get(path, params)
        except RequestException as e:
            raise PageFetchError(
                f"Listing {scope} failed at page {cursor.page}: {e}",
                scope=scope,
                page=cursor.page,
                cause=e,
            ) from e

        if not response.is_success:
            raise PageFetchError(
                f"Listing {scope} failed at page {cursor.page} with status {response.status_code}",
                scope=scope,
                page=cursor.page,
                status_code=response.status_code,
                response=response.data,
            )

        if not isinstance(response.data, list):
            raise PageFetchError(
                f"Listing {scope} returned a non-list body at page {cursor.page}",
                scope=scope,
                page=cursor.page,
                status_code=response.status_code,
                response=response.data,
            )

        return response.data, response.page_info(cursor.page)

    def list_group_projects(
        self,
        group: str,
        cursor: PageCursor,
    ) -> tuple[list[dict[str, Any]], PageInfo]:
        """
        List one page of projects in a group, subgroups included.

        Args:
            group: Group full path or numeric ID
            cursor: Page size and index to request

        Returns:
            Tuple of (project records, pagination info)
        """
        return self._list_page(
            f"/groups/{quote(str(group), safe='')}/projects",
            group,
            cursor,
            params={"include_subgroups": "true"},
        )

    def list_user_projects(
        self,
        user: str,
        cursor: PageCursor,
    ) -> tuple[list[dict[str, Any]], PageInfo]:
        """
        List one page of projects owned by a user.

        Args:
            user: Username or numeric user ID
            cursor: Page size and index to request

        Returns:
            Tuple of (project records, pagination info)
        """
        return self._list_page(
            f"/users/{quote(str(user), safe='')}/projects",
            user,
            cursor,
        )

    def close(self) -> None:
        """Close the HTTP session."""
        self._session.close()

    def __enter__(self) -> "GitLabClient":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()


def create_client(policy: ClonePolicy) -> GitLabClient:
    """
    Build a client for the policy's instance, authenticated when a token is set.

    Uses the base URL override when one is set, gitlab.com otherwise.
    No request is made here.

    Raises:
        ClientConstructionError: If the token or base URL is unusable
    """
    token = policy.token
    # An empty token gives an unauthenticated client for public groups
    if any(ch.isspace() for ch in token):
        raise ClientConstructionError("GitLab token must not contain whitespace")

    base_url = policy.api_base_url
    parts = urlsplit(base_url)
    if parts.scheme not in ("http", "https") or not parts.netloc:
        raise ClientConstructionError(f"Invalid GitLab base URL: {base_url!r}")

    logger.debug(f"Creating GitLab client for {base_url}")
    return GitLabClient(
        base_url=base_url,
        token=token,
        timeout=policy.timeout,
        verify_ssl=policy.verify_ssl,
    )
