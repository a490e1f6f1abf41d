"""Configuration management for the harvester."""

import os
from dataclasses import dataclass, field, replace
from enum import Enum
from pathlib import Path

from dotenv import load_dotenv

from .errors import ConfigurationError

# Sentinel meaning "no namespace filter"
NAMESPACE_UNSET = "unset"

DEFAULT_BASE_URL = "https://gitlab.com"


class CloneProtocol(str, Enum):
    """Protocol used to derive clone URLs."""
    HTTPS = "https"
    SSH = "ssh"


def _parse_protocol(value: "str | CloneProtocol") -> CloneProtocol:
    if isinstance(value, CloneProtocol):
        return value
    try:
        return CloneProtocol(str(value).strip().lower())
    except ValueError:
        raise ConfigurationError(
            f"Unsupported clone protocol {value!r}, expected 'https' or 'ssh'"
        ) from None


def _parse_bool(value: str) -> bool:
    return value.strip().lower() == "true"


@dataclass(frozen=True)
class ClonePolicy:
    """
    Filter and behavior switches for one harvesting run.

    Built once at startup and passed to every component. Nothing downstream
    reads the environment.
    """

    namespace: str = NAMESPACE_UNSET
    skip_archived: bool = False
    clone_protocol: CloneProtocol = CloneProtocol.HTTPS
    token: str = field(default="", repr=False)
    base_url: str = ""

    # Snapshot destination
    output_root: str = "."
    org_label: str = ""

    # HTTP settings
    timeout: int = 30
    verify_ssl: bool = True

    def __post_init__(self):
        """Validate and normalize values after initialization."""
        object.__setattr__(self, "clone_protocol", _parse_protocol(self.clone_protocol))

        if not self.namespace:
            object.__setattr__(self, "namespace", NAMESPACE_UNSET)

        object.__setattr__(self, "base_url", (self.base_url or "").rstrip("/"))
        object.__setattr__(self, "output_root", os.path.expanduser(self.output_root))

        if self.timeout <= 0:
            raise ConfigurationError(f"timeout must be positive, got {self.timeout}")

    @property
    def namespace_filter_enabled(self) -> bool:
        """Return True if results should be restricted to a path prefix."""
        return self.namespace != NAMESPACE_UNSET

    @property
    def snapshot_root(self) -> Path:
        """Directory holding the per-project JSON snapshots."""
        return Path(self.output_root) / f"{self.org_label}_meta"

    @property
    def api_base_url(self) -> str:
        """Base URL the API client should talk to."""
        return self.base_url or DEFAULT_BASE_URL

    def with_overrides(self, **overrides) -> "ClonePolicy":
        """Return a copy with the given non-None fields replaced."""
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})

    @classmethod
    def from_env(cls, **overrides) -> "ClonePolicy":
        """Create a policy from environment variables with optional overrides."""
        load_dotenv()

        try:
            timeout = int(os.getenv("GHORG_TIMEOUT", "30"))
        except ValueError:
            raise ConfigurationError(
                f"GHORG_TIMEOUT must be an integer, got {os.getenv('GHORG_TIMEOUT')!r}"
            ) from None

        config_dict = {
            "namespace": os.getenv("GHORG_GITLAB_DEFAULT_NAMESPACE", NAMESPACE_UNSET),
            "skip_archived": _parse_bool(os.getenv("GHORG_SKIP_ARCHIVED", "false")),
            "clone_protocol": os.getenv("GHORG_CLONE_PROTOCOL", CloneProtocol.HTTPS.value),
            "token": os.getenv("GHORG_GITLAB_TOKEN", ""),
            "base_url": os.getenv("GHORG_SCM_BASE_URL", ""),
            "output_root": os.getenv("GHORG_ABSOLUTE_PATH_TO_CLONE_TO", "."),
            "org_label": os.getenv("GHORG_ORG_TO_CLONE", ""),
            "timeout": timeout,
            "verify_ssl": _parse_bool(os.getenv("GHORG_VERIFY_SSL", "true")),
        }

        # Apply overrides (filter out None values from CLI)
        for key, value in overrides.items():
            if value is not None:
                config_dict[key] = value

        return cls(**config_dict)
