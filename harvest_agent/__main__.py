#!/usr/bin/env python3
"""
CLI entry point for the GitLab Harvest Agent.

Usage:
    python -m harvest_agent group my-org --token TOKEN --out targets.json
    python -m harvest_agent user some-user --protocol ssh

Or with environment variables in .env file:
    python -m harvest_agent group my-org
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from . import __version__
from .config import ClonePolicy, CloneProtocol
from .errors import HarvestError
from .harvester import get_group_clone_targets, get_user_clone_targets
from .logging_config import setup_logging
from .utils import write_json


def build_parser() -> argparse.ArgumentParser:
    """Build the command line parser."""
    parser = argparse.ArgumentParser(
        prog="harvest_agent",
        description="GitLab Harvest Agent - List the repositories of a group or user as clone targets",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Every project in a group and its subgroups, over HTTPS
  python -m harvest_agent group my-org --token glpat-xxx --out targets.json

  # Only projects below a sub-path, skipping archived ones
  python -m harvest_agent group my-org --namespace my-org/backend --skip-archived

  # Projects owned by a user, SSH remotes
  python -m harvest_agent user jdoe --protocol ssh

Environment Variables (can be set in .env):
  GHORG_GITLAB_TOKEN                Personal Access Token
  GHORG_SCM_BASE_URL                Self-hosted GitLab URL (default: https://gitlab.com)
  GHORG_CLONE_PROTOCOL              https or ssh (default: https)
  GHORG_GITLAB_DEFAULT_NAMESPACE    Path prefix filter ("unset" disables)
  GHORG_SKIP_ARCHIVED               "true" to exclude archived projects
  GHORG_ABSOLUTE_PATH_TO_CLONE_TO   Root directory for metadata snapshots
  GHORG_ORG_TO_CLONE                Snapshot label ({label}_meta)
        """,
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    parser.add_argument(
        "scope",
        choices=["group", "user"],
        help="Enumerate a group (subgroups included) or a user's projects",
    )
    parser.add_argument(
        "target",
        metavar="NAME",
        help="Group full path or username",
    )

    # Connection settings
    parser.add_argument("--token", metavar="TOKEN", help="Personal Access Token")
    parser.add_argument("--base-url", metavar="URL", help="GitLab instance URL for self-hosted instances")

    # Filters
    parser.add_argument(
        "--namespace",
        metavar="PATH",
        help="Only keep projects whose path starts with PATH (case-insensitive)",
    )
    parser.add_argument(
        "--skip-archived",
        action="store_true",
        default=None,
        help="Exclude archived projects",
    )
    parser.add_argument(
        "--protocol",
        choices=[p.value for p in CloneProtocol],
        help="Clone protocol (default: https)",
    )

    # Output settings
    parser.add_argument(
        "--output-root",
        metavar="DIR",
        help="Root directory for metadata snapshots",
    )
    parser.add_argument(
        "--org-label",
        metavar="LABEL",
        help="Snapshot directory label (default: the group name)",
    )
    parser.add_argument(
        "--out",
        metavar="FILE",
        type=Path,
        help="Write clone targets to FILE as JSON instead of printing them",
    )

    # Logging
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable verbose (debug) logging")
    parser.add_argument("-q", "--quiet", action="store_true", help="Suppress all output except errors")
    parser.add_argument("--json-logs", action="store_true", help="Emit logs as JSON")

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)

    if args.quiet:
        log_level = logging.ERROR
    elif args.verbose:
        log_level = logging.DEBUG
    else:
        log_level = logging.INFO

    setup_logging(level=log_level, json_format=args.json_logs)
    logger = logging.getLogger("harvest_agent")

    try:
        policy = ClonePolicy.from_env(
            token=args.token,
            base_url=args.base_url,
            namespace=args.namespace,
            skip_archived=args.skip_archived,
            clone_protocol=args.protocol,
            output_root=args.output_root,
            org_label=args.org_label,
        )
        if not policy.org_label:
            policy = policy.with_overrides(org_label=args.target)
    except HarvestError as e:
        logger.error(f"Configuration error: {e}")
        return 1

    try:
        if args.scope == "group":
            targets = get_group_clone_targets(policy, args.target)
        else:
            targets = get_user_clone_targets(policy, args.target)

    except HarvestError as e:
        logger.error(f"Harvest failed: {e}")
        return 1

    except KeyboardInterrupt:
        logger.warning("Harvest interrupted by user")
        return 130

    if args.out:
        write_json(args.out, [t.to_dict() for t in targets])
        logger.info(f"Wrote {len(targets)} clone targets to {args.out}")
    else:
        for target in targets:
            print(f"{target.path}\t{target.url}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
