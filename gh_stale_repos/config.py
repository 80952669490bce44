"""Configuration constants and CLI settings for the stale repository scan."""

from __future__ import annotations

import argparse
import os
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from . import __version__
from .secrets import first_github_token

GRAPHQL_URL = os.getenv("GH_SR_API_URL", "https://api.github.com/graphql")
USER_AGENT = f"gh-stale-repos/{__version__}"
PER_PAGE = 100
REQUEST_TIMEOUT = int(os.getenv("GH_SR_REQUEST_TIMEOUT", "90"))
TOKEN_ENV_VAR = "GH_SR_TOKEN"
DEFAULT_COMMIT_THRESHOLD = 20
DEFAULT_STALE_DAYS = 180


class ConfigurationError(ValueError):
    """Raised when the scan cannot start: no token, or an unreadable ignore list."""


@dataclass(frozen=True)
class ScanSettings:
    """Resolved runtime settings for one scan; immutable for the run."""

    org: str
    token: str
    commit_threshold: int = DEFAULT_COMMIT_THRESHOLD
    stale_days: int = DEFAULT_STALE_DAYS
    ignore_path: Optional[Path] = None
    as_json: bool = False
    csv_path: Optional[Path] = None


def non_negative_int(raw: str) -> int:
    """argparse type accepting integers >= 0."""
    try:
        value = int(raw)
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected an integer, got {raw!r}") from None
    if value < 0:
        raise argparse.ArgumentTypeError(f"must be >= 0, got {value}")
    return value


def build_arg_parser() -> argparse.ArgumentParser:
    """Return the CLI parser used by the scan entry point."""

    parser = argparse.ArgumentParser(
        prog="gh-stale-repos",
        description=(
            "Find non archived GitHub repositories in an organization that are "
            "stale and have low commit counts."
        ),
    )
    parser.add_argument("-o", "--org", required=True, help="GitHub organization to scan")
    parser.add_argument(
        "-t",
        "--token",
        default=None,
        help=f"GitHub token (or set {TOKEN_ENV_VAR} env var)",
    )
    parser.add_argument(
        "-c",
        "--commit-threshold",
        type=non_negative_int,
        default=DEFAULT_COMMIT_THRESHOLD,
        help="Max commits to consider 'low activity'",
    )
    parser.add_argument(
        "-d",
        "--stale-days",
        type=non_negative_int,
        default=DEFAULT_STALE_DAYS,
        help="Consider repos stale after this many days",
    )
    parser.add_argument(
        "-i",
        "--ignore",
        default=None,
        help="File with repository names to skip, one per line",
    )
    parser.add_argument("--json", action="store_true", help="Output as JSON")
    parser.add_argument("--csv", default=None, metavar="FILE", help="Write results to a CSV file")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments; accepts argv overrides for testing."""

    parser = build_arg_parser()
    return parser.parse_args(argv)


def resolve_token(cli_token: Optional[str] = None) -> Optional[str]:
    """Pick the token from the flag, then the environment, then local secrets."""
    for candidate in (cli_token, os.getenv(TOKEN_ENV_VAR)):
        if candidate and candidate.strip():
            return candidate.strip()
    return first_github_token()


def resolve_settings(args: Optional[argparse.Namespace] = None) -> ScanSettings:
    """Return immutable settings or raise ConfigurationError when no token is set."""

    args = args or parse_args()
    token = resolve_token(args.token)
    if not token:
        raise ConfigurationError(
            f"GitHub token is required. Pass with --token or set {TOKEN_ENV_VAR} env var."
        )
    return ScanSettings(
        org=args.org,
        token=token,
        commit_threshold=int(args.commit_threshold),
        stale_days=int(args.stale_days),
        ignore_path=Path(args.ignore) if args.ignore else None,
        as_json=bool(args.json),
        csv_path=Path(args.csv) if args.csv else None,
    )


__all__ = [
    "GRAPHQL_URL",
    "USER_AGENT",
    "PER_PAGE",
    "REQUEST_TIMEOUT",
    "TOKEN_ENV_VAR",
    "DEFAULT_COMMIT_THRESHOLD",
    "DEFAULT_STALE_DAYS",
    "ConfigurationError",
    "ScanSettings",
    "non_negative_int",
    "build_arg_parser",
    "parse_args",
    "resolve_token",
    "resolve_settings",
]
