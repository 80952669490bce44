"""Entry point wiring settings, the ignore list, the scan and the report."""

from __future__ import annotations

import sys
from typing import List, Optional

import requests

from .config import ConfigurationError, parse_args, resolve_settings
from .report import render_table, to_json, write_csv
from .retrieval.http_client import GitHubAPIError
from .retrieval.scanner import load_ignore_list, scan_stale_repos


def main(argv: Optional[List[str]] = None) -> None:
    """CLI entry point; exits 1 on configuration or API failures."""

    args = parse_args(argv)
    try:
        settings = resolve_settings(args)
        ignored = load_ignore_list(settings.ignore_path)
    except ConfigurationError as exc:
        print(f"[error] {exc}", file=sys.stderr)
        sys.exit(1)

    print(
        f'[scan] Scanning "{settings.org}" for repos not updated in {settings.stale_days} days '
        f"with < {settings.commit_threshold} commits...",
        file=sys.stderr,
    )
    try:
        results = scan_stale_repos(settings, ignored)
    except (GitHubAPIError, requests.RequestException) as exc:
        print(f"[error] {exc}", file=sys.stderr)
        sys.exit(1)

    if not results:
        print("[done] No stale, low-activity repos found!", file=sys.stderr)
        return

    if settings.as_json:
        print(to_json(results))
    elif settings.csv_path:
        write_csv(settings.csv_path, results)
        print(f"[done] CSV saved to {settings.csv_path}", file=sys.stderr)
    else:
        render_table(results)


__all__ = ["main"]


if __name__ == "__main__":
    main()
