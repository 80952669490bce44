"""Paginated organization scan that collects stale, low-activity repositories."""

from __future__ import annotations

import datetime as dt
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, FrozenSet, Iterator, List, Optional, Tuple

from ..config import PER_PAGE, ConfigurationError, ScanSettings
from .http_client import GitHubAPIError, run_graphql_query

UNKNOWN = "unknown"
DATE_FORMAT = "%Y-%m-%d"

REPOS_QUERY = """
query StaleRepos($org: String!, $cursor: String, $pageSize: Int!) {
  organization(login: $org) {
    repositories(first: $pageSize, after: $cursor, isArchived: false,
                 orderBy: {field: PUSHED_AT, direction: ASC}) {
      nodes {
        name
        pushedAt
        diskUsage
        defaultBranchRef {
          target {
            ... on Commit {
              history(first: 1) {
                totalCount
                nodes {
                  committedDate
                  author {
                    name
                    email
                    user { login }
                  }
                }
              }
            }
          }
        }
      }
      pageInfo {
        endCursor
        hasNextPage
      }
    }
  }
}
"""


@dataclass(frozen=True)
class StaleRepo:
    """One reported repository, with dates already rendered as yyyy-mm-dd."""

    name: str
    commits: int
    pushed_at: str
    last_commit_date: str
    last_commit_author: str
    last_commit_author_email: str
    size: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"name": self.name, "commits": self.commits}
        if self.size is not None:
            out["size"] = self.size
        out.update({
            "pushedAt": self.pushed_at,
            "lastCommitDate": self.last_commit_date,
            "lastCommitAuthor": self.last_commit_author,
            "lastCommitAuthorEmail": self.last_commit_author_email,
        })
        return out

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "StaleRepo":
        size = data.get("size")
        return cls(
            name=data["name"],
            commits=int(data["commits"]),
            pushed_at=data["pushedAt"],
            last_commit_date=data["lastCommitDate"],
            last_commit_author=data["lastCommitAuthor"],
            last_commit_author_email=data["lastCommitAuthorEmail"],
            size=int(size) if size is not None else None,
        )


def parse_github_timestamp(raw: Optional[str]) -> Optional[dt.datetime]:
    """Parse an ISO-8601 GitHub timestamp into an aware UTC datetime."""
    if not raw:
        return None
    try:
        value = dt.datetime.fromisoformat(raw.replace("Z", "+00:00"))
    except ValueError:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=dt.timezone.utc)
    return value.astimezone(dt.timezone.utc)


def format_date(value: Optional[dt.datetime]) -> str:
    if value is None:
        return UNKNOWN
    return value.strftime(DATE_FORMAT)


def compute_cutoff(stale_days: int, now: Optional[dt.datetime] = None) -> dt.datetime:
    """Return ``now - stale_days``; anything pushed strictly before it is stale."""
    now = now or dt.datetime.now(dt.timezone.utc)
    try:
        return now - dt.timedelta(days=stale_days)
    except OverflowError:
        # window reaches past year 1; nothing can be stale
        return dt.datetime.min.replace(tzinfo=dt.timezone.utc)


def is_stale(pushed_at: Optional[dt.datetime], cutoff: dt.datetime) -> bool:
    # never pushed counts as stale
    return pushed_at is None or pushed_at < cutoff


def load_ignore_list(path: Optional[str | Path]) -> FrozenSet[str]:
    """Read repository names to skip, one per line; a missing file means none.

    An unreadable file raises ConfigurationError.
    """
    if not path:
        return frozenset()
    ignore_path = Path(path).expanduser()
    if not ignore_path.exists():
        print(f"[scan] ignore list {ignore_path} not found; nothing will be skipped", file=sys.stderr)
        return frozenset()
    try:
        with ignore_path.open("r", encoding="utf-8") as fh:
            return frozenset(line.strip() for line in fh if line.strip())
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigurationError(f"Cannot read ignore list {ignore_path}: {exc}") from exc


def _history(node: Dict[str, Any]) -> Dict[str, Any]:
    target = (node.get("defaultBranchRef") or {}).get("target") or {}
    return target.get("history") or {}


def commit_count(node: Dict[str, Any]) -> int:
    """Total commits on the default branch, 0 when there is no history."""
    return int(_history(node).get("totalCount") or 0)


def _last_commit(node: Dict[str, Any]) -> Dict[str, Any]:
    nodes = _history(node).get("nodes") or []
    return (nodes[0] or {}) if nodes else {}


def author_display_name(author_obj: Optional[dict]) -> str:
    """Prefer the linked GitHub login, then the git author name."""
    author_obj = author_obj or {}
    login = (author_obj.get("user") or {}).get("login")
    return login or author_obj.get("name") or UNKNOWN


def build_stale_repo(node: Dict[str, Any]) -> StaleRepo:
    """Shape a raw repository node into a StaleRepo.

    The last-commit date falls back to the push date and the author fields
    to ``"unknown"`` when the default branch has no commits.
    """
    pushed_at = parse_github_timestamp(node.get("pushedAt"))
    last_commit = _last_commit(node)
    author = last_commit.get("author") or {}
    committed_at = parse_github_timestamp(last_commit.get("committedDate")) or pushed_at
    disk_usage = node.get("diskUsage")

    return StaleRepo(
        name=node.get("name") or "",
        commits=commit_count(node),
        pushed_at=format_date(pushed_at),
        last_commit_date=format_date(committed_at),
        last_commit_author=author_display_name(author),
        last_commit_author_email=author.get("email") or UNKNOWN,
        size=int(disk_usage) if disk_usage is not None else None,
    )


def fetch_repo_page(org: str, cursor: Optional[str], token: str) -> Tuple[List[Dict[str, Any]], Optional[str], bool]:
    """Fetch one page of non-archived repositories, oldest push first.

    Returns ``(nodes, end_cursor, has_next_page)``.
    """
    data = run_graphql_query(
        REPOS_QUERY,
        {"org": org, "cursor": cursor, "pageSize": PER_PAGE},
        token,
    )
    organization = data.get("organization")
    if not organization:
        raise GitHubAPIError(f"Organization {org!r} not found or not accessible")
    repos = organization.get("repositories") or {}
    page_info = repos.get("pageInfo") or {}
    return (
        list(repos.get("nodes") or []),
        page_info.get("endCursor"),
        bool(page_info.get("hasNextPage")),
    )


def iter_repo_pages(org: str, token: str) -> Iterator[List[Dict[str, Any]]]:
    """Yield pages lazily; the next request is only sent when the caller asks."""
    cursor: Optional[str] = None
    while True:
        nodes, end_cursor, has_next = fetch_repo_page(org, cursor, token)
        yield nodes
        if not has_next or not end_cursor:
            return
        cursor = end_cursor


def scan_stale_repos(settings: ScanSettings,
                     ignored: FrozenSet[str] = frozenset(),
                     now: Optional[dt.datetime] = None) -> List[StaleRepo]:
    """Collect repositories that are stale and below the commit threshold.

    Pages arrive sorted by push date ascending, so the first repository that
    is not stale ends the scan; no later page is requested. Ignored names are
    checked first and never end the scan.
    """
    cutoff = compute_cutoff(settings.stale_days, now)
    results: List[StaleRepo] = []

    for page_number, nodes in enumerate(iter_repo_pages(settings.org, settings.token), start=1):
        print(f"[scan] page {page_number}: {len(nodes)} repositories", file=sys.stderr)
        for node in nodes:
            name = node.get("name") or ""
            if name in ignored:
                print(f"[skip] {name} (ignore list)", file=sys.stderr)
                continue

            pushed_at = parse_github_timestamp(node.get("pushedAt"))
            if not is_stale(pushed_at, cutoff):
                print(f"[scan] {name} pushed {format_date(pushed_at)}, not stale; stopping early", file=sys.stderr)
                return results

            if commit_count(node) < settings.commit_threshold:
                results.append(build_stale_repo(node))

    return results


__all__ = [
    "REPOS_QUERY",
    "UNKNOWN",
    "StaleRepo",
    "parse_github_timestamp",
    "format_date",
    "compute_cutoff",
    "is_stale",
    "load_ignore_list",
    "commit_count",
    "author_display_name",
    "build_stale_repo",
    "fetch_repo_page",
    "iter_repo_pages",
    "scan_stale_repos",
]
