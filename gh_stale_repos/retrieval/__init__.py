"""GitHub GraphQL retrieval for the stale repository scan."""

from .http_client import GitHubAPIError, run_graphql_query
from .scanner import StaleRepo, load_ignore_list, scan_stale_repos

__all__ = [
    "GitHubAPIError",
    "run_graphql_query",
    "StaleRepo",
    "load_ignore_list",
    "scan_stale_repos",
]
