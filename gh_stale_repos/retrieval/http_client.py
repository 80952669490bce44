"""GraphQL transport for the scan: one request per call, no retries."""

from __future__ import annotations

import sys
from typing import Any, Dict, Optional

import requests

from ..config import GRAPHQL_URL, REQUEST_TIMEOUT, USER_AGENT


class GitHubAPIError(RuntimeError):
    """A non-success answer from the GitHub API; aborts the whole scan."""

    def __init__(self, message: str, status_code: Optional[int] = None, body: str = ""):
        super().__init__(message)
        self.status_code = status_code
        self.body = body


def log_http_error(resp: requests.Response, url: str) -> None:
    """Print the status line and the full response body to stderr."""
    print(f"[error] HTTP {resp.status_code} for {url}", file=sys.stderr)
    print(f"  -> {resp.text or ''}", file=sys.stderr)


def graphql_headers(token: str) -> Dict[str, str]:
    """Build headers for GraphQL requests with the bearer token attached."""
    return {
        "Accept": "application/vnd.github+json",
        "User-Agent": USER_AGENT,
        "Content-Type": "application/json",
        "Authorization": f"Bearer {token}",
    }


def run_graphql_query(query: str, variables: Dict[str, Any], token: str) -> Dict[str, Any]:
    """Execute a GraphQL query and return its ``data`` object.

    Any non-2xx status, or a 2xx body carrying GraphQL ``errors``, raises
    GitHubAPIError. Network failures surface as ``requests.RequestException``.
    """
    payload = {"query": query, "variables": variables}
    resp = requests.post(
        GRAPHQL_URL, json=payload, headers=graphql_headers(token), timeout=REQUEST_TIMEOUT
    )

    if not 200 <= resp.status_code < 300:
        log_http_error(resp, GRAPHQL_URL)
        raise GitHubAPIError(
            f"GitHub API error: HTTP {resp.status_code} (response body above)",
            status_code=resp.status_code,
            body=resp.text or "",
        )

    try:
        data = resp.json()
    except ValueError:
        raise GitHubAPIError(
            "GitHub API returned a non-JSON body",
            status_code=resp.status_code,
            body=resp.text or "",
        ) from None

    if data.get("errors"):
        messages = ", ".join(
            [str(err.get("message")) for err in data["errors"] if isinstance(err, dict)]
        )
        raise GitHubAPIError(
            f"GraphQL error: {messages or data['errors']}",
            status_code=resp.status_code,
            body=resp.text or "",
        )
    return data.get("data") or {}


__all__ = [
    "GitHubAPIError",
    "log_http_error",
    "graphql_headers",
    "run_graphql_query",
]
