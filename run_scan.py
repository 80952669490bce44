"""Convenience shim to run the stale repository scan from a checkout."""

from __future__ import annotations

import sys

from gh_stale_repos.runner import main


if __name__ == "__main__":
    main(sys.argv[1:])
