"""Utilities for loading local (gitignored) credentials."""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Dict, Optional

DEFAULT_SECRETS_FILENAME = "local_secrets.json"


def _default_secrets_path() -> Path:
    root = Path(__file__).resolve().parents[1]
    return root / DEFAULT_SECRETS_FILENAME


def load_local_secrets(path: Optional[str | Path] = None) -> Dict[str, Any]:
    """Load secrets from a JSON file; return {} when unavailable."""

    candidate = path or os.getenv("LOCAL_SECRETS_FILE") or _default_secrets_path()
    secrets_path = Path(candidate).expanduser()
    if not secrets_path.exists():
        return {}
    try:
        with secrets_path.open("r", encoding="utf-8") as handle:
            data = json.load(handle)
    except (OSError, json.JSONDecodeError):
        return {}
    return data if isinstance(data, dict) else {}


def first_github_token(secrets: Optional[Dict[str, Any]] = None) -> Optional[str]:
    """Return the first non-empty entry of ``github_tokens``, if any."""
    if secrets is None:
        secrets = load_local_secrets()
    tokens = secrets.get("github_tokens") or []
    if isinstance(tokens, str):
        tokens = [tokens]
    for token in tokens:
        if isinstance(token, str) and token.strip():
            return token.strip()
    return None


__all__ = ["load_local_secrets", "first_github_token", "DEFAULT_SECRETS_FILENAME"]
