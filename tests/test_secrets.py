"""Tests for gh_stale_repos.secrets covering file loading and token lookup.

Run with:
    pytest tests/test_secrets.py --maxfail=1 -v --cov=gh_stale_repos.secrets --cov-report=term-missing
"""

import json

from gh_stale_repos import secrets


def test_load_local_secrets_missing_file_returns_empty(tmp_path):
    assert secrets.load_local_secrets(tmp_path / "nope.json") == {}


def test_load_local_secrets_reads_json(tmp_path):
    path = tmp_path / "local_secrets.json"
    path.write_text(json.dumps({"github_tokens": ["abc"]}))
    assert secrets.load_local_secrets(path) == {"github_tokens": ["abc"]}


def test_load_local_secrets_ignores_malformed_and_non_dict(tmp_path):
    bad = tmp_path / "bad.json"
    bad.write_text("{not json")
    assert secrets.load_local_secrets(bad) == {}

    listy = tmp_path / "list.json"
    listy.write_text("[1, 2]")
    assert secrets.load_local_secrets(listy) == {}


def test_load_local_secrets_honors_env(monkeypatch, tmp_path):
    path = tmp_path / "env_secrets.json"
    path.write_text(json.dumps({"github_tokens": ["from-env"]}))
    monkeypatch.setenv("LOCAL_SECRETS_FILE", str(path))
    assert secrets.first_github_token() == "from-env"


def test_first_github_token_skips_blank_entries():
    assert secrets.first_github_token({"github_tokens": ["", "  ", "t2"]}) == "t2"
    assert secrets.first_github_token({"github_tokens": "single"}) == "single"
    assert secrets.first_github_token({}) is None
