"""Shared fixtures: isolate tests from real tokens and local secrets."""

import pytest

from gh_stale_repos.config import ScanSettings


@pytest.fixture(autouse=True)
def _isolated_credentials(monkeypatch, tmp_path):
    monkeypatch.delenv("GH_SR_TOKEN", raising=False)
    monkeypatch.setenv("LOCAL_SECRETS_FILE", str(tmp_path / "missing_secrets.json"))


@pytest.fixture
def settings():
    return ScanSettings(org="acme", token="tok", commit_threshold=20, stale_days=180)
