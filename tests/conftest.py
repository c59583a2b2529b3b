"""Pytest configuration and fixtures."""

import io
import json
from pathlib import Path
from typing import Any

import pytest

from tfc_backup.config import Settings
from tfc_backup.core.client import TerraformCloudClient
from tfc_backup.core.exceptions import TransportError
from tfc_backup.core.reporter import FailureReporter

ENV_VARS = [
    "ATLAS_TOKEN",
    "ORGANIZATION",
    "SENTRY_DSN",
    "ENABLE_NOTIFICATIONS",
    "APPRISE_URLS",
    "VARSET_PAGINATION",
    "MAX_WORKERS",
    "SOURCE_PATH",
    "RESTIC_REPOSITORY",
    "RESTIC_PASSWORD",
    "RESTIC_FORGET_ARGS",
    "RESTIC_BACKUP_ARGS",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Keep the caller's environment and any .env file out of the tests."""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)


class FakeClient(TerraformCloudClient):
    """
    Client serving canned responses.

    ``responses`` maps a URL (or ``"<url>#<page number>"`` for paged requests)
    to a JSON-serializable body, raw bytes, or an exception to raise.
    Unknown URLs fail with HTTP 404.
    """

    def __init__(self, responses: dict[str, Any]) -> None:
        super().__init__("test-token")
        self.responses = responses
        self.calls: list[str] = []

    def fetch(self, url: str, params: dict[str, Any] | None = None) -> bytes:
        key = url if params is None else f"{url}#{params['page[number]']}"
        self.calls.append(key)
        if key not in self.responses:
            raise TransportError(url, status=404, reason="Not Found")
        value = self.responses[key]
        if isinstance(value, Exception):
            raise value
        if isinstance(value, bytes):
            return value
        return json.dumps(value).encode()


def varset_page(items: list[tuple[str, str]], total: int) -> dict[str, Any]:
    return {
        "data": [{"id": vs_id, "type": "varsets", "attributes": {"name": name}} for name, vs_id in items],
        "meta": {"pagination": {"current-page": 1, "total-count": total}},
    }


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(_env_file=None, atlas_token="test-token", organization="acme", max_workers=1)


@pytest.fixture
def reporter() -> FailureReporter:
    return FailureReporter([], stream=io.StringIO())


@pytest.fixture
def dest_dir(tmp_path: Path) -> Path:
    path = tmp_path / "export"
    path.mkdir()
    return path
