"""Shared test fixtures."""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import pytest
from click.testing import CliRunner

from setsync.storage.settings_store import MemorySettingStore
from setsync.sync.wire import (
    ChangeSetRequest,
    NamedSettingsRequest,
    parse_changed_settings_response,
    parse_named_settings_response,
)

FIXED_NOW = datetime(2024, 3, 1, 12, 0, 0, tzinfo=timezone.utc)


class FakeCaller:
    """In-memory NamedSettingsCaller that records requests.

    Responses are raw JSON-shaped payloads, parsed the same way the HTTP
    caller parses them.  Set ``error`` to make every call raise.
    """

    def __init__(
        self,
        changed_payload: Any = None,
        named_payload: Any = None,
        error: Exception | None = None,
    ) -> None:
        self.changed_payload = changed_payload if changed_payload is not None else {}
        self.named_payload = named_payload if named_payload is not None else {}
        self.error = error
        self.changed_requests: list[ChangeSetRequest] = []
        self.named_requests: list[NamedSettingsRequest] = []

    async def changed_named_settings(self, request: ChangeSetRequest):
        self.changed_requests.append(request)
        if self.error is not None:
            raise self.error
        return parse_changed_settings_response(self.changed_payload)

    async def named_settings(self, request: NamedSettingsRequest):
        self.named_requests.append(request)
        if self.error is not None:
            raise self.error
        return parse_named_settings_response(self.named_payload)

    @property
    def call_count(self) -> int:
        return len(self.changed_requests) + len(self.named_requests)


@pytest.fixture()
def store() -> MemorySettingStore:
    """An empty in-memory store whose clock is pinned to FIXED_NOW."""
    return MemorySettingStore(clock=lambda: FIXED_NOW)


@pytest.fixture()
def fake_caller():
    """Factory fixture for FakeCaller."""

    def _make(**kwargs: Any) -> FakeCaller:
        return FakeCaller(**kwargs)

    return _make


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep flag and root overrides from the developer's shell out of tests."""
    for name in ("SETSYNC_FEATURE_SETTINGS_SYNC", "SETSYNC_DEBUG", "SETSYNC_ROOT", "SETSYNC_TOKEN"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture()
def initialized_root(tmp_path: Path) -> Path:
    """Return a temporary directory with .setsync/ already initialized."""
    from setsync.core.config import default_config, serialize_config
    from setsync.storage.fs import STATE_DIR, atomic_write, ensure_state_dirs

    ensure_state_dirs(tmp_path)
    config = default_config()
    config["device_id"] = "dev_01HQ0000000000000000000000"
    config["server_url"] = "http://127.0.0.1:9"
    atomic_write(tmp_path / STATE_DIR / "config.json", serialize_config(config))
    return tmp_path


@pytest.fixture()
def cli_runner() -> CliRunner:
    """Return a Click CliRunner for invoking CLI commands."""
    return CliRunner()


@pytest.fixture()
def cli_env(initialized_root: Path) -> dict[str, str]:
    """Return env dict with SETSYNC_ROOT pointing to initialized_root."""
    return {"SETSYNC_ROOT": str(initialized_root)}


@pytest.fixture()
def invoke(cli_runner: CliRunner, cli_env: dict[str, str]):
    """Return a helper that invokes CLI commands with the right environment.

    Usage::

        result = invoke("settings", "set", "skipBack", "15")
    """
    from setsync.cli.main import cli

    def _invoke(*args: str, **kwargs):
        return cli_runner.invoke(cli, list(args), env=cli_env, **kwargs)

    return _invoke
