"""Shared CLI helpers and output utilities."""

from __future__ import annotations

import json
from pathlib import Path
from typing import NoReturn

import click

from setsync.core.config import load_config
from setsync.core.settings import SYNCED_SETTINGS, SyncedSetting, get_setting
from setsync.storage.fs import STATE_DIR, RootError, find_root
from setsync.storage.settings_store import JsonSettingStore

# ---------------------------------------------------------------------------
# Root & config
# ---------------------------------------------------------------------------


def require_root(is_json: bool = False) -> Path:
    """Find the .setsync/ directory or exit with error."""
    try:
        root = find_root()
    except RootError as e:
        output_error(str(e), "NOT_INITIALIZED", is_json)
    if root is None:
        output_error(
            "Not a setsync project (no .setsync/ found). Run 'setsync init' first.",
            "NOT_INITIALIZED",
            is_json,
        )
    return root / STATE_DIR


def load_project_config(state_dir: Path, is_json: bool = False) -> dict:
    """Load and return config.json from the state directory, or exit with error."""
    config_path = state_dir / "config.json"
    try:
        return load_config(config_path.read_text())
    except (OSError, ValueError) as e:
        output_error(f"Cannot read {config_path}: {e}", "CONFIG_ERROR", is_json)


def open_store(state_dir: Path) -> JsonSettingStore:
    return JsonSettingStore(state_dir)


def require_setting(key: str, is_json: bool) -> SyncedSetting:
    """Look up a setting by wire key or store key, or exit with error."""
    setting = get_setting(key)
    if setting is None:
        for candidate in SYNCED_SETTINGS.values():
            if candidate.store_key == key:
                return candidate
        output_error(f"Unknown setting: '{key}'.", "UNKNOWN_SETTING", is_json)
    return setting


# ---------------------------------------------------------------------------
# Output helpers
# ---------------------------------------------------------------------------


def json_envelope(ok: bool, *, data: object = None, error: object = None) -> str:
    """Build a structured JSON output envelope."""
    result: dict = {"ok": ok}
    if data is not None:
        result["data"] = data
    if error is not None:
        result["error"] = error
    return json.dumps(result, sort_keys=True, indent=2) + "\n"


def json_error_obj(code: str, message: str) -> dict:
    """Build an error object for the JSON envelope."""
    return {"code": code, "message": message}


def output_error(message: str, code: str, is_json: bool, exit_code: int = 1) -> NoReturn:
    """Print error and exit. JSON errors go to stdout; human errors to stderr."""
    if is_json:
        click.echo(json_envelope(False, error=json_error_obj(code, message)))
    else:
        click.echo(f"Error: {message}", err=True)
    raise SystemExit(exit_code)


def output_result(
    *,
    data: object,
    human_message: str,
    is_json: bool,
) -> None:
    """Print success result in the appropriate format."""
    if is_json:
        click.echo(json_envelope(True, data=data))
    else:
        click.echo(human_message)
