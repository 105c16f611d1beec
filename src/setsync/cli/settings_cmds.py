"""CLI commands for reading and editing local settings."""

from __future__ import annotations

import click

from setsync.cli.helpers import (
    open_store,
    output_error,
    output_result,
    require_root,
    require_setting,
)
from setsync.cli.main import cli
from setsync.core.errors import SetsyncError
from setsync.core.settings import SYNCED_SETTINGS, format_value, parse_user_value
from setsync.core.timestamps import format_instant
from setsync.storage.settings_store import SettingState


def _state_to_dict(state: SettingState, store_key: str) -> dict:
    return {
        "key": state.key,
        "store_key": store_key,
        "value": format_value(state.value),
        "modified_at": format_instant(state.modified_at) if state.modified_at else None,
        "needs_sync": state.needs_sync,
    }


def _state_line(state: SettingState) -> str:
    stamp = format_instant(state.modified_at) if state.modified_at else "-"
    dirty = " *" if state.needs_sync else ""
    return f"{state.key:<28} {format_value(state.value):<32} {stamp}{dirty}"


@cli.group()
def settings() -> None:
    """Inspect and change synchronizable settings."""


@settings.command("list")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON.")
def settings_list(as_json: bool) -> None:
    """List every synchronizable setting (* = waiting to sync)."""
    state_dir = require_root(as_json)
    try:
        states = open_store(state_dir).states()
    except SetsyncError as e:
        output_error(str(e), "STORE_ERROR", as_json)

    if as_json:
        data = [_state_to_dict(s, SYNCED_SETTINGS[s.key].store_key) for s in states]
        output_result(data=data, human_message="", is_json=True)
        return

    for state in states:
        click.echo(_state_line(state))


@settings.command("get")
@click.argument("key")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON.")
def settings_get(key: str, as_json: bool) -> None:
    """Show one setting by wire key (skipBack) or store key (skip_back_secs)."""
    setting = require_setting(key, as_json)
    state_dir = require_root(as_json)
    try:
        state = open_store(state_dir).state(setting.key)
    except SetsyncError as e:
        output_error(str(e), "STORE_ERROR", as_json)
    output_result(
        data=_state_to_dict(state, setting.store_key),
        human_message=_state_line(state),
        is_json=as_json,
    )


@settings.command("set")
@click.argument("key")
@click.argument("value")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON.")
def settings_set(key: str, value: str, as_json: bool) -> None:
    """Change a setting locally and mark it for sync."""
    setting = require_setting(key, as_json)
    parsed = parse_user_value(setting, value)
    if parsed is None:
        output_error(f"Invalid value for {setting.key}: '{value}'.", "INVALID_VALUE", as_json)

    state_dir = require_root(as_json)
    store = open_store(state_dir)
    try:
        store.set(setting.key, parsed, needs_sync=True)
        state = store.state(setting.key)
    except (SetsyncError, OSError) as e:
        output_error(str(e), "STORE_ERROR", as_json)
    output_result(
        data=_state_to_dict(state, setting.store_key),
        human_message=f"{setting.key} = {format_value(parsed)}",
        is_json=as_json,
    )
