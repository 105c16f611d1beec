"""CLI commands for running and inspecting settings sync."""

from __future__ import annotations

import asyncio
import os

import click

from setsync.cli.helpers import (
    load_project_config,
    open_store,
    output_error,
    output_result,
    require_root,
)
from setsync.cli.main import cli
from setsync.core.errors import SetsyncError
from setsync.core.features import Feature, configure_flags


@cli.group()
def sync() -> None:
    """Reconcile settings with the account service."""


@sync.command("run")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON.")
def sync_run(as_json: bool) -> None:
    """Run one sync attempt.  Exits 1 if the attempt failed."""
    from setsync.sync.orchestrator import SyncResult, run_settings_sync, select_protocol
    from setsync.sync.transport import TOKEN_ENV, HttpNamedSettingsCaller

    state_dir = require_root(as_json)
    config = load_project_config(state_dir, as_json)
    flags = configure_flags(config)
    store = open_store(state_dir)
    caller = HttpNamedSettingsCaller.from_config(config, token=os.environ.get(TOKEN_ENV))

    protocol = select_protocol(flags).name
    result = asyncio.run(run_settings_sync(store, caller, flags))

    if result is SyncResult.FAILURE:
        output_error(
            f"Settings sync failed (protocol: {protocol}). Run with -v for details.",
            "SYNC_FAILED",
            as_json,
        )

    output_result(
        data={"result": result.value, "protocol": protocol},
        human_message=f"Settings synced (protocol: {protocol}).",
        is_json=as_json,
    )


@sync.command("status")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON.")
def sync_status(as_json: bool) -> None:
    """Show which protocol is active and which settings are waiting to sync."""
    from setsync.sync.orchestrator import select_protocol

    state_dir = require_root(as_json)
    config = load_project_config(state_dir, as_json)
    flags = configure_flags(config)
    try:
        pending = [state.key for state in open_store(state_dir).states() if state.needs_sync]
    except SetsyncError as e:
        output_error(str(e), "STORE_ERROR", as_json)

    data = {
        "device_id": config.get("device_id", ""),
        "server_url": config.get("server_url", ""),
        "settings_sync": flags.is_enabled(Feature.SETTINGS_SYNC),
        "protocol": select_protocol(flags).name,
        "pending": pending,
    }
    if as_json:
        output_result(data=data, human_message="", is_json=True)
        return

    click.echo(f"Device: {data['device_id'] or 'not configured'}")
    click.echo(f"Server: {data['server_url']}")
    click.echo(f"Protocol: {data['protocol']}")
    if pending:
        click.echo(f"Waiting to sync: {', '.join(pending)}")
    else:
        click.echo("Nothing waiting to sync.")
