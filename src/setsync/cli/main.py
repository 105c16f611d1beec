"""CLI entry point and commands."""

from __future__ import annotations

import logging
from pathlib import Path

import click

from setsync.core.config import default_config, serialize_config, validate_server_url
from setsync.core.features import Feature
from setsync.core.ids import generate_device_id
from setsync.storage.fs import STATE_DIR, atomic_write, ensure_state_dirs


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Log debug output to stderr.")
def cli(verbose: bool) -> None:
    """setsync: reconcile account settings with the server."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s: %(message)s",
    )


@cli.command()
@click.option(
    "--path",
    "target_path",
    type=click.Path(exists=True, file_okay=False, resolve_path=True),
    default=".",
    help="Directory to initialize setsync in (defaults to current directory).",
)
@click.option("--server-url", default=None, help="Base URL of the account service.")
@click.option(
    "--enable-settings-sync",
    is_flag=True,
    help="Turn on the timestamped change-set protocol.",
)
def init(target_path: str, server_url: str | None, enable_settings_sync: bool) -> None:
    """Initialize a new setsync state directory."""
    root = Path(target_path)
    state_dir = root / STATE_DIR

    if state_dir.is_dir():
        click.echo(f"setsync already initialized in {STATE_DIR}/")
        return

    if state_dir.exists():
        raise click.ClickException(
            f"Cannot initialize: '{STATE_DIR}' exists but is not a directory. "
            "Remove it and try again."
        )

    if server_url is not None and not validate_server_url(server_url):
        raise click.ClickException(
            f"Invalid server URL: '{server_url}'. Expected an http(s) URL."
        )

    config = default_config()
    config["device_id"] = generate_device_id()
    if server_url:
        config["server_url"] = server_url.rstrip("/")
    if enable_settings_sync:
        config["features"]["settings_sync"] = True

    try:
        ensure_state_dirs(root)
        atomic_write(state_dir / "config.json", serialize_config(config))
    except OSError as e:
        raise click.ClickException(f"Failed to initialize: {e}") from e

    click.echo(f"Initialized empty setsync state in {STATE_DIR}/")
    click.echo(f"Device: {config['device_id']}")


# ---------------------------------------------------------------------------
# Feature flags
# ---------------------------------------------------------------------------


def _parse_feature(name: str) -> Feature:
    try:
        return Feature(name.replace("-", "_").lower())
    except ValueError:
        known = ", ".join(f.value.replace("_", "-") for f in Feature)
        raise click.BadParameter(f"Unknown feature '{name}'. Known: {known}") from None


@cli.group()
def features() -> None:
    """Show or change capability flags."""


@features.command("list")
def features_list() -> None:
    """List capability flags and their state."""
    from setsync.cli.helpers import load_project_config, require_root
    from setsync.core.features import FeatureFlags

    state_dir = require_root(False)
    flags = FeatureFlags.from_config(load_project_config(state_dir))
    for name, enabled in sorted(flags.as_dict().items()):
        click.echo(f"{name.replace('_', '-')}: {'on' if enabled else 'off'}")


def _set_feature(name: str, enabled: bool) -> None:
    from setsync.cli.helpers import load_project_config, require_root

    feature = _parse_feature(name)
    state_dir = require_root(False)
    config = load_project_config(state_dir)
    config["features"][feature.value] = enabled
    try:
        atomic_write(state_dir / "config.json", serialize_config(config))
    except OSError as e:
        raise click.ClickException(f"Failed to write config: {e}") from e
    click.echo(f"{feature.value.replace('_', '-')}: {'on' if enabled else 'off'}")


@features.command("enable")
@click.argument("name")
def features_enable(name: str) -> None:
    """Turn a capability flag on."""
    _set_feature(name, True)


@features.command("disable")
@click.argument("name")
def features_disable(name: str) -> None:
    """Turn a capability flag off."""
    _set_feature(name, False)


# ---------------------------------------------------------------------------
# Register command modules (must be after cli group is defined)
# ---------------------------------------------------------------------------
from setsync.cli import settings_cmds as _settings_cmds  # noqa: E402, F401
from setsync.cli import sync_cmds as _sync_cmds  # noqa: E402, F401

if __name__ == "__main__":
    cli()
