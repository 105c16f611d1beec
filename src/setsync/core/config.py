"""Default config generation and validation."""

from __future__ import annotations

import json
from typing import TypedDict
from urllib.parse import urlparse


class Endpoints(TypedDict, total=False):
    changed_settings: str
    named_settings: str


class Features(TypedDict, total=False):
    settings_sync: bool


class SetsyncConfig(TypedDict, total=False):
    schema_version: int
    device_id: str
    server_url: str
    endpoints: Endpoints
    features: Features
    debug: bool
    timeout_seconds: float


DEFAULT_SERVER_URL = "https://api.example.com"
DEFAULT_TIMEOUT_SECONDS = 10


def default_config() -> SetsyncConfig:
    """Return the default setsync configuration.

    The returned dict, when serialized with
    ``json.dumps(data, sort_keys=True, indent=2) + "\\n"``,
    produces the canonical default config.json.
    """
    return {
        "schema_version": 1,
        "server_url": DEFAULT_SERVER_URL,
        "endpoints": {
            "changed_settings": "/user/named_settings/changed",
            "named_settings": "/user/named_settings/update",
        },
        "features": {
            "settings_sync": False,
        },
        "debug": False,
        "timeout_seconds": DEFAULT_TIMEOUT_SECONDS,
    }


def serialize_config(config: SetsyncConfig | dict[str, object]) -> str:
    """Serialize a config dict to the canonical JSON format."""
    return json.dumps(config, sort_keys=True, indent=2) + "\n"


def load_config(raw: str) -> dict:
    """Parse a JSON config string and return the config dict.

    Missing sections are filled from :func:`default_config` so older
    config files keep working.  This is a pure function (no I/O).
    """
    config = json.loads(raw)
    if not isinstance(config, dict):
        raise ValueError("config.json must contain a JSON object")
    defaults = default_config()
    for section in ("endpoints", "features"):
        value = config.get(section) or {}
        if not isinstance(value, dict):
            raise ValueError(f"config.json '{section}' must be a JSON object")
        merged = dict(defaults[section])  # type: ignore[literal-required]
        merged.update(value)
        config[section] = merged
    for key, value in defaults.items():
        config.setdefault(key, value)
    return config


def validate_server_url(url: str) -> bool:
    """Return ``True`` if *url* is an absolute http(s) URL."""
    parsed = urlparse(url)
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


def endpoint_url(config: dict, name: str) -> str:
    """Join the configured server URL with the endpoint path *name*."""
    base = config.get("server_url", DEFAULT_SERVER_URL).rstrip("/")
    path = config.get("endpoints", {}).get(name) or default_config()["endpoints"][name]  # type: ignore[literal-required]
    return f"{base}/{path.lstrip('/')}"
