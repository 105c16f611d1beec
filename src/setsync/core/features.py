"""Process-wide capability flags.

Flags come from ``config.json`` (``features`` section) and can be forced
on or off with ``SETSYNC_FEATURE_<NAME>=1|0``.  Environment overrides win.
"""

from __future__ import annotations

import os
from enum import Enum

FEATURE_ENV_PREFIX = "SETSYNC_FEATURE_"
DEBUG_ENV = "SETSYNC_DEBUG"


class Feature(Enum):
    SETTINGS_SYNC = "settings_sync"


def _env_bool(name: str) -> bool | None:
    raw = os.environ.get(name)
    if raw is None or raw == "":
        return None
    return raw.strip().lower() in ("1", "true", "yes", "on")


class FeatureFlags:
    """Capability flags plus the debug switch."""

    def __init__(self, values: dict[str, bool] | None = None, debug: bool = False) -> None:
        self._values: dict[str, bool] = dict(values or {})
        self._debug = debug

    @classmethod
    def from_config(cls, config: dict) -> FeatureFlags:
        features = config.get("features") or {}
        return cls(
            {name: bool(value) for name, value in features.items()},
            debug=bool(config.get("debug", False)),
        )

    def is_enabled(self, feature: Feature) -> bool:
        override = _env_bool(FEATURE_ENV_PREFIX + feature.value.upper())
        if override is not None:
            return override
        return self._values.get(feature.value, False)

    def set_enabled(self, feature: Feature, enabled: bool) -> None:
        self._values[feature.value] = enabled

    @property
    def debug(self) -> bool:
        override = _env_bool(DEBUG_ENV)
        if override is not None:
            return override
        return self._debug

    def as_dict(self) -> dict[str, bool]:
        return {feature.value: self.is_enabled(feature) for feature in Feature}


_flags = FeatureFlags()


def get_flags() -> FeatureFlags:
    """Return the process-wide flag set."""
    return _flags


def configure_flags(config: dict) -> FeatureFlags:
    """Replace the process-wide flag set with values from *config*."""
    global _flags
    _flags = FeatureFlags.from_config(config)
    return _flags
