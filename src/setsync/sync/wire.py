"""Wire shapes for the change-set and legacy named-settings endpoints.

Requests serialize with :meth:`to_wire`; responses are parsed leniently.
A response body that is not a JSON object is an attempt-level error, but a
single malformed entry is kept with ``value=None`` so the reconciler can
skip that key alone.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime
from types import MappingProxyType
from typing import Any

from setsync.core.errors import SetsyncError
from setsync.core.timestamps import format_instant


class WireFormatError(SetsyncError):
    """Raised when a response body does not have the expected top-level shape."""


# ---------------------------------------------------------------------------
# Current protocol (named, typed, timestamped)
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ChangedSetting:
    value: int | bool
    modified_at: datetime | None = None

    def to_wire(self) -> dict:
        return {
            "value": self.value,
            "modifiedAt": format_instant(self.modified_at) if self.modified_at is not None else None,
        }


@dataclass(frozen=True)
class ChangeSetRequest:
    changed_settings: Mapping[str, ChangedSetting] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "changed_settings", MappingProxyType(dict(self.changed_settings)))

    def to_wire(self) -> dict:
        return {
            "changedSettings": {
                key: entry.to_wire() for key, entry in self.changed_settings.items()
            }
        }


@dataclass(frozen=True)
class ChangedSettingResponse:
    value: Any
    modified_at: Any = None

    @classmethod
    def from_wire(cls, raw: Any) -> ChangedSettingResponse:
        if not isinstance(raw, dict):
            return cls(value=None)
        return cls(value=raw.get("value"), modified_at=raw.get("modifiedAt"))


def parse_changed_settings_response(payload: Any) -> dict[str, ChangedSettingResponse]:
    if not isinstance(payload, dict):
        raise WireFormatError(
            f"Change-set response must be a JSON object, got {type(payload).__name__}"
        )
    return {str(key): ChangedSettingResponse.from_wire(raw) for key, raw in payload.items()}


# ---------------------------------------------------------------------------
# Legacy protocol (flat values, "changed" markers, no timestamps)
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class NamedSettingsRequest:
    settings: Mapping[str, int | bool | None] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "settings", MappingProxyType(dict(self.settings)))

    def to_wire(self) -> dict:
        return {"settings": dict(self.settings)}


@dataclass(frozen=True)
class NamedSettingResponse:
    value: Any
    changed: bool = False

    @classmethod
    def from_wire(cls, raw: Any) -> NamedSettingResponse:
        if not isinstance(raw, dict):
            return cls(value=None)
        return cls(value=raw.get("value"), changed=raw.get("changed") is True)


def parse_named_settings_response(payload: Any) -> dict[str, NamedSettingResponse]:
    if not isinstance(payload, dict):
        raise WireFormatError(
            f"Named settings response must be a JSON object, got {type(payload).__name__}"
        )
    return {str(key): NamedSettingResponse.from_wire(raw) for key, raw in payload.items()}
