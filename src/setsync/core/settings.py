"""The fixed table of synchronizable settings.

Each entry maps a wire key to its store key, default value and codec.
Adding a setting is one line in ``SYNCED_SETTINGS``; everything that
iterates keys (request building, reconciliation, the store, the CLI) reads
from this table.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from setsync.core.values import (
    AutoArchiveAfterPlaying,
    AutoArchiveInactive,
    BoolCodec,
    Codec,
    IndexCodec,
    IntCodec,
    PodcastsSortType,
    ServerIdCodec,
)


@dataclass(frozen=True)
class SyncedSetting:
    key: str
    store_key: str
    default: Any
    codec: Codec

    def encode(self, value: Any) -> int | bool:
        return self.codec.encode(value)

    def decode(self, raw: Any) -> Any | None:
        return self.codec.decode(raw)


SYNCED_SETTINGS: dict[str, SyncedSetting] = {
    s.key: s
    for s in (
        SyncedSetting("autoArchivePlayed", "auto_archive_after_playing", AutoArchiveAfterPlaying.NEVER, IndexCodec(AutoArchiveAfterPlaying)),
        SyncedSetting("autoArchiveInactive", "auto_archive_inactive", AutoArchiveInactive.NEVER, IndexCodec(AutoArchiveInactive)),
        SyncedSetting("autoArchiveIncludesStarred", "auto_archive_includes_starred", False, BoolCodec()),
        SyncedSetting("freeGiftAcknowledgement", "free_gift_acknowledged", False, BoolCodec()),
        SyncedSetting("gridOrder", "podcasts_sort_type", PodcastsSortType.DATE_ADDED_OLDEST_TO_NEWEST, ServerIdCodec(PodcastsSortType)),
        SyncedSetting("marketingOptIn", "marketing_opt_in", False, BoolCodec()),
        SyncedSetting("skipBack", "skip_back_secs", 10, IntCodec()),
        SyncedSetting("skipForward", "skip_forward_secs", 30, IntCodec()),
    )
}

# Keys carried by the deprecated untimestamped protocol.
LEGACY_KEYS: tuple[str, ...] = (
    "skipForward",
    "skipBack",
    "marketingOptIn",
    "freeGiftAcknowledgement",
    "gridOrder",
)


def get_setting(key: str) -> SyncedSetting | None:
    """Return the setting registered under wire *key*, or ``None``."""
    return SYNCED_SETTINGS.get(key)


def parse_user_value(setting: SyncedSetting, text: str) -> Any | None:
    """Parse a value typed by a human (CLI) into the setting's domain type.

    Accepts wire-style input (``15``, ``true``, ``2``) and, for enums, the
    member name in any case (``name_a_to_z``).  Returns ``None`` if *text*
    is not a valid value for *setting*.
    """
    text = text.strip()
    enum_type = getattr(setting.codec, "enum_type", None)
    if enum_type is not None:
        try:
            return enum_type[text.upper()]
        except KeyError:
            pass

    lowered = text.lower()
    if lowered in ("true", "false"):
        raw: Any = lowered == "true"
    else:
        try:
            raw = int(text)
        except ValueError:
            return None
    return setting.decode(raw)


def format_value(value: Any) -> str:
    """Render a domain value for human output."""
    if isinstance(value, bool):
        return "true" if value else "false"
    name = getattr(value, "name", None)
    if name is not None:
        return name.lower()
    return str(value)
