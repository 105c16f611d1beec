"""Setting value types and their wire codecs.

Every codec is a pair of pure functions.  ``encode`` is total over the
setting's domain; ``decode`` returns ``None`` for anything it cannot turn
into a valid domain value and never raises.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, Generic, TypeVar

T = TypeVar("T")


# ---------------------------------------------------------------------------
# Domain enums
# ---------------------------------------------------------------------------


class AutoArchiveAfterPlaying(Enum):
    """How long after an episode is played before it is archived."""

    NEVER = "never"
    AFTER_PLAYING = "after_playing"
    HOURS_24 = "hours_24"
    DAYS_2 = "days_2"
    WEEKS_1 = "weeks_1"


class AutoArchiveInactive(Enum):
    """How long an untouched episode stays before it is archived."""

    NEVER = "never"
    HOURS_24 = "hours_24"
    DAYS_2 = "days_2"
    WEEKS_1 = "weeks_1"
    WEEKS_2 = "weeks_2"
    DAYS_30 = "days_30"
    DAYS_90 = "days_90"


class PodcastsSortType(Enum):
    """Podcast grid ordering.  Values are the server's stable ids."""

    DATE_ADDED_OLDEST_TO_NEWEST = 0
    NAME_A_TO_Z = 1
    EPISODE_DATE_NEWEST_TO_OLDEST = 2
    DRAG_DROP = 3


# ---------------------------------------------------------------------------
# Wire coercion helpers
# ---------------------------------------------------------------------------


def wire_number(raw: Any) -> int | None:
    """Coerce a generic JSON number to ``int``.

    Booleans are not numbers here even though Python says otherwise, and
    NaN/infinity are rejected.  Floats are truncated toward zero.
    """
    if isinstance(raw, bool) or not isinstance(raw, (int, float)):
        return None
    if isinstance(raw, float):
        if not math.isfinite(raw):
            return None
        return int(raw)
    return raw


def wire_bool(raw: Any) -> bool | None:
    if isinstance(raw, bool):
        return raw
    return None


# ---------------------------------------------------------------------------
# Codecs
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Codec(Generic[T]):
    """Base codec.  Subclasses override :meth:`encode` and :meth:`decode`."""

    def encode(self, value: T) -> int | bool:
        raise NotImplementedError

    def decode(self, raw: Any) -> T | None:
        raise NotImplementedError


@dataclass(frozen=True)
class IntCodec(Codec[int]):
    def encode(self, value: int) -> int:
        return value

    def decode(self, raw: Any) -> int | None:
        return wire_number(raw)


@dataclass(frozen=True)
class BoolCodec(Codec[bool]):
    def encode(self, value: bool) -> bool:
        return value

    def decode(self, raw: Any) -> bool | None:
        return wire_bool(raw)


@dataclass(frozen=True)
class IndexCodec(Codec[Enum]):
    """Encode an enum member as its declaration index."""

    enum_type: type[Enum]

    def encode(self, value: Enum) -> int:
        return list(self.enum_type).index(value)

    def decode(self, raw: Any) -> Enum | None:
        index = wire_number(raw)
        members = list(self.enum_type)
        if index is None or not 0 <= index < len(members):
            return None
        return members[index]


@dataclass(frozen=True)
class ServerIdCodec(Codec[Enum]):
    """Encode an enum member as its integer value (a server-assigned id)."""

    enum_type: type[Enum]

    def encode(self, value: Enum) -> int:
        return value.value

    def decode(self, raw: Any) -> Enum | None:
        server_id = wire_number(raw)
        if server_id is None:
            return None
        for member in self.enum_type:
            if member.value == server_id:
                return member
        return None
