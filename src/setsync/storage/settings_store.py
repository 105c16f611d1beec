"""Local persistence for synchronizable settings.

Two implementations share one interface:

* :class:`MemorySettingStore` keeps everything in a dict.
* :class:`JsonSettingStore` keeps everything in ``.setsync/settings.json``.

Both are addressed by wire key (``skipBack``, ``gridOrder``...).  A local
edit is written with ``needs_sync=True`` and stamps ``modified_at`` with the
current instant; a value that came from the server is written with
``needs_sync=False`` and leaves ``modified_at`` alone.
"""

from __future__ import annotations

import contextlib
import json
import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any, Protocol

from setsync.core.errors import SetsyncError
from setsync.core.settings import SYNCED_SETTINGS, SyncedSetting, get_setting
from setsync.core.timestamps import format_instant, parse_instant, utc_now
from setsync.storage.fs import atomic_write
from setsync.storage.locks import state_lock

logger = logging.getLogger(__name__)

SETTINGS_FILE = "settings.json"


class StoreError(SetsyncError):
    """Raised for unknown keys or an unreadable settings document."""


@dataclass(frozen=True)
class SettingState:
    key: str
    value: Any
    modified_at: datetime | None
    needs_sync: bool


class SettingStore(Protocol):
    def get(self, key: str) -> tuple[Any, datetime | None]: ...

    def set(self, key: str, value: Any, needs_sync: bool) -> None: ...

    def needs_sync(self, key: str) -> bool: ...


def _require_setting(key: str) -> SyncedSetting:
    setting = get_setting(key)
    if setting is None:
        raise StoreError(f"Unknown setting key: {key}")
    return setting


class _BaseSettingStore:
    """Shared get/set logic over a key -> SettingState mapping."""

    def __init__(self, clock: Callable[[], datetime] = utc_now) -> None:
        self._clock = clock

    def _load(self) -> dict[str, SettingState]:
        raise NotImplementedError

    def _store(self, state: SettingState) -> None:
        raise NotImplementedError

    def _write_lock(self) -> contextlib.AbstractContextManager[None]:
        return contextlib.nullcontext()

    def state(self, key: str) -> SettingState:
        setting = _require_setting(key)
        current = self._load().get(key)
        if current is None:
            return SettingState(key, setting.default, None, False)
        return current

    def states(self) -> list[SettingState]:
        """Return the state of every known setting in table order."""
        return [self.state(key) for key in SYNCED_SETTINGS]

    def get(self, key: str) -> tuple[Any, datetime | None]:
        current = self.state(key)
        return current.value, current.modified_at

    def needs_sync(self, key: str) -> bool:
        return self.state(key).needs_sync

    def set(self, key: str, value: Any, needs_sync: bool) -> None:
        _require_setting(key)
        # The current modified_at is read under the same lock as the write.
        with self._write_lock():
            current = self.state(key)
            modified_at = self._clock() if needs_sync else current.modified_at
            self._store(SettingState(key, value, modified_at, needs_sync))


class MemorySettingStore(_BaseSettingStore):
    def __init__(self, clock: Callable[[], datetime] = utc_now) -> None:
        super().__init__(clock)
        self._states: dict[str, SettingState] = {}

    def seed(
        self,
        key: str,
        value: Any,
        modified_at: datetime | None = None,
        needs_sync: bool = False,
    ) -> None:
        """Place a state directly, bypassing timestamp stamping."""
        _require_setting(key)
        self._states[key] = SettingState(key, value, modified_at, needs_sync)

    def _load(self) -> dict[str, SettingState]:
        return self._states

    def _store(self, state: SettingState) -> None:
        self._states[state.key] = state


class JsonSettingStore(_BaseSettingStore):
    """Settings document persisted with atomic writes under a file lock."""

    def __init__(
        self,
        state_dir: Path,
        clock: Callable[[], datetime] = utc_now,
        lock_timeout: float = 10,
    ) -> None:
        super().__init__(clock)
        self.state_dir = state_dir
        self.path = state_dir / SETTINGS_FILE
        self.locks_dir = state_dir / "locks"
        self.lock_timeout = lock_timeout

    def _read_document(self) -> dict:
        if not self.path.exists():
            return {}
        try:
            document = json.loads(self.path.read_text())
        except json.JSONDecodeError as exc:
            raise StoreError(f"Corrupt settings file {self.path}: {exc}") from exc
        if not isinstance(document, dict):
            raise StoreError(f"Corrupt settings file {self.path}: expected a JSON object")
        return document

    def _load(self) -> dict[str, SettingState]:
        document = self._read_document()
        states: dict[str, SettingState] = {}
        for setting in SYNCED_SETTINGS.values():
            entry = document.get(setting.store_key)
            if isinstance(entry, dict):
                states[setting.key] = _entry_to_state(setting, entry)
        return states

    def _write_lock(self) -> contextlib.AbstractContextManager[None]:
        self.locks_dir.mkdir(parents=True, exist_ok=True)
        return state_lock(self.locks_dir, "settings", timeout=self.lock_timeout)

    def _store(self, state: SettingState) -> None:
        """Write one entry.  Callers hold :meth:`_write_lock`."""
        setting = _require_setting(state.key)
        document = self._read_document()
        document[setting.store_key] = {
            "value": setting.encode(state.value),
            "modified_at": (
                format_instant(state.modified_at) if state.modified_at is not None else None
            ),
            "needs_sync": state.needs_sync,
        }
        atomic_write(self.path, json.dumps(document, sort_keys=True, indent=2) + "\n")


def _entry_to_state(setting: SyncedSetting, entry: dict) -> SettingState:
    value = setting.decode(entry.get("value"))
    if value is None:
        logger.warning(
            "Stored value for %s is invalid (%r); using default",
            setting.store_key,
            entry.get("value"),
        )
        value = setting.default

    modified_at = None
    raw_modified_at = entry.get("modified_at")
    if raw_modified_at is not None:
        try:
            modified_at = parse_instant(raw_modified_at)
        except ValueError:
            logger.warning(
                "Stored modified_at for %s is invalid (%r); ignoring",
                setting.store_key,
                raw_modified_at,
            )

    return SettingState(setting.key, value, modified_at, bool(entry.get("needs_sync", False)))
