"""Deprecated untimestamped sync protocol.

Kept only while the ``settings_sync`` capability flag is being rolled
out.  Nothing outside this module depends on it, so it can be deleted
together with the flag.
"""

from __future__ import annotations

import logging

from setsync.core.settings import SYNCED_SETTINGS
from setsync.storage.settings_store import SettingStore
from setsync.sync.logs import invalid_state_log
from setsync.sync.request import build_named_settings_request
from setsync.sync.transport import NamedSettingsCaller
from setsync.sync.wire import NamedSettingResponse

logger = logging.getLogger(__name__)

_NUMBER_KEYS = frozenset({"skipForward", "skipBack", "gridOrder"})
_BOOLEAN_KEYS = frozenset({"marketingOptIn", "freeGiftAcknowledgement"})


class LegacySettingsSync:
    """Push dirty legacy values and take whatever the server says changed."""

    name = "legacy"

    async def run(self, store: SettingStore, caller: NamedSettingsCaller) -> list[str]:
        request = build_named_settings_request(store)
        response = await caller.named_settings(request)
        return apply_named_settings_response(response, store)


def apply_named_settings_response(
    response: dict[str, NamedSettingResponse],
    store: SettingStore,
) -> list[str]:
    """Write every changed entry to *store*; return the keys that were written."""
    applied: list[str] = []
    for key, entry in response.items():
        if not entry.changed:
            logger.debug("%s not changed", key)
            continue
        logger.debug("%s changed to %r", key, entry.value)

        if isinstance(entry.value, bool):
            handled = _BOOLEAN_KEYS
        elif isinstance(entry.value, (int, float)):
            handled = _NUMBER_KEYS
        else:
            continue
        if key not in handled:
            continue

        setting = SYNCED_SETTINGS[key]
        value = setting.decode(entry.value)
        if value is None:
            invalid_state_log.error("Invalid %s value: %r", setting.store_key, entry.value)
            continue
        store.set(key, value, needs_sync=False)
        applied.append(key)
    return applied
