"""Per-key last-writer-wins reconciliation of a change-set response.

The policy is deliberately asymmetric:

* a server value without a modification timestamp is never adopted, since
  its recency cannot be established;
* a local setting without a modification timestamp does not block
  adoption, since nothing proves the local value is newer.

Each key is handled independently.  Problems with one entry are logged and
that entry is skipped; they never abort the rest of the response.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from enum import Enum

from setsync.core.settings import SyncedSetting, get_setting
from setsync.core.timestamps import parse_instant
from setsync.storage.settings_store import SettingStore
from setsync.sync.logs import invalid_state_log
from setsync.sync.wire import ChangedSettingResponse

logger = logging.getLogger(__name__)


class Outcome(Enum):
    ADOPTED = "adopted"
    SKIPPED_INVALID = "skipped-invalid"
    SKIPPED_NO_TIMESTAMP = "skipped-no-timestamp"
    SKIPPED_UNPARSEABLE_TIMESTAMP = "skipped-unparseable-timestamp"
    SKIPPED_STALE = "skipped-stale"
    UNKNOWN_KEY = "unknown-key"


def reconcile_response(
    response: Mapping[str, ChangedSettingResponse],
    store: SettingStore,
) -> dict[str, Outcome]:
    """Apply *response* to *store* and return the outcome for every key."""
    outcomes: dict[str, Outcome] = {}
    for key, entry in response.items():
        setting = get_setting(key)
        if setting is None:
            invalid_state_log.error("Cannot handle named setting response with unknown key: %s", key)
            outcomes[key] = Outcome.UNKNOWN_KEY
            continue
        outcomes[key] = update_setting_if_possible(setting, entry, store)
    return outcomes


def update_setting_if_possible(
    setting: SyncedSetting,
    entry: ChangedSettingResponse,
    store: SettingStore,
) -> Outcome:
    new_value = setting.decode(entry.value)
    if new_value is None:
        invalid_state_log.error("Invalid %s value: %r", setting.store_key, entry.value)
        return Outcome.SKIPPED_INVALID

    if entry.modified_at is None:
        logger.info(
            "Not syncing %s from the server because setting was not modified on the server",
            setting.store_key,
        )
        return Outcome.SKIPPED_NO_TIMESTAMP

    try:
        server_modified_at = parse_instant(entry.modified_at)
    except ValueError:
        invalid_state_log.error(
            "Not syncing %s from the server because server returned modifiedAt "
            "value that could not be parsed: %r",
            setting.store_key,
            entry.modified_at,
        )
        return Outcome.SKIPPED_UNPARSEABLE_TIMESTAMP

    _, local_modified_at = store.get(setting.key)
    if local_modified_at is not None and local_modified_at > server_modified_at:
        logger.info(
            "Not syncing %s value of %r from the server because setting was "
            "modified more recently locally",
            setting.store_key,
            new_value,
        )
        return Outcome.SKIPPED_STALE

    store.set(setting.key, new_value, needs_sync=False)
    logger.debug("Adopted server value for %s: %r", setting.store_key, new_value)
    return Outcome.ADOPTED
