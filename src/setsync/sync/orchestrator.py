"""One end-to-end settings sync attempt.

The protocol is chosen once, at the start of the attempt, from the
``settings_sync`` capability flag.  Any exception raised while running it
turns into :attr:`SyncResult.FAILURE`; per-key skips inside reconciliation
are not failures.  Cancellation is not an exception in that sense and
propagates to the caller.  Keys written before a failure or cancellation
stay written.
"""

from __future__ import annotations

from enum import Enum

from setsync.core.features import Feature, FeatureFlags, get_flags
from setsync.core.ids import generate_attempt_id
from setsync.storage.settings_store import SettingStore
from setsync.sync.change_set import ChangeSetSync
from setsync.sync.legacy import LegacySettingsSync
from setsync.sync.logs import background_log
from setsync.sync.transport import NamedSettingsCaller


class SyncResult(Enum):
    SUCCESS = "success"
    FAILURE = "failure"


def select_protocol(flags: FeatureFlags) -> ChangeSetSync | LegacySettingsSync:
    if flags.is_enabled(Feature.SETTINGS_SYNC):
        return ChangeSetSync(flags)
    return LegacySettingsSync()


async def run_settings_sync(
    store: SettingStore,
    caller: NamedSettingsCaller,
    flags: FeatureFlags | None = None,
) -> SyncResult:
    """Run one sync attempt against *caller* and report success or failure."""
    flags = flags or get_flags()
    attempt_id = generate_attempt_id()
    protocol = select_protocol(flags)
    background_log.debug("Settings sync %s starting (protocol=%s)", attempt_id, protocol.name)

    try:
        await protocol.run(store, caller)
    except Exception:
        background_log.exception("Sync settings failed (%s)", attempt_id)
        return SyncResult.FAILURE

    background_log.info("Settings synced (%s)", attempt_id)
    return SyncResult.SUCCESS
