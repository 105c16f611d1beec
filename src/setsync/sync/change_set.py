"""Current sync protocol: named, typed values with modification timestamps."""

from __future__ import annotations

from setsync.core.errors import SetsyncError
from setsync.core.features import Feature, FeatureFlags
from setsync.storage.settings_store import SettingStore
from setsync.sync.logs import invalid_state_log
from setsync.sync.reconcile import Outcome, reconcile_response
from setsync.sync.request import build_change_set_request
from setsync.sync.transport import NamedSettingsCaller

_GUARD_MESSAGE = "Change-set sync must never run while the settings sync flag is disabled"


class ProtocolStateError(SetsyncError):
    """Raised in debug mode when a protocol runs outside its capability flag."""


class ChangeSetSync:
    """Build a change-set, send it, reconcile the server's answer."""

    name = "change_set"

    def __init__(self, flags: FeatureFlags) -> None:
        self.flags = flags

    async def run(self, store: SettingStore, caller: NamedSettingsCaller) -> dict[str, Outcome]:
        if not self.flags.is_enabled(Feature.SETTINGS_SYNC):
            invalid_state_log.error(_GUARD_MESSAGE)
            if self.flags.debug:
                raise ProtocolStateError(_GUARD_MESSAGE)
            return {}

        request = build_change_set_request(store)
        response = await caller.changed_named_settings(request)
        return reconcile_response(response, store)
