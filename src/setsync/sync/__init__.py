"""Settings reconciliation between the local store and the account service."""

from __future__ import annotations

from setsync.sync.change_set import ChangeSetSync, ProtocolStateError
from setsync.sync.legacy import LegacySettingsSync
from setsync.sync.orchestrator import SyncResult, run_settings_sync, select_protocol
from setsync.sync.reconcile import Outcome, reconcile_response
from setsync.sync.request import build_change_set_request, build_named_settings_request
from setsync.sync.transport import HttpNamedSettingsCaller, NamedSettingsCaller, TransportError

__all__ = [
    "ChangeSetSync",
    "HttpNamedSettingsCaller",
    "LegacySettingsSync",
    "NamedSettingsCaller",
    "Outcome",
    "ProtocolStateError",
    "SyncResult",
    "TransportError",
    "build_change_set_request",
    "build_named_settings_request",
    "reconcile_response",
    "run_settings_sync",
    "select_protocol",
]
