"""Build outbound requests from the current contents of a setting store."""

from __future__ import annotations

from setsync.core.settings import LEGACY_KEYS, SYNCED_SETTINGS
from setsync.storage.settings_store import SettingStore
from setsync.sync.wire import ChangedSetting, ChangeSetRequest, NamedSettingsRequest


def build_change_set_request(store: SettingStore) -> ChangeSetRequest:
    """Snapshot every known setting into a change-set request.

    Every key is included, including settings that were never modified
    locally; those carry ``modified_at=None``, which tells the server there
    is no local modification on record.
    """
    changed: dict[str, ChangedSetting] = {}
    for key, setting in SYNCED_SETTINGS.items():
        value, modified_at = store.get(key)
        changed[key] = ChangedSetting(value=setting.encode(value), modified_at=modified_at)
    return ChangeSetRequest(changed_settings=changed)


def build_named_settings_request(store: SettingStore) -> NamedSettingsRequest:
    """Build the legacy request: the legacy keys only, values without timestamps.

    A value is sent only when the setting is waiting to be synced; settings
    already in step with the server are sent as ``None``.
    """
    settings: dict[str, int | bool | None] = {}
    for key in LEGACY_KEYS:
        setting = SYNCED_SETTINGS[key]
        if store.needs_sync(key):
            value, _ = store.get(key)
            settings[key] = setting.encode(value)
        else:
            settings[key] = None
    return NamedSettingsRequest(settings=settings)
