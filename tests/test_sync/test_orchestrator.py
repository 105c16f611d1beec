"""Tests for sync/orchestrator.py -- protocol selection and attempt outcome."""

from __future__ import annotations

import asyncio
import logging

import pytest

from setsync.core.features import Feature, FeatureFlags
from setsync.sync.change_set import ChangeSetSync, ProtocolStateError
from setsync.sync.legacy import LegacySettingsSync
from setsync.sync.orchestrator import SyncResult, run_settings_sync, select_protocol
from setsync.sync.transport import TransportError

SERVER_TS = "2024-01-01T00:00:00Z"


def _flags(settings_sync: bool, debug: bool = False) -> FeatureFlags:
    return FeatureFlags({Feature.SETTINGS_SYNC.value: settings_sync}, debug=debug)


class TestSelectProtocol:
    def test_flag_on_selects_change_set(self) -> None:
        assert isinstance(select_protocol(_flags(True)), ChangeSetSync)

    def test_flag_off_selects_legacy(self) -> None:
        assert isinstance(select_protocol(_flags(False)), LegacySettingsSync)

    def test_env_override_wins(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SETSYNC_FEATURE_SETTINGS_SYNC", "1")
        assert isinstance(select_protocol(_flags(False)), ChangeSetSync)


class TestRunSettingsSync:
    def test_change_set_success(self, store, fake_caller) -> None:
        caller = fake_caller(changed_payload={"skipBack": {"value": 15, "modifiedAt": SERVER_TS}})

        result = asyncio.run(run_settings_sync(store, caller, _flags(True)))

        assert result is SyncResult.SUCCESS
        assert len(caller.changed_requests) == 1
        assert caller.named_requests == []
        assert store.get("skipBack")[0] == 15

    def test_legacy_success(self, store, fake_caller) -> None:
        caller = fake_caller(named_payload={"skipForward": {"value": 20, "changed": True}})

        result = asyncio.run(run_settings_sync(store, caller, _flags(False)))

        assert result is SyncResult.SUCCESS
        assert caller.changed_requests == []
        assert len(caller.named_requests) == 1
        assert store.get("skipForward")[0] == 20

    def test_skipped_keys_are_still_success(self, store, fake_caller) -> None:
        caller = fake_caller(
            changed_payload={
                "gridOrder": {"value": 999, "modifiedAt": SERVER_TS},
                "volumeBoost": {"value": 1, "modifiedAt": SERVER_TS},
            }
        )

        result = asyncio.run(run_settings_sync(store, caller, _flags(True)))

        assert result is SyncResult.SUCCESS

    def test_out_of_range_timestamp_is_still_success(self, store, fake_caller) -> None:
        caller = fake_caller(
            changed_payload={
                "skipBack": {"value": 15, "modifiedAt": "0001-01-01T00:00:00+01:00"},
                "skipForward": {"value": 45, "modifiedAt": SERVER_TS},
            }
        )

        result = asyncio.run(run_settings_sync(store, caller, _flags(True)))

        assert result is SyncResult.SUCCESS
        assert store.get("skipForward")[0] == 45

    @pytest.mark.parametrize("settings_sync", [True, False])
    def test_transport_error_is_failure(self, store, fake_caller, settings_sync: bool) -> None:
        caller = fake_caller(error=TransportError("connection refused"))

        result = asyncio.run(run_settings_sync(store, caller, _flags(settings_sync)))

        assert result is SyncResult.FAILURE

    def test_non_object_response_is_failure(self, store, fake_caller) -> None:
        caller = fake_caller(changed_payload=["not", "an", "object"])

        result = asyncio.run(run_settings_sync(store, caller, _flags(True)))

        assert result is SyncResult.FAILURE

    def test_failure_is_logged_on_background_channel(self, store, fake_caller, caplog) -> None:
        caller = fake_caller(error=TransportError("boom"))

        with caplog.at_level(logging.ERROR, logger="setsync.background"):
            asyncio.run(run_settings_sync(store, caller, _flags(True)))

        assert "Sync settings failed" in caplog.text

    def test_cancellation_propagates(self, store, fake_caller) -> None:
        caller = fake_caller(error=asyncio.CancelledError())

        with pytest.raises(asyncio.CancelledError):
            asyncio.run(run_settings_sync(store, caller, _flags(True)))

    def test_uses_process_flags_by_default(self, store, fake_caller, monkeypatch) -> None:
        monkeypatch.setenv("SETSYNC_FEATURE_SETTINGS_SYNC", "0")
        caller = fake_caller()

        asyncio.run(run_settings_sync(store, caller))

        assert len(caller.named_requests) == 1


class TestChangeSetGuard:
    def test_production_guard_is_a_logged_no_op(self, store, fake_caller, caplog) -> None:
        caller = fake_caller()

        with caplog.at_level(logging.ERROR, logger="setsync.invalid_state"):
            outcomes = asyncio.run(ChangeSetSync(_flags(False)).run(store, caller))

        assert outcomes == {}
        assert caller.call_count == 0
        assert "must never run" in caplog.text

    def test_debug_guard_raises(self, store, fake_caller) -> None:
        caller = fake_caller()

        with pytest.raises(ProtocolStateError):
            asyncio.run(ChangeSetSync(_flags(False, debug=True)).run(store, caller))

        assert caller.call_count == 0

    def test_debug_guard_via_env(self, store, fake_caller, monkeypatch) -> None:
        monkeypatch.setenv("SETSYNC_DEBUG", "1")

        with pytest.raises(ProtocolStateError):
            asyncio.run(ChangeSetSync(_flags(False)).run(store, fake_caller()))

    def test_guard_error_becomes_failure_in_orchestrator(
        self, store, fake_caller, monkeypatch
    ) -> None:
        from setsync.sync import orchestrator

        flags = _flags(False, debug=True)
        monkeypatch.setattr(orchestrator, "select_protocol", lambda f: ChangeSetSync(f))
        caller = fake_caller()

        result = asyncio.run(run_settings_sync(store, caller, flags))

        assert result is SyncResult.FAILURE
        assert caller.call_count == 0
