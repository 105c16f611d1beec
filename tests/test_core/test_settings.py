"""Tests for the synchronizable settings table."""

from __future__ import annotations

import pytest

from setsync.core.settings import (
    LEGACY_KEYS,
    SYNCED_SETTINGS,
    format_value,
    get_setting,
    parse_user_value,
)
from setsync.core.values import AutoArchiveAfterPlaying, PodcastsSortType


class TestSyncedSettings:
    def test_known_keys(self) -> None:
        assert set(SYNCED_SETTINGS) == {
            "autoArchivePlayed",
            "autoArchiveInactive",
            "autoArchiveIncludesStarred",
            "freeGiftAcknowledgement",
            "gridOrder",
            "marketingOptIn",
            "skipBack",
            "skipForward",
        }

    def test_table_key_matches_entry_key(self) -> None:
        for key, setting in SYNCED_SETTINGS.items():
            assert setting.key == key

    def test_store_keys_are_unique(self) -> None:
        store_keys = [s.store_key for s in SYNCED_SETTINGS.values()]
        assert len(store_keys) == len(set(store_keys))

    def test_every_default_round_trips(self) -> None:
        for setting in SYNCED_SETTINGS.values():
            assert setting.decode(setting.encode(setting.default)) == setting.default

    def test_legacy_keys_are_a_subset(self) -> None:
        assert set(LEGACY_KEYS) <= set(SYNCED_SETTINGS)
        assert len(LEGACY_KEYS) == 5

    def test_get_setting_unknown(self) -> None:
        assert get_setting("volumeBoost") is None


class TestParseUserValue:
    def test_integer(self) -> None:
        assert parse_user_value(SYNCED_SETTINGS["skipBack"], "15") == 15

    def test_boolean(self) -> None:
        assert parse_user_value(SYNCED_SETTINGS["marketingOptIn"], "TRUE") is True

    def test_enum_by_name(self) -> None:
        setting = SYNCED_SETTINGS["gridOrder"]
        assert parse_user_value(setting, "name_a_to_z") is PodcastsSortType.NAME_A_TO_Z

    def test_enum_by_wire_value(self) -> None:
        setting = SYNCED_SETTINGS["autoArchivePlayed"]
        assert parse_user_value(setting, "1") is AutoArchiveAfterPlaying.AFTER_PLAYING

    @pytest.mark.parametrize(
        ("key", "text"),
        [
            ("skipBack", "true"),
            ("skipBack", "ten"),
            ("marketingOptIn", "1"),
            ("gridOrder", "42"),
            ("autoArchivePlayed", "sometimes"),
        ],
    )
    def test_invalid_input_is_none(self, key: str, text: str) -> None:
        assert parse_user_value(SYNCED_SETTINGS[key], text) is None


class TestFormatValue:
    def test_formats(self) -> None:
        assert format_value(True) == "true"
        assert format_value(30) == "30"
        assert format_value(PodcastsSortType.DRAG_DROP) == "drag_drop"
