"""Tests for ConfigStore persistence and change notification."""

import json
import os
import threading

import pytest

from constants import SAVED_SYMBOLS_KEY
from store import ALL_KEYS, ConfigStore, WriteError


class TestReadWrite:
    """Test get/set/get_default."""

    def test_unset_keys_read_as_defaults(self, store):
        """A fresh store returns schema defaults."""
        assert store.get("shift-symbol") == "⇧"
        assert store.get("caps-icon-path") == ""
        assert store.get("num-use-icon") is False

    def test_get_default_ignores_stored_value(self, store):
        """get_default() always returns the schema default."""
        store.set("shift-symbol", "S")
        assert store.get_default("shift-symbol") == "⇧"

    def test_set_then_get(self, store):
        store.set("alt-symbol", "Alt")
        store.set("alt-use-icon", True)
        assert store.get("alt-symbol") == "Alt"
        assert store.get("alt-use-icon") is True

    def test_writes_are_durable(self, store, store_path):
        """A new store on the same file sees earlier writes."""
        store.set("super-symbol", "Win")
        store.set("super-icon-path", "/icons/super.svg")
        reopened = ConfigStore(store_path)
        assert reopened.get("super-symbol") == "Win"
        assert reopened.get("super-icon-path") == "/icons/super.svg"

    def test_only_written_keys_are_persisted(self, store, store_path):
        store.set("control-symbol", "Ctrl")
        data = json.loads(store_path.read_text(encoding="utf-8"))
        assert data == {"control-symbol": "Ctrl"}

    def test_unknown_key_raises_write_error(self, store):
        with pytest.raises(WriteError, match="Unknown setting"):
            store.set("hyper-symbol", "H")

    def test_string_for_boolean_raises_write_error(self, store):
        with pytest.raises(WriteError, match="expected bool"):
            store.set("shift-use-icon", "true")

    def test_boolean_for_string_raises_write_error(self, store):
        with pytest.raises(WriteError, match="expected str"):
            store.set("shift-symbol", True)

    def test_int_is_not_a_boolean(self, store):
        with pytest.raises(WriteError):
            store.set("shift-use-icon", 1)

    def test_failed_write_leaves_file_alone(self, store, store_path):
        with pytest.raises(WriteError):
            store.set("shift-symbol", 42)
        assert not store_path.exists()

    def test_get_unknown_key_raises_key_error(self, store):
        with pytest.raises(KeyError):
            store.get("nope")


class TestPreset:
    """Test get_preset/set_preset."""

    def test_default_preset_matches_default_symbols(self, store):
        preset = store.get_preset()
        assert preset["shift-symbol"] == "⇧"
        assert preset["altgr-symbol"] == "⎈"
        assert preset["caps-icon-path"] == ""
        assert not any(key.endswith("-use-icon") for key in preset)

    def test_set_preset_replaces_wholesale(self, store):
        store.set_preset({"shift-symbol": "S"})
        assert store.get_preset() == {"shift-symbol": "S"}

    def test_get_preset_returns_a_copy(self, store):
        preset = store.get_preset()
        preset["shift-symbol"] = "changed"
        assert store.get_preset()["shift-symbol"] == "⇧"

    def test_preset_values_must_be_strings(self, store):
        with pytest.raises(WriteError):
            store.set_preset({"shift-use-icon": True})

    def test_preset_must_be_a_mapping(self, store):
        with pytest.raises(WriteError):
            store.set_preset(["shift-symbol"])

    def test_set_preset_notifies_saved_symbols(self, store):
        fired = []
        store.subscribe(SAVED_SYMBOLS_KEY, fired.append)
        store.set_preset({"shift-symbol": "S"})
        assert fired == [SAVED_SYMBOLS_KEY]


class TestSubscribe:
    """Test change notification."""

    def test_changing_write_fires_once(self, store):
        fired = []
        store.subscribe("shift-symbol", fired.append)
        store.set("shift-symbol", "S")
        assert fired == ["shift-symbol"]

    def test_equal_write_does_not_fire(self, store):
        fired = []
        store.set("shift-symbol", "S")
        store.subscribe("shift-symbol", fired.append)
        store.set("shift-symbol", "S")
        assert fired == []

    def test_writing_the_default_to_an_unset_key_does_not_fire(self, store):
        fired = []
        store.subscribe(ALL_KEYS, fired.append)
        store.set("shift-symbol", "⇧")
        assert fired == []

    def test_key_subscription_ignores_other_keys(self, store):
        fired = []
        store.subscribe("shift-symbol", fired.append)
        store.set("caps-symbol", "C")
        assert fired == []

    def test_wildcard_sees_every_key_in_write_order(self, store):
        fired = []
        store.subscribe(ALL_KEYS, fired.append)
        store.set("caps-symbol", "C")
        store.set("shift-use-icon", True)
        store.set("caps-symbol", "CL")
        assert fired == ["caps-symbol", "shift-use-icon", "caps-symbol"]

    def test_handler_sees_new_value(self, store):
        seen = []
        store.subscribe("num-symbol", lambda key: seen.append(store.get(key)))
        store.set("num-symbol", "N")
        assert seen == ["N"]

    def test_unsubscribe(self, store):
        fired = []
        handler_id = store.subscribe("shift-symbol", fired.append)
        store.unsubscribe(handler_id)
        store.set("shift-symbol", "S")
        assert fired == []

    def test_subscribe_unknown_key_raises(self, store):
        with pytest.raises(KeyError):
            store.subscribe("hyper-symbol", lambda key: None)

    def test_failing_handler_does_not_stop_others(self, store):
        fired = []

        def broken(key):
            raise RuntimeError("boom")

        store.subscribe("shift-symbol", broken)
        store.subscribe("shift-symbol", fired.append)
        store.set("shift-symbol", "S")
        assert fired == ["shift-symbol"]
        assert store.get("shift-symbol") == "S"


class TestPoll:
    """Test picking up changes written by another process."""

    def test_poll_notifies_external_change(self, store, store_path):
        fired = []
        store.subscribe(ALL_KEYS, fired.append)
        other = ConfigStore(store_path)
        other.set("scroll-symbol", "Scr")

        assert store.poll() == ["scroll-symbol"]
        assert fired == ["scroll-symbol"]
        assert store.get("scroll-symbol") == "Scr"

    def test_poll_without_changes_is_quiet(self, store):
        store.set("shift-symbol", "S")
        fired = []
        store.subscribe(ALL_KEYS, fired.append)
        assert store.poll() == []
        assert fired == []

    def test_local_write_keeps_external_keys(self, store, store_path):
        """Writes merge into the file instead of clobbering other writers."""
        other = ConfigStore(store_path)
        other.set("caps-symbol", "C")
        store.set("shift-symbol", "S")

        data = json.loads(store_path.read_text(encoding="utf-8"))
        assert data == {"caps-symbol": "C", "shift-symbol": "S"}
        # The external key is reported by the next poll
        assert store.poll() == ["caps-symbol"]

    def test_poll_keeps_values_when_file_is_damaged(self, store, store_path):
        store.set("shift-symbol", "S")
        store_path.write_text("{not json", encoding="utf-8")
        assert store.poll() == []
        assert store.get("shift-symbol") == "S"


class TestDamagedFile:
    """Test tolerance of unusable settings files."""

    def test_corrupt_file_reads_as_defaults(self, store_path):
        store_path.parent.mkdir(parents=True)
        store_path.write_text("{not json", encoding="utf-8")
        assert ConfigStore(store_path).get("shift-symbol") == "⇧"

    def test_non_object_file_reads_as_defaults(self, store_path):
        store_path.parent.mkdir(parents=True)
        store_path.write_text("[1, 2]", encoding="utf-8")
        assert ConfigStore(store_path).get("shift-symbol") == "⇧"

    def test_wrong_types_and_unknown_keys_are_ignored(self, store_path):
        store_path.parent.mkdir(parents=True)
        store_path.write_text(
            json.dumps({"shift-symbol": 5, "caps-use-icon": True, "bogus": "x"}),
            encoding="utf-8",
        )
        store = ConfigStore(store_path)
        assert store.get("shift-symbol") == "⇧"
        assert store.get("caps-use-icon") is True


class TestDefaultPath:
    """Test settings file location."""

    def test_env_override(self, isolated_home, monkeypatch):
        target = isolated_home / "custom.json"
        monkeypatch.setenv("KBD_INFORMER_CONFIG", str(target))
        assert ConfigStore().path == target

    def test_xdg_config_home(self, isolated_home):
        expected = isolated_home / "xdg-config" / "kbd-informer" / "settings.json"
        assert ConfigStore().path == expected


class TestWriteFailure:
    """Test writes that cannot reach the disk."""

    def test_unwritable_path_raises_write_error(self, blocked_path):
        store = ConfigStore(blocked_path)
        fired = []
        store.subscribe(ALL_KEYS, fired.append)

        with pytest.raises(WriteError, match="Could not write"):
            store.set("shift-symbol", "S")

        assert store.get("shift-symbol") == "⇧"
        assert fired == []

    def test_failed_replace_removes_temp_file(self, store, store_path, monkeypatch):
        store.set("caps-symbol", "C")

        def fail_replace(src, dst):
            raise OSError("disk full")

        monkeypatch.setattr("store.os.replace", fail_replace)
        with pytest.raises(WriteError, match="disk full"):
            store.set("shift-symbol", "S")

        assert store.get("shift-symbol") == "⇧"
        assert json.loads(store_path.read_text(encoding="utf-8")) == {"caps-symbol": "C"}
        assert list(store_path.parent.glob("*.tmp")) == []


class TestConcurrentWriters:
    """Test two stores writing the same file."""

    def test_no_temp_files_left_behind(self, store, store_path):
        store.set("shift-symbol", "S")
        ConfigStore(store_path).set("caps-symbol", "C")
        assert list(store_path.parent.glob("*.tmp")) == []

    def test_interleaved_writer_keeps_both_keys(self, store, store_path, monkeypatch):
        """A writer arriving mid-write waits, then merges instead of clobbering."""
        other = ConfigStore(store_path)
        real_replace = os.replace
        competitors = []

        def replace_with_competitor(src, dst):
            if not competitors:
                thread = threading.Thread(target=other.set, args=("caps-symbol", "C"))
                competitors.append(thread)
                thread.start()
                thread.join(timeout=0.2)
            real_replace(src, dst)

        monkeypatch.setattr("store.os.replace", replace_with_competitor)
        store.set("shift-symbol", "S")
        competitors[0].join(timeout=5)

        data = json.loads(store_path.read_text(encoding="utf-8"))
        assert data == {"shift-symbol": "S", "caps-symbol": "C"}
        assert store.get("shift-symbol") == "S"
        assert other.get("caps-symbol") == "C"
