"""Tests for preference stores and the script editor override transition."""

import json
from datetime import datetime

from unity_vscode.services.editor_preferences import (
    ALLOW_ATTACHED_DEBUGGING,
    MONODEVELOP_SOLUTION_PROPERTIES,
    PREVIOUS_APP,
    PREVIOUS_ARGS,
    SCRIPT_EDITOR_ARGS,
    SCRIPTS_DEFAULT_APP,
    SNAPSHOT_KEYS,
    SUPPORTS_UNITY_PROJ,
    apply_editor_overrides,
    restore_editor_overrides,
)
from unity_vscode.services.preferences import (
    DEFAULT_LAST_UPDATE,
    IntegrationPreferences,
    JsonFilePreferenceStore,
    MemoryPreferenceStore,
    PreferenceStore,
)

CODE = "/usr/local/bin/code"
ARGS = '-r -g "$(File):$(Line)"'


class TestStores:

    def test_memory_store_protocol(self, store):
        assert isinstance(store, PreferenceStore)
        assert not store.has("a")
        store.set("a", 1)
        assert store.has("a")
        assert store.get("a") == 1
        store.delete("a")
        assert store.get("a", "fallback") == "fallback"

    def test_json_store_persists(self, tmp_path):
        path = tmp_path / "nested" / "prefs.json"
        first = JsonFilePreferenceStore(path)
        first.set("VSCode_Enabled", True)
        first.set("kScriptsDefaultApp", CODE)

        second = JsonFilePreferenceStore(path)
        assert second.get("VSCode_Enabled") is True
        assert second.get("kScriptsDefaultApp") == CODE

        second.delete("VSCode_Enabled")
        assert "VSCode_Enabled" not in json.loads(path.read_text(encoding="utf-8"))

    def test_json_store_ignores_corrupt_file(self, tmp_path):
        path = tmp_path / "prefs.json"
        path.write_text("[1, 2", encoding="utf-8")
        assert JsonFilePreferenceStore(path).as_dict() == {}


class TestIntegrationPreferences:

    def test_defaults(self, store):
        prefs = IntegrationPreferences(store)
        assert prefs.enabled is False
        assert prefs.debug is False
        assert prefs.write_launch_file is True
        assert prefs.use_unity_debugger is False
        assert prefs.revert_on_exit is True
        assert prefs.automatic_updates is False
        assert prefs.update_days == 7
        assert prefs.last_update == DEFAULT_LAST_UPDATE
        assert prefs.remote_version is None

    def test_update_days_clamped(self, store):
        prefs = IntegrationPreferences(store)
        prefs.update_days = 90
        assert prefs.update_days == 31
        prefs.update_days = 0
        assert prefs.update_days == 1

    def test_last_update_round_trip(self, store):
        prefs = IntegrationPreferences(store)
        prefs.last_update = datetime(2024, 3, 1, 12, 30)
        assert prefs.last_update == datetime(2024, 3, 1, 12, 30)

    def test_string_booleans(self):
        prefs = IntegrationPreferences(MemoryPreferenceStore({"VSCode_Enabled": "true"}))
        assert prefs.enabled is True


class TestEditorOverrides:

    def test_enable_from_empty_store(self, store):
        apply_editor_overrides(store, CODE, ARGS)

        assert store.get(SCRIPTS_DEFAULT_APP) == CODE
        assert store.has(PREVIOUS_APP)
        assert store.get(PREVIOUS_APP) == ""
        assert store.get(SCRIPT_EDITOR_ARGS) == ARGS
        assert store.get(SCRIPT_EDITOR_ARGS + CODE) == ARGS
        assert store.get(MONODEVELOP_SOLUTION_PROPERTIES) is False
        assert store.get(SUPPORTS_UNITY_PROJ) is False
        assert store.get(ALLOW_ATTACHED_DEBUGGING) is True

    def test_reapplying_keeps_original_snapshot(self, store):
        store.set(SCRIPTS_DEFAULT_APP, "/Applications/Rider.app")
        store.set(SCRIPT_EDITOR_ARGS, "$(File)")

        apply_editor_overrides(store, CODE, ARGS)
        apply_editor_overrides(store, CODE, ARGS)

        assert store.get(PREVIOUS_APP) == "/Applications/Rider.app"
        assert store.get(PREVIOUS_ARGS) == "$(File)"

    def test_restore_round_trip(self, store):
        store.set(SCRIPTS_DEFAULT_APP, "/Applications/Rider.app")
        store.set(SCRIPT_EDITOR_ARGS, "$(File)")
        store.set(MONODEVELOP_SOLUTION_PROPERTIES, True)
        store.set(SUPPORTS_UNITY_PROJ, True)
        store.set(ALLOW_ATTACHED_DEBUGGING, False)

        apply_editor_overrides(store, CODE, ARGS)
        restore_editor_overrides(store)

        assert store.get(SCRIPTS_DEFAULT_APP) == "/Applications/Rider.app"
        assert store.get(SCRIPT_EDITOR_ARGS) == "$(File)"
        assert store.get(MONODEVELOP_SOLUTION_PROPERTIES) is True
        assert store.get(SUPPORTS_UNITY_PROJ) is True
        assert store.get(ALLOW_ATTACHED_DEBUGGING) is False
        assert not any(store.has(key) for key in SNAPSHOT_KEYS)

    def test_restore_with_empty_snapshot_keeps_code(self, store):
        apply_editor_overrides(store, CODE, ARGS)
        restore_editor_overrides(store)

        # Nothing was configured before, so there is nothing to go back to
        assert store.get(SCRIPTS_DEFAULT_APP) == CODE
        assert store.get(ALLOW_ATTACHED_DEBUGGING) is False

    def test_attach_left_on_when_it_was_on(self, store):
        store.set(ALLOW_ATTACHED_DEBUGGING, True)
        apply_editor_overrides(store, CODE, ARGS)
        restore_editor_overrides(store)
        assert store.get(ALLOW_ATTACHED_DEBUGGING) is True
