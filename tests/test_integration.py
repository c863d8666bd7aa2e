"""Tests for the host-facing integration facade."""

import json
from datetime import datetime
from unittest.mock import MagicMock, patch

import pytest

from unity_vscode.core.config import IntegrationConfig
from unity_vscode.core.errors import UpdateCheckError
from unity_vscode.models.update import UpdateInfo
from unity_vscode.services.editor_preferences import PREVIOUS_APP, SCRIPTS_DEFAULT_APP
from unity_vscode.services.integration import VSCodeIntegration

CODE = "/usr/local/bin/code"


class FakeGenerator:
    def __init__(self):
        self.syncs = 0

    def sync(self):
        self.syncs += 1


class FakeScanner:
    def __init__(self, port=None):
        self.port = port
        self.calls = 0

    def find_debug_port(self):
        self.calls += 1
        return self.port


@pytest.fixture
def launcher():
    fake = MagicMock()
    fake.open_file.return_value = True
    fake.open_project.return_value = True
    return fake


@pytest.fixture
def make_integration(store, unity_project, launcher):
    def make(port=None):
        return VSCodeIntegration(
            store,
            unity_project,
            generator=FakeGenerator(),
            launcher=launcher,
            scanner=FakeScanner(port),
            config=IntegrationConfig(code_path=CODE),
        )
    return make


def read_launch(project):
    return json.loads((project / ".vscode" / "launch.json").read_text(encoding="utf-8"))


# =============================================================================
# Enable / disable
# =============================================================================

class TestSetEnabled:

    def test_enable_clears_and_regenerates(self, make_integration, unity_project, store):
        (unity_project / "Demo.sln").write_text("old", encoding="utf-8")
        (unity_project / "Assembly-CSharp.csproj").write_text("old", encoding="utf-8")
        integration = make_integration()

        integration.set_enabled(True)

        assert integration.enabled is True
        assert not (unity_project / "Demo.sln").exists()
        assert not (unity_project / "Assembly-CSharp.csproj").exists()
        assert integration.generator.syncs == 1
        assert store.get(SCRIPTS_DEFAULT_APP) == CODE
        assert store.get(PREVIOUS_APP) == ""

    def test_enable_twice_is_a_no_op(self, make_integration):
        integration = make_integration()
        integration.set_enabled(True)
        integration.set_enabled(True)
        assert integration.generator.syncs == 1

    def test_disable_restores_previous_editor(self, make_integration, store):
        store.set(SCRIPTS_DEFAULT_APP, "/Applications/Rider.app")
        integration = make_integration()

        integration.set_enabled(True)
        assert store.get(SCRIPTS_DEFAULT_APP) == CODE
        integration.set_enabled(False)

        assert integration.enabled is False
        assert store.get(SCRIPTS_DEFAULT_APP) == "/Applications/Rider.app"
        assert not store.has(PREVIOUS_APP)


# =============================================================================
# Host hooks
# =============================================================================

class TestHostHooks:

    def test_script_opened_in_code(self, make_integration, unity_project, launcher):
        integration = make_integration()
        integration.set_enabled(True)

        assert integration.on_asset_opened("Assets/Scripts/Player.cs", 42) is True
        launcher.open_file.assert_called_once_with(
            unity_project, unity_project / "Assets/Scripts/Player.cs", 42)

    def test_non_script_left_to_host(self, make_integration, launcher):
        integration = make_integration()
        integration.set_enabled(True)

        assert integration.on_asset_opened("Assets/Art/Hero.png") is False
        launcher.open_file.assert_not_called()

    def test_disabled_leaves_everything_to_host(self, make_integration, launcher):
        integration = make_integration()
        assert integration.on_asset_opened("Assets/Scripts/Player.cs") is False
        launcher.open_file.assert_not_called()

    def test_entering_play_mode_writes_launch_file(self, make_integration, unity_project):
        integration = make_integration(port=56123)
        integration.set_enabled(True)

        integration.on_play_mode_changed(is_playing=False, will_change=True)
        assert not (unity_project / ".vscode" / "launch.json").exists()

        integration.on_play_mode_changed(is_playing=True, will_change=True)
        assert read_launch(unity_project)["configurations"][0]["port"] == 56123

    def test_domain_unload_reverts_editor(self, make_integration, store):
        store.set(SCRIPTS_DEFAULT_APP, "/usr/bin/monodevelop")
        integration = make_integration()
        integration.set_enabled(True)

        integration.on_domain_unload()

        assert store.get(SCRIPTS_DEFAULT_APP) == "/usr/bin/monodevelop"
        # Still enabled; the next startup applies the overrides again
        assert integration.enabled is True

    def test_domain_unload_without_revert(self, make_integration, store):
        integration = make_integration()
        integration.set_enabled(True)
        integration.prefs.revert_on_exit = False

        integration.on_domain_unload()
        assert store.get(SCRIPTS_DEFAULT_APP) == CODE

    def test_generated_project_files_are_scrubbed(self, make_integration, unity_project):
        integration = make_integration()
        integration.set_enabled(True)
        csproj = unity_project / "Assembly-CSharp.csproj"
        csproj.write_text(
            "<Project>\n  <PropertyGroup>\n    <A>1</A>\n  </PropertyGroup>\n</Project>\n",
            encoding="utf-8")

        changed = integration.on_generated_project_files()

        assert changed == [csproj]
        assert "<LangVersion>default</LangVersion>" in csproj.read_text(encoding="utf-8")

    def test_generated_project_files_ignored_when_disabled(self, make_integration, unity_project):
        (unity_project / "Assembly-CSharp.csproj").write_text(
            "<Project><PropertyGroup></PropertyGroup></Project>", encoding="utf-8")
        assert make_integration().on_generated_project_files() == []


# =============================================================================
# Launch file
# =============================================================================

class TestUpdateLaunchFile:

    def test_port_not_found(self, make_integration, unity_project, caplog):
        integration = make_integration(port=None)
        integration.set_enabled(True)

        assert integration.update_launch_file() is None
        assert "Unable to determine debug port." in caplog.text
        assert not (unity_project / ".vscode" / "launch.json").exists()

    def test_write_launch_file_off(self, make_integration):
        integration = make_integration(port=56123)
        integration.set_enabled(True)
        integration.prefs.write_launch_file = False

        assert integration.update_launch_file() is None
        assert integration.scanner.calls == 0

    def test_switching_to_unity_debugger(self, make_integration, unity_project):
        integration = make_integration(port=56123)
        integration.set_enabled(True)
        integration.update_launch_file()

        integration.set_use_unity_debugger(True)

        assert integration.prefs.write_launch_file is False
        names = [c["name"] for c in read_launch(unity_project)["configurations"]]
        assert names[0] == "Unity Editor"
        assert "Unity" not in names


# =============================================================================
# Startup and updates
# =============================================================================

class TestStartup:

    def test_disabled_does_nothing(self, make_integration, store):
        assert make_integration().startup() is None
        assert not store.has(SCRIPTS_DEFAULT_APP)

    def test_update_due(self, make_integration):
        integration = make_integration(port=56123)
        integration.set_enabled(True)
        integration.prefs.automatic_updates = True
        info = UpdateInfo(current_version="2.45", remote_version="2.46",
                          update_available=True, source_url="u")

        with patch("unity_vscode.services.integration.run_check_for_update",
                   return_value=info) as check:
            result = integration.startup(now=datetime(2024, 1, 1))

        assert result is info
        check.assert_called_once()

    def test_update_not_due(self, make_integration):
        integration = make_integration()
        integration.set_enabled(True)
        integration.prefs.automatic_updates = True
        integration.prefs.last_update = datetime(2024, 1, 1)

        with patch("unity_vscode.services.integration.run_check_for_update") as check:
            assert integration.startup(now=datetime(2024, 1, 2)) is None
        check.assert_not_called()

    def test_failed_check_is_swallowed(self, make_integration):
        integration = make_integration()
        with patch("unity_vscode.services.integration.run_check_for_update",
                   side_effect=UpdateCheckError("offline")):
            assert integration.check_for_update() is None
