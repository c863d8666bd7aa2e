"""Tests for launch.json writing."""

import json

from unity_vscode.models.launch import LaunchConfiguration, LaunchDocument, UNITY_DEBUGGER_TARGETS
from unity_vscode.services.launch_config import LaunchConfigWriter
from unity_vscode.services.workspace_settings import write_workspace_settings


class TestLaunchConfigWriter:

    def test_round_trip_port(self, unity_project):
        writer = LaunchConfigWriter.for_project(unity_project)
        writer.write_attach(56123)

        document = writer.read()
        entry = document.find("Unity")
        assert entry is not None
        assert entry.port == 56123
        assert entry.type == "mono"
        assert entry.request == "attach"
        assert entry.address == "localhost"

    def test_creates_settings_folder(self, unity_project):
        writer = LaunchConfigWriter.for_project(unity_project)
        writer.write_attach(56000)
        path = writer.path
        assert path == unity_project / ".vscode" / "launch.json"

        data = json.loads(path.read_text(encoding="utf-8"))
        assert data == {
            "version": "0.2.0",
            "configurations": [{
                "name": "Unity",
                "type": "mono",
                "request": "attach",
                "address": "localhost",
                "port": 56000,
            }],
        }

    def test_same_name_replaced_in_place(self, unity_project):
        writer = LaunchConfigWriter.for_project(unity_project)
        writer.upsert(LaunchConfiguration(name="First", type="node", request="launch"))
        writer.write_attach(1111)
        writer.upsert(LaunchConfiguration(name="Last", type="node", request="launch"))

        writer.write_attach(2222)

        document = writer.read()
        assert [c.name for c in document.configurations] == ["First", "Unity", "Last"]
        assert document.find("Unity").port == 2222

    def test_unknown_keys_survive(self, unity_project):
        folder = unity_project / ".vscode"
        folder.mkdir()
        (folder / "launch.json").write_text(json.dumps({
            "version": "0.2.0",
            "configurations": [{
                "name": "Custom",
                "type": "coreclr",
                "request": "attach",
                "processId": "${command:pickProcess}",
            }],
        }), encoding="utf-8")

        writer = LaunchConfigWriter(folder)
        writer.write_attach(56000)

        data = json.loads((folder / "launch.json").read_text(encoding="utf-8"))
        assert data["configurations"][0]["processId"] == "${command:pickProcess}"
        assert data["configurations"][1]["port"] == 56000

    def test_entries_without_type_or_request_survive(self, unity_project):
        folder = unity_project / ".vscode"
        folder.mkdir()
        (folder / "launch.json").write_text(json.dumps({
            "version": "0.2.0",
            "configurations": [
                {"name": "Mine", "type": "coreclr", "request": "launch"},
                {"name": "Partial", "type": "node"},
            ],
        }), encoding="utf-8")

        writer = LaunchConfigWriter(folder)
        writer.write_attach(56000)

        data = json.loads((folder / "launch.json").read_text(encoding="utf-8"))
        assert [c["name"] for c in data["configurations"]] == ["Mine", "Partial", "Unity"]
        assert data["configurations"][1] == {"name": "Partial", "type": "node"}

    def test_malformed_file_is_replaced(self, unity_project):
        folder = unity_project / ".vscode"
        folder.mkdir()
        (folder / "launch.json").write_text("{ not json", encoding="utf-8")

        writer = LaunchConfigWriter(folder)
        assert writer.read().configurations == []
        writer.write_attach(56001)
        assert writer.read().find("Unity").port == 56001

    def test_unity_debugger_targets(self, unity_project):
        writer = LaunchConfigWriter.for_project(unity_project)
        writer.write_attach(56000)

        document = writer.write_unity_debugger()

        assert [c.name for c in document.configurations] == list(UNITY_DEBUGGER_TARGETS)
        stored = json.loads(writer.path.read_text(encoding="utf-8"))
        assert stored["configurations"][0] == {
            "name": "Unity Editor", "type": "unity", "request": "launch"}
        assert all("port" not in c for c in stored["configurations"])


class TestLaunchDocument:

    def test_upsert_reports_replacement(self):
        document = LaunchDocument()
        assert document.upsert(LaunchConfiguration.attach(1)) is False
        assert document.upsert(LaunchConfiguration.attach(2)) is True
        assert len(document.configurations) == 1


class TestWorkspaceSettings:

    def test_writes_exclusions(self, unity_project):
        path = write_workspace_settings(unity_project)

        data = json.loads(path.read_text(encoding="utf-8"))
        excluded = data["files.exclude"]
        assert excluded["**/*.meta"] is True
        assert excluded["Library/"] is True
        assert excluded["Temp/"] is True
        assert "**/*.cs" not in excluded
