"""
Host-facing facade of the integration.

The host editor owns the lifecycle: it opens assets, reloads scripts, enters
play mode, regenerates project files and unloads the domain. Each of those
events maps to one method here. Nothing in this class raises into the host;
failures are logged and the hook reports that it did nothing.
"""
from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path
from typing import Protocol, runtime_checkable

from unity_vscode import __version__
from unity_vscode.core.config import IntegrationConfig, get_config
from unity_vscode.core.errors import IntegrationError
from unity_vscode.core.logging_setup import set_debug_output
from unity_vscode.models.update import UpdateInfo
from unity_vscode.services import project_files
from unity_vscode.services.code_launcher import CodeLauncher
from unity_vscode.services.editor_preferences import update_editor_preferences
from unity_vscode.services.launch_config import LaunchConfigWriter
from unity_vscode.services.port_scanner import PortScanner
from unity_vscode.services.preferences import IntegrationPreferences, PreferenceStore
from unity_vscode.services.updater import is_update_due, run_check_for_update
from unity_vscode.services.workspace_settings import write_workspace_settings

logger = logging.getLogger(__name__)

SCRIPT_EXTENSIONS = (".cs",)


@runtime_checkable
class ProjectFileGenerator(Protocol):
    """Supplied by the host: regenerates the solution and project files."""

    def sync(self) -> None: ...


class NullProjectFileGenerator:
    """Used when no host is attached; regeneration is left to the editor."""

    def sync(self) -> None:
        logger.debug("No project file generator attached, skipping sync")


class VSCodeIntegration:
    def __init__(
        self,
        store: PreferenceStore,
        project_path: str | Path,
        generator: ProjectFileGenerator | None = None,
        launcher: CodeLauncher | None = None,
        scanner: PortScanner | None = None,
        config: IntegrationConfig | None = None,
    ):
        self.config = config or get_config()
        self.store = store
        self.prefs = IntegrationPreferences(store)
        self.project_path = Path(project_path)
        self.generator = generator or NullProjectFileGenerator()
        self.launcher = launcher or CodeLauncher(bundle_id=self.config.code_bundle_id)
        self.scanner = scanner or PortScanner(
            self.config.debug_process_name, self.config.process_timeout)
        self.launch_writer = LaunchConfigWriter.for_project(self.project_path)
        if self.prefs.debug:
            set_debug_output(True)

    # Preferences

    @property
    def enabled(self) -> bool:
        return self.prefs.enabled

    def set_enabled(self, value: bool) -> None:
        """Toggle the integration, running the one-time transition work."""
        was_enabled = self.prefs.enabled
        if not was_enabled and value:
            # Stale project files from another editor confuse Code
            self.clear_project_files()
        self.prefs.enabled = value
        if was_enabled != value:
            self.update_editor_preferences(value)
            logger.info(f"Integration {'enabled' if value else 'disabled'}")

    def set_use_unity_debugger(self, value: bool) -> None:
        if value == self.prefs.use_unity_debugger:
            return
        self.prefs.use_unity_debugger = value
        if value:
            # The debugger extension brings its own launch configuration
            self.prefs.write_launch_file = False
        self.update_launch_file()

    def set_debug(self, value: bool) -> None:
        self.prefs.debug = value
        set_debug_output(value)

    def update_editor_preferences(self, enabled: bool) -> None:
        update_editor_preferences(
            self.store, enabled, self.config.code_path, self.config.script_editor_args)

    # Host hooks

    def startup(self, now: datetime | None = None) -> UpdateInfo | None:
        """Called when the host loads the integration."""
        if not self.prefs.enabled:
            return None
        self.update_editor_preferences(True)
        self.update_launch_file()
        if is_update_due(self.prefs, now):
            return self.check_for_update(now)
        return None

    def on_domain_unload(self) -> None:
        if self.prefs.enabled and self.prefs.revert_on_exit:
            self.update_editor_preferences(False)

    def on_generated_project_files(self) -> list[Path]:
        return self.update_solution()

    def on_asset_opened(self, asset_path: str | Path, line: int = -1) -> bool:
        """Open a script in Code. False lets the host open the asset itself."""
        if not self.prefs.enabled:
            return False
        asset_path = Path(asset_path)
        if asset_path.suffix.lower() not in SCRIPT_EXTENSIONS:
            return False
        full_path = asset_path if asset_path.is_absolute() else self.project_path / asset_path
        return self.launcher.open_file(self.project_path, full_path, line)

    def on_play_mode_changed(self, is_playing: bool, will_change: bool) -> None:
        if is_playing and will_change:
            self.update_launch_file()

    # Operations

    def update_solution(self) -> list[Path]:
        if not self.prefs.enabled:
            return []
        logger.debug("Updating solution & project files")
        options = project_files.default_project_options(
            self.config.lang_version, self.config.target_path)
        try:
            return project_files.update_solution(self.project_path, options)
        except IntegrationError as e:
            logger.error(f"Updating project files failed: {e}")
            return []

    def clear_project_files(self) -> list[Path]:
        try:
            removed = project_files.clear_project_files(self.project_path)
        except IntegrationError as e:
            logger.error(f"Clearing project files failed: {e}")
            return []
        self.generator.sync()
        return removed

    def open_project(self) -> bool:
        self.generator.sync()
        return self.launcher.open_project(self.project_path)

    def update_launch_file(self) -> Path | None:
        """Rewrite launch.json for the configured debugger. Returns the path written."""
        if not self.prefs.enabled:
            return None

        if self.prefs.use_unity_debugger:
            self.launch_writer.write_unity_debugger()
            return self.launch_writer.path

        if not self.prefs.write_launch_file:
            return None

        port = self.scanner.find_debug_port()
        if port is None:
            logger.warning("Unable to determine debug port.")
            return None
        self.launch_writer.write_attach(port)
        logger.debug(f"Debug port found ({port})")
        return self.launch_writer.path

    def write_workspace_settings(self) -> Path:
        return write_workspace_settings(self.project_path)

    def check_for_update(self, now: datetime | None = None) -> UpdateInfo | None:
        try:
            return run_check_for_update(
                self.prefs, __version__, self.config.update_url,
                self.config.http_timeout, now)
        except IntegrationError as e:
            if self.prefs.debug:
                logger.info(f"Update check failed: {e}")
            return None
