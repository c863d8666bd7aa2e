"""
Configuration settings for the Unity VS Code integration.
This file contains all configurable parameters of the integration.
"""

import os
import platform
from dataclasses import dataclass, field


def default_code_path(system: str | None = None) -> str:
    """Location of the Code binary the host editor should launch."""
    system = system or platform.system()
    if system == "Darwin":
        return "/Applications/Visual Studio Code.app"
    if system == "Windows":
        local_app_data = os.environ.get(
            "LOCALAPPDATA", os.path.expanduser("~\\AppData\\Local"))
        return os.path.join(local_app_data, "Code", "bin", "code.cmd")
    return "/usr/local/bin/code"


def _env_float(name: str, default: float) -> float:
    value = os.environ.get(name)
    if value is None:
        return default
    try:
        return float(value)
    except ValueError:
        return default


@dataclass
class IntegrationConfig:
    """Main configuration class for the integration."""

    # Code editor
    code_path: str = field(default_factory=default_code_path)
    code_bundle_id: str = "com.microsoft.VSCode"
    script_editor_args: str = '-r -g "$(File):$(Line)"'

    # Debug port discovery
    debug_process_name: str = "Unity"
    process_timeout: float = 10.0

    # Project file scrubbing
    lang_version: str = "default"
    # Empty disables <TargetPath> insertion
    target_path: str = ""

    # Preference store
    prefs_path: str = os.path.join(
        os.path.expanduser("~"), ".unity-vscode", "prefs.json")

    # Updates
    update_url: str = "https://raw.githubusercontent.com/dotBunny/VSCode/master/Plugins/Editor/VSCode.cs"
    unity_debugger_url: str = "https://raw.githubusercontent.com/dotBunny/VSCode-Test/master/Downloads/unity-debug-101.vsix"
    http_timeout: float = 15.0

    # Logging settings
    log_level: str = "INFO"
    log_format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    log_file: str | None = None

    @classmethod
    def from_env(cls) -> "IntegrationConfig":
        """Build a configuration, letting UNITY_VSCODE_* variables override defaults."""
        cfg = cls()
        cfg.code_path = os.environ.get("UNITY_VSCODE_CODE_PATH", cfg.code_path)
        cfg.debug_process_name = os.environ.get(
            "UNITY_VSCODE_PROCESS_NAME", cfg.debug_process_name)
        cfg.process_timeout = _env_float(
            "UNITY_VSCODE_PROCESS_TIMEOUT", cfg.process_timeout)
        cfg.prefs_path = os.environ.get("UNITY_VSCODE_PREFS", cfg.prefs_path)
        cfg.update_url = os.environ.get("UNITY_VSCODE_UPDATE_URL", cfg.update_url)
        cfg.http_timeout = _env_float(
            "UNITY_VSCODE_HTTP_TIMEOUT", cfg.http_timeout)
        cfg.log_level = os.environ.get(
            "UNITY_VSCODE_LOG_LEVEL", cfg.log_level).upper()
        cfg.log_file = os.environ.get("UNITY_VSCODE_LOG_FILE", cfg.log_file)
        return cfg


# Create a global config instance
config = IntegrationConfig()


def get_config() -> IntegrationConfig:
    return config


def set_config(new_config: IntegrationConfig) -> None:
    global config
    config = new_config
