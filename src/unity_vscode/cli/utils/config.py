"""Command line configuration."""

import os
from dataclasses import dataclass, field
from typing import Optional

from unity_vscode.core.config import IntegrationConfig


@dataclass
class CLIConfig:
    project: str = "."
    prefs_path: Optional[str] = None
    format: str = "text"
    verbose: bool = False
    integration: IntegrationConfig = field(default_factory=IntegrationConfig.from_env)

    @classmethod
    def from_env(cls) -> "CLIConfig":
        return cls(
            project=os.environ.get("UNITY_VSCODE_PROJECT", "."),
            prefs_path=os.environ.get("UNITY_VSCODE_PREFS"),
            format=os.environ.get("UNITY_VSCODE_FORMAT", "text"),
        )

    def resolved_prefs_path(self) -> str:
        return self.prefs_path or self.integration.prefs_path


_config: Optional[CLIConfig] = None


def get_config() -> CLIConfig:
    global _config
    if _config is None:
        _config = CLIConfig.from_env()
    return _config


def set_config(config: CLIConfig) -> None:
    global _config
    _config = config
