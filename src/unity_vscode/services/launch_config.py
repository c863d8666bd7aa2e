"""Read and write ``.vscode/launch.json``."""
from __future__ import annotations

import json
import logging
from pathlib import Path

from pydantic import ValidationError

from unity_vscode.models.launch import (
    LaunchConfiguration,
    LaunchDocument,
    UNITY_DEBUGGER_TARGETS,
)

logger = logging.getLogger(__name__)

SETTINGS_FOLDER = ".vscode"
LAUNCH_FILE = "launch.json"


def settings_folder(project_path: str | Path) -> Path:
    return Path(project_path) / SETTINGS_FOLDER


class LaunchConfigWriter:
    """Keeps named debugger configurations in a launch.json document.

    Every write replaces the whole file. An existing file that cannot be
    parsed is replaced with a fresh document rather than aborting the write.
    """

    def __init__(self, folder: str | Path):
        self.folder = Path(folder)

    @classmethod
    def for_project(cls, project_path: str | Path) -> "LaunchConfigWriter":
        return cls(settings_folder(project_path))

    @property
    def path(self) -> Path:
        return self.folder / LAUNCH_FILE

    def read(self) -> LaunchDocument:
        if not self.path.exists():
            return LaunchDocument()
        try:
            with self.path.open("r", encoding="utf-8") as f:
                data = json.load(f)
            return LaunchDocument.model_validate(data)
        except (OSError, json.JSONDecodeError, ValidationError) as e:
            logger.warning(f"Replacing unreadable launch file {self.path}: {e}")
            return LaunchDocument()

    def write(self, document: LaunchDocument) -> Path:
        self.folder.mkdir(parents=True, exist_ok=True)
        with self.path.open("w", encoding="utf-8") as f:
            json.dump(document.to_json_dict(), f, indent=4)
            f.write("\n")
        return self.path

    def upsert(self, configuration: LaunchConfiguration) -> LaunchDocument:
        """Replace the configuration with the same name, or append it."""
        document = self.read()
        replaced = document.upsert(configuration)
        self.write(document)
        logger.debug(
            f"{'Updated' if replaced else 'Added'} launch configuration '{configuration.name}'")
        return document

    def write_attach(self, port: int, name: str = "Unity", address: str = "localhost") -> LaunchDocument:
        return self.upsert(LaunchConfiguration.attach(port, name=name, address=address))

    def write_unity_debugger(self) -> LaunchDocument:
        """Write the launch targets of the Unity debugger extension, replacing the file."""
        document = LaunchDocument(configurations=[
            LaunchConfiguration.unity_launch(name) for name in UNITY_DEBUGGER_TARGETS
        ])
        self.write(document)
        return document
