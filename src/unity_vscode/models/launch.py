"""Typed shape of a VS Code launch.json document."""
from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

LAUNCH_SCHEMA_VERSION = "0.2.0"

# Targets the Unity debugger extension understands
UNITY_DEBUGGER_TARGETS = (
    "Unity Editor",
    "Windows Player",
    "OSX Player",
    "Linux Player",
    "iOS Player",
    "Android Player",
)


class LaunchConfiguration(BaseModel):
    """One named debugger configuration; keys we do not model are kept."""
    model_config = ConfigDict(extra="allow")

    name: str
    # Compound and hand-written entries may omit these
    type: str | None = None
    request: str | None = None
    address: str | None = None
    port: int | None = None

    @classmethod
    def attach(cls, port: int, name: str = "Unity", address: str = "localhost") -> "LaunchConfiguration":
        return cls(name=name, type="mono", request="attach", address=address, port=port)

    @classmethod
    def unity_launch(cls, name: str) -> "LaunchConfiguration":
        return cls(name=name, type="unity", request="launch")


class LaunchDocument(BaseModel):
    model_config = ConfigDict(extra="allow")

    version: str = LAUNCH_SCHEMA_VERSION
    configurations: list[LaunchConfiguration] = Field(default_factory=list)

    def find(self, name: str) -> LaunchConfiguration | None:
        for entry in self.configurations:
            if entry.name == name:
                return entry
        return None

    def upsert(self, configuration: LaunchConfiguration) -> bool:
        """Replace the same-named entry in place or append. Returns True when replaced."""
        for index, entry in enumerate(self.configurations):
            if entry.name == configuration.name:
                self.configurations[index] = configuration
                return True
        self.configurations.append(configuration)
        return False

    def to_json_dict(self) -> dict[str, Any]:
        return self.model_dump(exclude_none=True)
