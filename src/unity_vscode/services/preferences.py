"""
Key-value preference stores.

The host editor keeps its settings in a process-wide persistent store. The
integration only ever talks to it through the small PreferenceStore interface
below, so the enable/disable transitions can run against an in-memory store
in tests and against a JSON file from the command line.
"""
from __future__ import annotations

import json
import logging
import os
from datetime import datetime
from pathlib import Path
from typing import Any, Protocol, runtime_checkable

logger = logging.getLogger(__name__)

# Integration preference keys
ENABLED_KEY = "VSCode_Enabled"
DEBUG_KEY = "VSCode_Debug"
WRITE_LAUNCH_FILE_KEY = "VSCode_WriteLaunchFile"
USE_UNITY_DEBUGGER_KEY = "VSCode_UseUnityDebugger"
REVERT_ON_EXIT_KEY = "VSCode_RevertScriptEditorOnExit"
AUTOMATIC_UPDATES_KEY = "VSCode_AutomaticUpdates"
UPDATE_TIME_KEY = "VSCode_UpdateTime"
LAST_UPDATE_KEY = "VSCode_LastUpdate"
REMOTE_VERSION_KEY = "VSCode_GitHubVersion"

# Date the update check feature shipped; used when no check ever ran
DEFAULT_LAST_UPDATE = datetime(2015, 10, 8)
MIN_UPDATE_DAYS = 1
MAX_UPDATE_DAYS = 31


@runtime_checkable
class PreferenceStore(Protocol):
    def has(self, key: str) -> bool: ...
    def get(self, key: str, default: Any = None) -> Any: ...
    def set(self, key: str, value: Any) -> None: ...
    def delete(self, key: str) -> None: ...


class MemoryPreferenceStore:
    """Dictionary-backed store."""

    def __init__(self, values: dict[str, Any] | None = None):
        self._values: dict[str, Any] = dict(values or {})

    def has(self, key: str) -> bool:
        return key in self._values

    def get(self, key: str, default: Any = None) -> Any:
        return self._values.get(key, default)

    def set(self, key: str, value: Any) -> None:
        self._values[key] = value

    def delete(self, key: str) -> None:
        self._values.pop(key, None)

    def as_dict(self) -> dict[str, Any]:
        return dict(self._values)


class JsonFilePreferenceStore(MemoryPreferenceStore):
    """Store persisted to a JSON object on every write."""

    def __init__(self, path: str | os.PathLike[str]):
        self.path = Path(path)
        super().__init__(self._load())

    def _load(self) -> dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            with self.path.open("r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Ignoring unreadable preference file {self.path}: {e}")
            return {}
        if not isinstance(data, dict):
            logger.warning(f"Ignoring preference file {self.path}: expected an object")
            return {}
        return data

    def _save(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with self.path.open("w", encoding="utf-8") as f:
            json.dump(self._values, f, indent=2, sort_keys=True)
            f.write("\n")

    def set(self, key: str, value: Any) -> None:
        super().set(key, value)
        self._save()

    def delete(self, key: str) -> None:
        if key in self._values:
            super().delete(key)
            self._save()


def get_bool(store: PreferenceStore, key: str, default: bool = False) -> bool:
    value = store.get(key, default)
    if isinstance(value, str):
        return value.strip().lower() in ("1", "true", "yes", "on")
    return bool(value)


def get_int(store: PreferenceStore, key: str, default: int = 0) -> int:
    try:
        return int(store.get(key, default))
    except (TypeError, ValueError):
        return default


def get_str(store: PreferenceStore, key: str, default: str = "") -> str:
    value = store.get(key, default)
    return default if value is None else str(value)


class IntegrationPreferences:
    """Typed view over the integration's own preference keys."""

    def __init__(self, store: PreferenceStore):
        self.store = store

    @property
    def enabled(self) -> bool:
        return get_bool(self.store, ENABLED_KEY, False)

    @enabled.setter
    def enabled(self, value: bool) -> None:
        self.store.set(ENABLED_KEY, bool(value))

    @property
    def debug(self) -> bool:
        """Should informational messages be logged?"""
        return get_bool(self.store, DEBUG_KEY, False)

    @debug.setter
    def debug(self, value: bool) -> None:
        self.store.set(DEBUG_KEY, bool(value))

    @property
    def write_launch_file(self) -> bool:
        return get_bool(self.store, WRITE_LAUNCH_FILE_KEY, True)

    @write_launch_file.setter
    def write_launch_file(self, value: bool) -> None:
        self.store.set(WRITE_LAUNCH_FILE_KEY, bool(value))

    @property
    def use_unity_debugger(self) -> bool:
        return get_bool(self.store, USE_UNITY_DEBUGGER_KEY, False)

    @use_unity_debugger.setter
    def use_unity_debugger(self, value: bool) -> None:
        self.store.set(USE_UNITY_DEBUGGER_KEY, bool(value))

    @property
    def revert_on_exit(self) -> bool:
        return get_bool(self.store, REVERT_ON_EXIT_KEY, True)

    @revert_on_exit.setter
    def revert_on_exit(self, value: bool) -> None:
        self.store.set(REVERT_ON_EXIT_KEY, bool(value))

    @property
    def automatic_updates(self) -> bool:
        return get_bool(self.store, AUTOMATIC_UPDATES_KEY, False)

    @automatic_updates.setter
    def automatic_updates(self, value: bool) -> None:
        self.store.set(AUTOMATIC_UPDATES_KEY, bool(value))

    @property
    def update_days(self) -> int:
        days = get_int(self.store, UPDATE_TIME_KEY, 7)
        return min(max(days, MIN_UPDATE_DAYS), MAX_UPDATE_DAYS)

    @update_days.setter
    def update_days(self, value: int) -> None:
        self.store.set(UPDATE_TIME_KEY, min(
            max(int(value), MIN_UPDATE_DAYS), MAX_UPDATE_DAYS))

    @property
    def last_update(self) -> datetime:
        raw = self.store.get(LAST_UPDATE_KEY)
        if raw:
            try:
                return datetime.fromisoformat(str(raw))
            except ValueError:
                logger.debug(f"Unparseable {LAST_UPDATE_KEY}={raw!r}")
        return DEFAULT_LAST_UPDATE

    @last_update.setter
    def last_update(self, value: datetime) -> None:
        self.store.set(LAST_UPDATE_KEY, value.isoformat(timespec="seconds"))

    @property
    def remote_version(self) -> str | None:
        value = self.store.get(REMOTE_VERSION_KEY)
        return None if value is None else str(value)

    @remote_version.setter
    def remote_version(self, value: str) -> None:
        self.store.set(REMOTE_VERSION_KEY, value)

    def snapshot(self) -> dict[str, Any]:
        return {
            "enabled": self.enabled,
            "debug": self.debug,
            "write_launch_file": self.write_launch_file,
            "use_unity_debugger": self.use_unity_debugger,
            "revert_on_exit": self.revert_on_exit,
            "automatic_updates": self.automatic_updates,
            "update_days": self.update_days,
            "last_update": self.last_update.isoformat(timespec="seconds"),
            "remote_version": self.remote_version,
        }
