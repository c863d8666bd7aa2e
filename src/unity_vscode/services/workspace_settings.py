"""Default ``.vscode/settings.json`` hiding files Code has no use for."""
from __future__ import annotations

import json
import logging
from pathlib import Path

from unity_vscode.services.launch_config import settings_folder

logger = logging.getLogger(__name__)

SETTINGS_FILE = "settings.json"

HIDDEN_FILES = [
    "**/.DS_Store", "**/.git", "**/.gitignore", "**/.gitattributes",
    "**/.gitmodules", "**/.svn",
]
PROJECT_FILES = [
    "**/*.booproj", "**/*.pidb", "**/*.suo", "**/*.user", "**/*.userprefs",
    "**/*.unityproj", "**/*.dll", "**/*.exe",
]
MEDIA_FILES = ["**/*.pdf"]
AUDIO_FILES = ["**/*.mid", "**/*.midi", "**/*.wav"]
TEXTURE_FILES = [
    "**/*.gif", "**/*.ico", "**/*.jpg", "**/*.jpeg", "**/*.png", "**/*.psd",
    "**/*.tga", "**/*.tif", "**/*.tiff",
]
MODEL_FILES = [
    "**/*.3ds", "**/*.3DS", "**/*.fbx", "**/*.FBX", "**/*.lxo", "**/*.LXO",
    "**/*.ma", "**/*.MA", "**/*.obj", "**/*.OBJ",
]
UNITY_FILES = [
    "**/*.asset", "**/*.cubemap", "**/*.flare", "**/*.mat", "**/*.meta",
    "**/*.prefab", "**/*.unity",
]
FOLDERS = [
    "build/", "Build/", "Library/", "library/", "obj/", "Obj/",
    "ProjectSettings/", "temp/", "Temp/",
]

EXCLUDED_PATTERNS = (
    HIDDEN_FILES + PROJECT_FILES + MEDIA_FILES + AUDIO_FILES
    + TEXTURE_FILES + MODEL_FILES + UNITY_FILES + FOLDERS
)


def default_workspace_settings() -> dict:
    return {"files.exclude": {pattern: True for pattern in EXCLUDED_PATTERNS}}


def write_workspace_settings(project_path: str | Path) -> Path:
    """Overwrite the workspace settings with the default exclusion list."""
    folder = settings_folder(project_path)
    folder.mkdir(parents=True, exist_ok=True)
    path = folder / SETTINGS_FILE
    with path.open("w", encoding="utf-8") as f:
        json.dump(default_workspace_settings(), f, indent=4)
        f.write("\n")
    logger.debug(f"Workspace settings written to {path}")
    return path
