"""Point the host editor's external script editor at Code, and put it back."""
from __future__ import annotations

import logging

from unity_vscode.services.preferences import PreferenceStore, get_bool, get_str

logger = logging.getLogger(__name__)

# Host editor keys
SCRIPTS_DEFAULT_APP = "kScriptsDefaultApp"
SCRIPT_EDITOR_ARGS = "kScriptEditorArgs"
MONODEVELOP_SOLUTION_PROPERTIES = "kMonoDevelopSolutionProperties"
SUPPORTS_UNITY_PROJ = "kExternalEditorSupportsUnityProj"
ALLOW_ATTACHED_DEBUGGING = "AllowAttachedDebuggingOfEditor"

# Snapshot keys
PREVIOUS_APP = "VSCode_PreviousApp"
PREVIOUS_ARGS = "VSCode_PreviousArgs"
PREVIOUS_MONODEVELOP = "VSCode_PreviousMD"
PREVIOUS_UNITY_PROJ = "VSCode_PreviousUnityProj"
PREVIOUS_ATTACH = "VSCode_PreviousAttach"

SNAPSHOT_KEYS = (
    PREVIOUS_APP,
    PREVIOUS_ARGS,
    PREVIOUS_MONODEVELOP,
    PREVIOUS_UNITY_PROJ,
    PREVIOUS_ATTACH,
)


def apply_editor_overrides(store: PreferenceStore, code_path: str, editor_args: str) -> None:
    """Make Code the external script editor.

    A prior value is snapshotted only when it differs from the value about to
    be written, so re-applying while already enabled leaves the snapshot of
    the user's original setting intact.
    """
    current_app = get_str(store, SCRIPTS_DEFAULT_APP)
    if current_app != code_path:
        store.set(PREVIOUS_APP, current_app)
        logger.debug(f"Saved previous script editor {current_app!r}")
    store.set(SCRIPTS_DEFAULT_APP, code_path)

    current_args = get_str(store, SCRIPT_EDITOR_ARGS)
    if current_args != editor_args:
        store.set(PREVIOUS_ARGS, current_args)
    store.set(SCRIPT_EDITOR_ARGS, editor_args)
    store.set(SCRIPT_EDITOR_ARGS + code_path, editor_args)

    if get_bool(store, MONODEVELOP_SOLUTION_PROPERTIES, False):
        store.set(PREVIOUS_MONODEVELOP, True)
    store.set(MONODEVELOP_SOLUTION_PROPERTIES, False)

    if get_bool(store, SUPPORTS_UNITY_PROJ, False):
        store.set(PREVIOUS_UNITY_PROJ, True)
    store.set(SUPPORTS_UNITY_PROJ, False)

    if not get_bool(store, ALLOW_ATTACHED_DEBUGGING, False):
        store.set(PREVIOUS_ATTACH, False)
    store.set(ALLOW_ATTACHED_DEBUGGING, True)


def restore_editor_overrides(store: PreferenceStore) -> None:
    """Undo apply_editor_overrides and drop the snapshot."""
    previous_app = get_str(store, PREVIOUS_APP)
    if previous_app:
        store.set(SCRIPTS_DEFAULT_APP, previous_app)
        logger.debug(f"Restored script editor {previous_app!r}")

    previous_args = get_str(store, PREVIOUS_ARGS)
    if previous_args:
        store.set(SCRIPT_EDITOR_ARGS, previous_args)

    if get_bool(store, PREVIOUS_MONODEVELOP, False):
        store.set(MONODEVELOP_SOLUTION_PROPERTIES, True)

    if get_bool(store, PREVIOUS_UNITY_PROJ, False):
        store.set(SUPPORTS_UNITY_PROJ, True)

    if not get_bool(store, PREVIOUS_ATTACH, True):
        store.set(ALLOW_ATTACHED_DEBUGGING, False)

    for key in SNAPSHOT_KEYS:
        store.delete(key)


def update_editor_preferences(store: PreferenceStore, enabled: bool, code_path: str, editor_args: str) -> None:
    if enabled:
        apply_editor_overrides(store, code_path, editor_args)
    else:
        restore_editor_overrides(store)
