from .launch import LaunchConfiguration, LaunchDocument, UNITY_DEBUGGER_TARGETS
from .update import UpdateInfo

__all__ = ['LaunchConfiguration', 'LaunchDocument', 'UNITY_DEBUGGER_TARGETS', 'UpdateInfo']
