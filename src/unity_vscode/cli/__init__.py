"""Unity VS Code integration command line interface."""

from unity_vscode import __version__

__all__ = ["__version__"]
