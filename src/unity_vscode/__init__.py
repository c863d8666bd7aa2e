"""Visual Studio Code integration for Unity projects."""

from unity_vscode.core.version import get_package_version

__version__ = get_package_version()

__all__ = ["__version__"]
