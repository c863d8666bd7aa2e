"""Start Visual Studio Code with a project, a file, or an extension package."""
from __future__ import annotations

import logging
import platform
import subprocess
from pathlib import Path
from typing import Callable, Sequence

logger = logging.getLogger(__name__)

DEFAULT_BUNDLE_ID = "com.microsoft.VSCode"


def build_command(args: Sequence[str], system: str | None = None,
                  bundle_id: str = DEFAULT_BUNDLE_ID) -> list[str]:
    """Full argv for invoking Code with ``args`` on ``system``."""
    system = system or platform.system()
    if system == "Darwin":
        return ["open", "-n", "-b", bundle_id, "--args", *args]
    if system == "Windows":
        return ["code.cmd", *args]
    return ["code", *args]


class CodeLauncher:
    """Fire-and-forget launcher; failures are logged and reported as False."""

    def __init__(self, system: str | None = None, bundle_id: str = DEFAULT_BUNDLE_ID,
                 popen: Callable[..., object] | None = None):
        self.system = system or platform.system()
        self.bundle_id = bundle_id
        self._popen = popen or subprocess.Popen

    def call(self, args: Sequence[str]) -> bool:
        command = build_command(args, self.system, self.bundle_id)
        logger.debug(f"Launching: {' '.join(command)}")
        kwargs = {
            "stdout": subprocess.DEVNULL,
            "stderr": subprocess.DEVNULL,
        }
        if self.system == "Windows":
            kwargs["creationflags"] = getattr(subprocess, "CREATE_NO_WINDOW", 0)
        try:
            self._popen(command, **kwargs)
        except OSError as e:
            logger.error(f"Could not start Visual Studio Code ({command[0]}): {e}")
            return False
        return True

    def open_project(self, project_path: str | Path) -> bool:
        return self.call([str(project_path), "-r"])

    def open_file(self, project_path: str | Path, file_path: str | Path, line: int = -1) -> bool:
        """Open ``file_path`` inside the project window, jumping to ``line`` when given."""
        if line is None or line < 0:
            return self.call([str(project_path), str(file_path), "-r"])
        return self.call([str(project_path), "-g", f"{file_path}:{line}", "-r"])

    def install_extension(self, package_path: str | Path) -> bool:
        return self.call(["--install-extension", str(package_path)])
