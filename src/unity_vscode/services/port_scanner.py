"""
Find the TCP port a running Unity editor listens on for debugger attach.

Windows lists sockets with ``netstat`` and resolves owning PIDs with
``tasklist``; macOS and Linux ask ``lsof`` for the named process directly.
The process table can change between the scan and its use, so callers treat
the result as a hint. No retry is attempted.
"""
from __future__ import annotations

import csv
import io
import logging
import platform
import re
import subprocess
from typing import Callable, Sequence

logger = logging.getLogger(__name__)

NETSTAT_COMMAND = ["netstat", "-a", "-n", "-o", "-p", "TCP"]
# Windows reserves ports below this for system services
MIN_WINDOWS_PORT = 1024

_LSOF_PORT = re.compile(r"TCP \*:(\d+)")

CommandRunner = Callable[[Sequence[str], float], "str | None"]


def run_listing_command(args: Sequence[str], timeout: float) -> str | None:
    """Run a process-listing tool and return its stdout, or None on any failure."""
    try:
        result = subprocess.run(
            list(args),
            capture_output=True,
            text=True,
            timeout=timeout,
        )
    except FileNotFoundError:
        logger.debug(f"{args[0]} is not available on this system")
        return None
    except subprocess.TimeoutExpired:
        logger.warning(f"{args[0]} did not finish within {timeout}s")
        return None
    except (OSError, subprocess.SubprocessError) as e:
        logger.warning(f"Failed to run {args[0]}: {e}")
        return None

    if result.returncode != 0:
        # lsof exits 1 when nothing matched; treat any failure as not found
        logger.debug(f"{args[0]} exited with {result.returncode}: {result.stderr.strip()}")
        return None
    return result.stdout


def lsof_command(process_name: str) -> list[str]:
    return ["lsof", "-c", f"/^{process_name}$/", "-i", "4tcp", "-a"]


def parse_lsof_output(output: str, process_name: str) -> int | None:
    """First ``TCP *:<port>`` entry on a row owned by ``process_name``."""
    for line in output.splitlines():
        tokens = line.split()
        if not tokens or tokens[0] != process_name:
            continue
        match = _LSOF_PORT.search(line)
        if match:
            port = int(match.group(1))
            if port > 0:
                return port
    return None


def parse_netstat_listeners(output: str) -> list[tuple[int, int]]:
    """(port, pid) for each listening TCP row of ``netstat -a -n -o``."""
    listeners: list[tuple[int, int]] = []
    for line in output.splitlines():
        tokens = line.split()
        if len(tokens) < 5 or tokens[0].upper() != "TCP":
            continue
        if tokens[3].upper() != "LISTENING":
            continue
        local_address = tokens[1]
        try:
            port = int(local_address.rsplit(":", 1)[1])
            pid = int(tokens[4])
        except (IndexError, ValueError):
            continue
        listeners.append((port, pid))
    return listeners


def tasklist_command(pid: int) -> list[str]:
    return ["tasklist", "/FI", f"PID eq {pid}", "/FO", "CSV", "/NH"]


def parse_tasklist_name(output: str) -> str | None:
    """Image name from ``tasklist /FO CSV /NH`` output, without ``.exe``."""
    for row in csv.reader(io.StringIO(output)):
        if len(row) < 2:
            continue
        name = row[0].strip()
        if name.lower().endswith(".exe"):
            name = name[:-4]
        return name
    return None


class PortScanner:
    """Locate a process's listening port with the platform's tools."""

    def __init__(self, process_name: str = "Unity", timeout: float = 10.0,
                 system: str | None = None, runner: CommandRunner | None = None):
        self.process_name = process_name
        self.timeout = timeout
        self.system = system or platform.system()
        self._run = runner or run_listing_command

    def find_debug_port(self) -> int | None:
        if self.system == "Windows":
            port = self._find_windows()
        else:
            port = self._find_lsof()
        if port is None:
            logger.debug(f"No listening port found for {self.process_name}")
        else:
            logger.debug(f"{self.process_name} is listening on {port}")
        return port

    def _find_lsof(self) -> int | None:
        output = self._run(lsof_command(self.process_name), self.timeout)
        if not output:
            return None
        return parse_lsof_output(output, self.process_name)

    def _find_windows(self) -> int | None:
        output = self._run(NETSTAT_COMMAND, self.timeout)
        if not output:
            return None

        names: dict[int, str | None] = {}
        for port, pid in parse_netstat_listeners(output):
            if port < MIN_WINDOWS_PORT:
                continue
            if pid not in names:
                names[pid] = self._process_name(pid)
            if names[pid] == self.process_name:
                return port
        return None

    def _process_name(self, pid: int) -> str | None:
        output = self._run(tasklist_command(pid), self.timeout)
        if not output:
            return None
        return parse_tasklist_name(output)
