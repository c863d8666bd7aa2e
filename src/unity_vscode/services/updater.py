"""
Update check and Unity debugger extension download.

The published plugin source carries its version number in its header comment
(seventh line, e.g. `` *   2.45``). We read that number and report whether it
is newer than the running version. Remote content is never written over
installed code; ``download_verified`` only keeps a payload whose SHA-256
digest matches the one the caller expects.
"""
from __future__ import annotations

import asyncio
import hashlib
import logging
import re
import tempfile
import uuid
from datetime import datetime, timedelta
from pathlib import Path

import httpx

from unity_vscode.core.errors import UpdateCheckError
from unity_vscode.core.version import parse_version
from unity_vscode.models.update import UpdateInfo
from unity_vscode.services.code_launcher import CodeLauncher
from unity_vscode.services.preferences import IntegrationPreferences

logger = logging.getLogger(__name__)

HEADER_START = "/*"
VERSION_LINE_INDEX = 6
_VERSION_PATTERN = re.compile(r"^\d+(\.\d+)*$")


async def _get(url: str, timeout: float) -> httpx.Response:
    try:
        async with httpx.AsyncClient(follow_redirects=True) as client:
            response = await client.get(url, timeout=timeout)
            response.raise_for_status()
            return response
    except httpx.TimeoutException:
        raise UpdateCheckError(f"Request to {url} timed out after {timeout}s")
    except httpx.HTTPStatusError as e:
        raise UpdateCheckError(
            f"HTTP error from {url}: {e.response.status_code}")
    except httpx.HTTPError as e:
        raise UpdateCheckError(f"Cannot reach {url}: {e}")


async def fetch_text(url: str, timeout: float = 15.0) -> str:
    response = await _get(url, timeout)
    return response.text


async def fetch_bytes(url: str, timeout: float = 15.0) -> bytes:
    response = await _get(url, timeout)
    return response.content


def parse_remote_version(content: str) -> str | None:
    """Version number from the header comment of the published source."""
    if not content.startswith(HEADER_START):
        # Skip junk ahead of the header
        start = content.find(HEADER_START)
        if start == -1:
            return None
        content = content[start:]

    lines = content.split("\n")
    if len(lines) <= VERSION_LINE_INDEX + 1:
        return None
    candidate = lines[VERSION_LINE_INDEX].replace("*", "").strip()
    if not _VERSION_PATTERN.match(candidate):
        return None
    return candidate


def is_newer(remote: str, current: str) -> bool:
    return parse_version(remote) > parse_version(current)


def is_update_due(prefs: IntegrationPreferences, now: datetime | None = None) -> bool:
    if not prefs.automatic_updates:
        return False
    now = now or datetime.now()
    return now >= prefs.last_update + timedelta(days=prefs.update_days)


async def check_for_update(prefs: IntegrationPreferences, current_version: str, url: str,
                           timeout: float = 15.0, now: datetime | None = None) -> UpdateInfo:
    """Fetch the published source, record what we saw, and compare versions.

    Raises:
        UpdateCheckError: If the source cannot be fetched
    """
    content = await fetch_text(url, timeout)
    prefs.last_update = now or datetime.now()

    remote = parse_remote_version(content)
    if remote is None:
        logger.warning(f"No version number found in {url}")
        return UpdateInfo(current_version=current_version, source_url=url)

    prefs.remote_version = remote
    available = is_newer(remote, current_version)
    if available:
        logger.info(f"Version {remote} is available (running {current_version})")
    return UpdateInfo(
        current_version=current_version,
        remote_version=remote,
        update_available=available,
        source_url=url,
    )


def run_check_for_update(prefs: IntegrationPreferences, current_version: str, url: str,
                         timeout: float = 15.0, now: datetime | None = None) -> UpdateInfo:
    """Synchronous wrapper for check_for_update."""
    return asyncio.run(check_for_update(prefs, current_version, url, timeout, now))


async def download_verified(url: str, destination: str | Path, expected_sha256: str,
                            timeout: float = 15.0) -> Path:
    """Download ``url`` to ``destination`` only if its digest matches.

    Raises:
        UpdateCheckError: On network failure or digest mismatch
    """
    payload = await fetch_bytes(url, timeout)
    digest = hashlib.sha256(payload).hexdigest()
    if digest.lower() != expected_sha256.strip().lower():
        raise UpdateCheckError(
            f"Checksum mismatch for {url}: expected {expected_sha256}, got {digest}")
    destination = Path(destination)
    destination.parent.mkdir(parents=True, exist_ok=True)
    destination.write_bytes(payload)
    return destination


def run_download_verified(url: str, destination: str | Path, expected_sha256: str,
                          timeout: float = 15.0) -> Path:
    """Synchronous wrapper for download_verified."""
    return asyncio.run(download_verified(url, destination, expected_sha256, timeout))


def install_unity_debugger(url: str, launcher: CodeLauncher, timeout: float = 15.0,
                           download_dir: str | Path | None = None) -> Path:
    """Download the debugger extension package and hand it to Code.

    Raises:
        UpdateCheckError: If the package cannot be downloaded
    """
    payload = asyncio.run(fetch_bytes(url, timeout))
    folder = Path(download_dir or tempfile.gettempdir())
    folder.mkdir(parents=True, exist_ok=True)
    package = folder / f"{uuid.uuid4()}.vsix"
    package.write_bytes(payload)
    logger.debug(f"Unity debugger package saved to {package}")
    launcher.install_extension(package)
    return package
