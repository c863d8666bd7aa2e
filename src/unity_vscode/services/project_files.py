"""
Scrub the solution and project files Unity generates so Code can load them.

Unity rewrites ``*.sln`` / ``*.csproj`` whenever scripts change. After each
regeneration we:

- add missing options (``<LangVersion>`` and optionally ``<TargetPath>``) to
  every ``<PropertyGroup>`` block of each project file,
- bump the solution header from the VS2008 format to the VS2012 format and
  drop the ``SolutionProperties`` section,
- remove blank lines.

Patching works on the raw text so that everything we do not touch stays byte
for byte what Unity wrote. A real XML parser is only used to make sure a
well-formed project file stays well-formed.
"""
from __future__ import annotations

import logging
import platform
import re
import xml.etree.ElementTree as ET
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable

from unity_vscode.core.errors import ProjectFileError, UnterminatedBlockError

logger = logging.getLogger(__name__)

PROPERTY_GROUP_START = "<PropertyGroup"
PROPERTY_GROUP_END = "</PropertyGroup>"

LEGACY_FRAMEWORK = "<TargetFrameworkVersion>v3.5</TargetFrameworkVersion>"
BASE_FRAMEWORK = "<TargetFrameworkVersion>v2.0</TargetFrameworkVersion>"

_SOLUTION_HEADER_2008 = re.compile(
    r"Microsoft Visual Studio Solution File, Format Version 11\.00(\r?\n)# Visual Studio 2008")
_SOLUTION_HEADER_2012 = r"Microsoft Visual Studio Solution File, Format Version 12.00\1# Visual Studio 2012"

SOLUTION_PROPERTIES_START = "GlobalSection(SolutionProperties) = preSolution"
SOLUTION_SECTION_END = "EndGlobalSection"

SOLUTION_PATTERNS = ("*.sln",)
PROJECT_PATTERNS = ("*.csproj",)
STALE_PATTERNS = ("*.sln", "*.csproj", "*.unityproj")

UTF8_BOM = "\ufeff"


@dataclass(frozen=True)
class ProjectOption:
    """An element that must exist once in every property block."""
    tag: str
    value: str

    @property
    def marker(self) -> str:
        return f"<{self.tag}>"

    def render(self) -> str:
        return f"<{self.tag}>{self.value}</{self.tag}>"


def default_project_options(lang_version: str = "default", target_path: str = "") -> list[ProjectOption]:
    options = []
    if target_path:
        options.append(ProjectOption("TargetPath", target_path))
    if lang_version:
        options.append(ProjectOption("LangVersion", lang_version))
    return options


def _newline(text: str) -> str:
    return "\r\n" if "\r\n" in text else "\n"


def _is_well_formed(text: str) -> bool:
    try:
        ET.fromstring(text.lstrip(UTF8_BOM).encode("utf-8"))
    except (ET.ParseError, ValueError):
        return False
    return True


def find_blocks(text: str, start_marker: str, end_marker: str) -> list[tuple[int, int]] | None:
    """Return (start, end) offsets of every marker-bounded block.

    ``end`` is the offset of the end marker itself. Self-closing start tags
    are skipped. Returns None when a start marker has no matching end marker.
    """
    blocks: list[tuple[int, int]] = []
    location = 0
    while True:
        start = text.find(start_marker, location)
        if start == -1:
            return blocks

        tag_close = text.find(">", start)
        if tag_close == -1:
            return None
        if text[tag_close - 1] == "/":
            location = tag_close + 1
            continue

        end = text.find(end_marker, tag_close)
        if end == -1:
            return None
        blocks.append((start, end))
        location = end + len(end_marker)


def _line_indent(text: str, offset: int) -> tuple[int, str]:
    """Start of the line holding ``offset`` and the text between the two."""
    line_start = text.rfind("\n", 0, offset) + 1
    prefix = text[line_start:offset]
    return line_start, prefix


def _child_indent(block: str, end_indent: str) -> str:
    lines = [line for line in block.splitlines()[1:] if line.strip()]
    if lines:
        last = lines[-1]
        return last[:len(last) - len(last.lstrip())]
    return end_indent + "  "


def patch_property_blocks(text: str, options: Iterable[ProjectOption],
                          start_marker: str = PROPERTY_GROUP_START,
                          end_marker: str = PROPERTY_GROUP_END) -> str:
    """Insert each option missing from a block just before the block's end marker.

    Text without a start marker comes back unchanged, and so does text with
    an unterminated block: nothing is patched in that case, not even the
    complete blocks before it.
    """
    options = list(options)
    blocks = find_blocks(text, start_marker, end_marker)
    if blocks is None:
        logger.warning(f"Unterminated {start_marker} block, leaving project file untouched")
        return text
    if not blocks or not options:
        return text

    newline = _newline(text)
    # Work from the back so earlier offsets stay valid
    for start, end in reversed(blocks):
        block = text[start:end]
        missing = [opt for opt in options if opt.marker not in block]
        if not missing:
            continue

        line_start, prefix = _line_indent(text, end)
        if prefix.strip():
            # End marker shares a line with other content
            insertion = "".join(opt.render() for opt in missing)
            text = text[:end] + insertion + text[end:]
        else:
            indent = _child_indent(block, prefix)
            insertion = "".join(
                f"{indent}{opt.render()}{newline}" for opt in missing)
            text = text[:line_start] + insertion + text[line_start:]
    return text


def patch_project_content(text: str, options: Iterable[ProjectOption] | None = None,
                          downgrade_framework: bool | None = None, strict: bool = False) -> str:
    """Scrub one project file's content.

    An unterminated property block leaves the whole text untouched, framework
    downgrade included. With ``strict`` that case raises UnterminatedBlockError
    instead, so file-level callers can skip the write.
    """
    if not text:
        return ""

    if find_blocks(text, PROPERTY_GROUP_START, PROPERTY_GROUP_END) is None:
        if strict:
            raise UnterminatedBlockError(f"Unterminated {PROPERTY_GROUP_START} block")
        logger.warning(f"Unterminated {PROPERTY_GROUP_START} block, leaving project file untouched")
        return text

    if options is None:
        options = default_project_options()
    if downgrade_framework is None:
        # The 3.5 target breaks OmniSharp on Windows only
        downgrade_framework = platform.system() != "Windows"

    patched = text
    if downgrade_framework and LEGACY_FRAMEWORK in patched:
        patched = patched.replace(LEGACY_FRAMEWORK, BASE_FRAMEWORK)

    patched = patch_property_blocks(patched, options)

    if patched != text and _is_well_formed(text) and not _is_well_formed(patched):
        logger.warning("Patched project file is not well-formed XML, keeping original")
        return text
    return patched


def patch_solution_content(text: str) -> str:
    """Scrub one solution file's content."""
    text = _SOLUTION_HEADER_2008.sub(_SOLUTION_HEADER_2012, text, count=1)

    start = text.find(SOLUTION_PROPERTIES_START)
    if start != -1:
        end = text.find(SOLUTION_SECTION_END, start)
        if end == -1:
            logger.warning("SolutionProperties section has no end marker, leaving it")
        else:
            line_start = text.rfind("\n", 0, start) + 1
            if text[line_start:start].strip():
                line_start = start
            line_end = text.find("\n", end)
            line_end = len(text) if line_end == -1 else line_end + 1
            text = text[:line_start] + text[line_end:]
    return text


def strip_blank_lines(text: str) -> str:
    """Drop empty and whitespace-only lines, keeping the line ending style."""
    newline = _newline(text)
    kept = [line for line in text.splitlines() if line.strip()]
    if not kept:
        return ""
    return newline.join(kept) + newline


def _read(path: Path) -> tuple[str, bool]:
    try:
        raw = path.read_bytes()
    except OSError as e:
        raise ProjectFileError(f"Cannot read {path}: {e}") from e
    try:
        text = raw.decode("utf-8-sig")
    except UnicodeDecodeError as e:
        raise ProjectFileError(f"{path} is not valid UTF-8: {e}") from e
    return text, raw.startswith(b"\xef\xbb\xbf")


def _write(path: Path, text: str, bom: bool) -> None:
    data = text.encode("utf-8")
    if bom:
        data = b"\xef\xbb\xbf" + data
    try:
        path.write_bytes(data)
    except OSError as e:
        raise ProjectFileError(f"Cannot write {path}: {e}") from e


def scrub_file(path: str | Path, patcher) -> bool:
    """Apply ``patcher`` and blank-line stripping to a file. Returns True if it changed.

    Raises:
        ProjectFileError: If the file cannot be read as UTF-8 or written, or
            the patcher refuses the content. The file is not written then.
    """
    path = Path(path)
    original, bom = _read(path)
    scrubbed = strip_blank_lines(patcher(original))
    if scrubbed == original:
        return False
    _write(path, scrubbed, bom)
    return True


def _glob(directory: Path, patterns: Iterable[str]) -> list[Path]:
    found: list[Path] = []
    for pattern in patterns:
        found.extend(sorted(p for p in directory.glob(pattern) if p.is_file()))
    return found


def update_solution(directory: str | Path, options: Iterable[ProjectOption] | None = None,
                    downgrade_framework: bool | None = None) -> list[Path]:
    """Scrub every solution and project file directly inside ``directory``."""
    directory = Path(directory)
    options = list(options) if options is not None else None
    changed: list[Path] = []

    def _project(text: str) -> str:
        return patch_project_content(text, options, downgrade_framework, strict=True)

    targets = [(path, patch_solution_content) for path in _glob(directory, SOLUTION_PATTERNS)]
    targets += [(path, _project) for path in _glob(directory, PROJECT_PATTERNS)]

    for path, patcher in targets:
        try:
            if scrub_file(path, patcher):
                changed.append(path)
        except ProjectFileError as e:
            # Leave the file as Unity wrote it and carry on with the rest
            logger.warning(f"Skipping {path.name}: {e}")

    logger.debug(f"Scrubbed {len(changed)} solution/project file(s) in {directory}")
    return changed


def clear_project_files(directory: str | Path) -> list[Path]:
    """Delete generated solution and project files so they can be regenerated clean."""
    removed: list[Path] = []
    for path in _glob(Path(directory), STALE_PATTERNS):
        try:
            path.unlink()
        except OSError as e:
            raise ProjectFileError(f"Cannot delete {path}: {e}") from e
        removed.append(path)
    return removed
