"""Project CLI commands - scrub, clear and open the generated C# project."""

import sys
from pathlib import Path
from typing import Optional

import click

from unity_vscode.cli.utils.config import get_config
from unity_vscode.cli.utils.confirmation import confirm_destructive_action
from unity_vscode.cli.utils.context import get_integration, handle_integration_errors
from unity_vscode.cli.utils.output import format_output, print_error, print_info, print_success
from unity_vscode.core.errors import ProjectFileError
from unity_vscode.services import project_files


@click.group()
def project():
    """Solution and project file operations."""
    pass


@project.command("sync")
@click.option(
    "--force",
    is_flag=True,
    help="Scrub even when the integration is disabled."
)
@handle_integration_errors
def sync(force: bool):
    """Make the generated .sln/.csproj files Code-friendly.

    \b
    Examples:
        unity-vscode project sync
        unity-vscode --project ~/Games/Demo project sync --force
    """
    config = get_config()
    integration = get_integration(config)

    if force:
        options = project_files.default_project_options(
            config.integration.lang_version, config.integration.target_path)
        changed = project_files.update_solution(integration.project_path, options)
    elif not integration.enabled:
        print_info("Integration is disabled; run 'unity-vscode enable' or pass --force")
        return
    else:
        changed = integration.update_solution()

    if not changed:
        print_info("Solution and project files already up to date")
        return
    click.echo(format_output({"updated": [str(p) for p in changed]}, config.format))


@project.command("patch")
@click.argument("files", nargs=-1, required=True, type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--lang-version",
    default=None,
    help="Value for the inserted <LangVersion> element."
)
@handle_integration_errors
def patch(files: tuple[str, ...], lang_version: Optional[str]):
    """Scrub individual solution or project files in place.

    \b
    Examples:
        unity-vscode project patch Assembly-CSharp.csproj
        unity-vscode project patch Demo.sln Assembly-CSharp.csproj --lang-version latest
    """
    config = get_config()
    options = project_files.default_project_options(
        lang_version or config.integration.lang_version, config.integration.target_path)

    def _project(text: str) -> str:
        return project_files.patch_project_content(text, options, strict=True)

    failed = False
    for name in files:
        path = Path(name)
        if path.suffix.lower() == ".sln":
            patcher = project_files.patch_solution_content
        elif path.suffix.lower() == ".csproj":
            patcher = _project
        else:
            print_error(f"Not a solution or project file: {name}")
            sys.exit(1)
        try:
            updated = project_files.scrub_file(path, patcher)
        except ProjectFileError as e:
            print_error(f"Skipped {name}: {e}")
            failed = True
            continue
        if updated:
            print_success(f"Updated {name}")
        else:
            print_info(f"Unchanged {name}")

    if failed:
        sys.exit(1)


@project.command("clear")
@click.option(
    "--force",
    is_flag=True,
    help="Skip confirmation."
)
@handle_integration_errors
def clear(force: bool):
    """Delete generated .sln, .csproj and .unityproj files."""
    config = get_config()
    integration = get_integration(config)
    confirm_destructive_action(
        "Delete", "generated project files in", str(integration.project_path), force)

    removed = integration.clear_project_files()
    click.echo(format_output({"removed": [str(p) for p in removed]}, config.format))


@project.command("open")
@click.argument("file", required=False)
@click.option(
    "--line", "-l",
    default=None,
    type=click.IntRange(min=1),
    help="Line to jump to (1-based). Omit to open at the last position."
)
@handle_integration_errors
def open_(file: Optional[str], line: Optional[int]):
    """Open the project, or one of its scripts, in Code.

    \b
    Examples:
        unity-vscode project open
        unity-vscode project open Assets/Scripts/Player.cs --line 42
    """
    config = get_config()
    integration = get_integration(config)

    if file is None:
        ok = integration.open_project()
    else:
        path = Path(file)
        full_path = path if path.is_absolute() else integration.project_path / path
        ok = integration.launcher.open_file(
            integration.project_path, full_path, -1 if line is None else line)

    if not ok:
        print_error("Could not start Visual Studio Code")
        sys.exit(1)
