"""Unity VS Code Command Line Interface - Main Entry Point."""

import sys
from importlib import import_module
from typing import Optional

import click

from unity_vscode.cli import __version__
from unity_vscode.cli.utils.config import CLIConfig, set_config, get_config
from unity_vscode.cli.utils.context import get_integration, handle_integration_errors
from unity_vscode.cli.utils.output import format_output, print_error, print_success, print_info
from unity_vscode.core.logging_setup import configure_logging


# Context object to pass configuration between commands
class Context:
    def __init__(self):
        self.config: Optional[CLIConfig] = None
        self.verbose: bool = False


pass_context = click.make_pass_decorator(Context, ensure=True)


@click.group()
@click.version_option(version=__version__, prog_name="unity-vscode")
@click.option(
    "--project", "-p",
    default=".",
    envvar="UNITY_VSCODE_PROJECT",
    type=click.Path(file_okay=False),
    help="Unity project root (the folder holding Assets/)."
)
@click.option(
    "--prefs",
    default=None,
    envvar="UNITY_VSCODE_PREFS",
    type=click.Path(dir_okay=False),
    help="Preference store file."
)
@click.option(
    "--format", "-f",
    type=click.Choice(["text", "json"]),
    default="text",
    envvar="UNITY_VSCODE_FORMAT",
    help="Output format."
)
@click.option(
    "--verbose", "-v",
    is_flag=True,
    help="Enable verbose output."
)
@pass_context
def cli(ctx: Context, project: str, prefs: Optional[str], format: str, verbose: bool):
    """Unity VS Code integration.

    Make Visual Studio Code the external script editor of a Unity project,
    keep its generated project files Code-friendly and write debugger
    launch configurations.

    \b
    Examples:
        unity-vscode enable
        unity-vscode project sync
        unity-vscode debug port
        unity-vscode debug launch --port 56123

    \b
    Environment Variables:
        UNITY_VSCODE_PROJECT    Project root (default: .)
        UNITY_VSCODE_PREFS      Preference store file
        UNITY_VSCODE_FORMAT     Output format (default: text)
        UNITY_VSCODE_CODE_PATH  Code binary the editor should launch
    """
    config = CLIConfig(
        project=project,
        prefs_path=prefs,
        format=format,
        verbose=verbose,
    )
    configure_logging(config.integration, verbose=verbose)

    set_config(config)
    ctx.config = config
    ctx.verbose = verbose


@cli.command("status")
@pass_context
def status(ctx: Context):
    """Show the integration preferences for the project."""
    config = ctx.config or get_config()
    integration = get_integration(config)

    data = {
        "project": str(integration.project_path.resolve()),
        "preferences": integration.prefs.snapshot(),
        "script_editor": integration.store.get("kScriptsDefaultApp", ""),
    }
    click.echo(format_output(data, config.format))


@cli.command("enable")
@pass_context
@handle_integration_errors
def enable(ctx: Context):
    """Make Code the external script editor."""
    config = ctx.config or get_config()
    integration = get_integration(config)
    if integration.enabled:
        print_info("Integration already enabled")
        return
    integration.set_enabled(True)
    print_success(f"Script editor set to {config.integration.code_path}")


@cli.command("disable")
@pass_context
@handle_integration_errors
def disable(ctx: Context):
    """Restore the previous external script editor."""
    config = ctx.config or get_config()
    integration = get_integration(config)
    if not integration.enabled:
        print_info("Integration already disabled")
        return
    integration.set_enabled(False)
    print_success("Previous script editor settings restored")


def register_commands():
    """Register all command groups."""
    def register_optional_command(module_name: str, command_name: str) -> None:
        try:
            module = import_module(module_name)
        except Exception as e:
            print_error(
                f"Failed to load command module '{module_name}': {e}"
            )
            return

        command = getattr(module, command_name, None)
        if command is None:
            print_error(
                f"Command '{command_name}' not found in '{module_name}'"
            )
            return

        cli.add_command(command)

    optional_commands = [
        ("unity_vscode.cli.commands.project", "project"),
        ("unity_vscode.cli.commands.debug", "debug"),
        ("unity_vscode.cli.commands.update", "update"),
        ("unity_vscode.cli.commands.prefs", "prefs"),
    ]

    for module_name, command_name in optional_commands:
        register_optional_command(module_name, command_name)


# Register commands on import
register_commands()


def main():
    """Main entry point for the CLI."""
    cli()


if __name__ == "__main__":
    sys.exit(main())
