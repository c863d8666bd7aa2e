"""Debug CLI commands - port discovery and .vscode configuration files."""

import sys
from typing import Optional

import click

from unity_vscode.cli.utils.config import get_config
from unity_vscode.cli.utils.context import get_integration, handle_integration_errors
from unity_vscode.cli.utils.output import format_output, print_error, print_success
from unity_vscode.services.launch_config import LaunchConfigWriter
from unity_vscode.services.port_scanner import PortScanner


@click.group()
def debug():
    """Debugger attach support."""
    pass


@debug.command("port")
@click.option(
    "--process", "-n",
    default=None,
    help="Process name to look for (default: Unity)."
)
def port(process: Optional[str]):
    """Print the port the running editor accepts debugger connections on."""
    config = get_config()
    scanner = PortScanner(
        process or config.integration.debug_process_name,
        config.integration.process_timeout,
    )
    found = scanner.find_debug_port()
    if found is None:
        print_error(f"No listening port found for {scanner.process_name}")
        sys.exit(1)
    click.echo(format_output({"process": scanner.process_name, "port": found}, config.format))


@debug.command("launch")
@click.option(
    "--port", "-P", "port_number",
    default=None,
    type=click.IntRange(1, 65535),
    help="Write this port instead of discovering it."
)
@click.option(
    "--name",
    default="Unity",
    help="Configuration name to add or replace."
)
@click.option(
    "--unity-debugger",
    is_flag=True,
    help="Write the Unity debugger extension's launch targets instead."
)
@handle_integration_errors
def launch(port_number: Optional[int], name: str, unity_debugger: bool):
    """Write .vscode/launch.json.

    \b
    Examples:
        unity-vscode debug launch
        unity-vscode debug launch --port 56123
        unity-vscode debug launch --unity-debugger
    """
    config = get_config()
    writer = LaunchConfigWriter.for_project(config.project)

    if unity_debugger:
        document = writer.write_unity_debugger()
    else:
        if port_number is None:
            port_number = PortScanner(
                config.integration.debug_process_name,
                config.integration.process_timeout,
            ).find_debug_port()
        if port_number is None:
            print_error("Unable to determine debug port.")
            sys.exit(1)
        document = writer.write_attach(port_number, name=name)

    print_success(f"Wrote {writer.path}")
    if config.verbose:
        click.echo(format_output(document.to_json_dict(), config.format))


@debug.command("settings")
@handle_integration_errors
def settings():
    """Write .vscode/settings.json hiding non-code files."""
    config = get_config()
    path = get_integration(config).write_workspace_settings()
    print_success(f"Wrote {path}")
