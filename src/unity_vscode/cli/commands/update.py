"""Update CLI commands - version check and debugger extension install."""

from typing import Optional

import click

from unity_vscode import __version__
from unity_vscode.cli.utils.config import get_config
from unity_vscode.cli.utils.context import get_integration, handle_integration_errors
from unity_vscode.cli.utils.output import format_output, print_info, print_success
from unity_vscode.services.updater import (
    install_unity_debugger,
    run_check_for_update,
    run_download_verified,
)


@click.group()
def update():
    """Check for updates and install the Unity debugger extension."""
    pass


@update.command("check")
@handle_integration_errors
def check():
    """Compare the running version with the published one."""
    config = get_config()
    integration = get_integration(config)
    info = run_check_for_update(
        integration.prefs, __version__,
        config.integration.update_url, config.integration.http_timeout)

    if config.format == "json":
        click.echo(format_output(info.model_dump(), "json"))
    elif info.update_available:
        print_info(f"Version {info.remote_version} is available (running {info.current_version})")
    else:
        print_success(f"Up to date ({info.current_version})")


@update.command("download")
@click.argument("destination", type=click.Path(dir_okay=False))
@click.option(
    "--sha256",
    required=True,
    help="Expected SHA-256 digest of the published file."
)
@click.option(
    "--url",
    default=None,
    help="Source URL (default: the configured update URL)."
)
@handle_integration_errors
def download(destination: str, sha256: str, url: Optional[str]):
    """Download the published source after verifying its digest."""
    config = get_config()
    path = run_download_verified(
        url or config.integration.update_url, destination, sha256,
        config.integration.http_timeout)
    print_success(f"Saved {path}")


@update.command("debugger")
@click.option(
    "--url",
    default=None,
    help="Extension package URL (default: the configured one)."
)
@handle_integration_errors
def debugger(url: Optional[str]):
    """Download the Unity debugger extension and install it into Code."""
    config = get_config()
    integration = get_integration(config)
    package = install_unity_debugger(
        url or config.integration.unity_debugger_url,
        integration.launcher, config.integration.http_timeout)
    print_success(f"Installing {package.name} into Code")
