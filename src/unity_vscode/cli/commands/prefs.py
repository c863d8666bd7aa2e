"""Preference CLI commands - inspect and change stored preferences."""

import json

import click

from unity_vscode.cli.utils.config import get_config
from unity_vscode.cli.utils.context import get_integration
from unity_vscode.cli.utils.output import format_output, print_success

# Preferences settable from the command line and the integration method applying each
SETTABLE = {
    "enabled": "set_enabled",
    "debug": "set_debug",
    "use-unity-debugger": "set_use_unity_debugger",
    "write-launch-file": None,
    "revert-on-exit": None,
    "automatic-updates": None,
    "update-days": None,
}


def _parse_value(name: str, value: str):
    if name == "update-days":
        try:
            return int(value)
        except ValueError:
            raise click.BadParameter(f"'{value}' is not a number", param_hint="VALUE")
    lowered = value.strip().lower()
    if lowered in ("1", "true", "yes", "on"):
        return True
    if lowered in ("0", "false", "no", "off"):
        return False
    raise click.BadParameter(f"'{value}' is not a boolean", param_hint="VALUE")


@click.group()
def prefs():
    """Inspect and change integration preferences."""
    pass


@prefs.command("list")
def list_prefs():
    """Show every stored preference, including host editor keys."""
    config = get_config()
    store = get_integration(config).store
    click.echo(format_output(store.as_dict(), config.format))


@prefs.command("get")
@click.argument("key")
def get(key: str):
    """Print a raw stored value."""
    config = get_config()
    store = get_integration(config).store
    click.echo(json.dumps(store.get(key)))


@prefs.command("set")
@click.argument("name", type=click.Choice(sorted(SETTABLE)))
@click.argument("value")
def set_(name: str, value: str):
    """Change an integration preference.

    \b
    Examples:
        unity-vscode prefs set debug on
        unity-vscode prefs set update-days 14
    """
    config = get_config()
    integration = get_integration(config)
    parsed = _parse_value(name, value)

    method = SETTABLE[name]
    if method is not None:
        getattr(integration, method)(parsed)
    else:
        setattr(integration.prefs, name.replace("-", "_"), parsed)
    print_success(f"{name} = {parsed}")
