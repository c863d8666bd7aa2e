"""Confirmation prompts for commands that delete files."""

import click


def confirm_destructive_action(action: str, item_type: str, item_name: str, force: bool) -> None:
    """Prompt user to confirm unless --force is set.

    Raises:
        click.Abort: If user declines confirmation
    """
    if not force:
        click.confirm(f"{action} {item_type} '{item_name}'?", abort=True)
