"""Output formatting for command results."""

import json
from typing import Any

import click


def format_as_json(data: Any) -> str:
    return json.dumps(data, indent=2, default=str)


def format_as_text(data: Any, indent: int = 0) -> str:
    pad = "  " * indent
    if isinstance(data, dict):
        lines = []
        for key, value in data.items():
            if isinstance(value, (dict, list)) and value:
                lines.append(f"{pad}{key}:")
                lines.append(format_as_text(value, indent + 1))
            else:
                lines.append(f"{pad}{key}: {value}")
        return "\n".join(lines)
    if isinstance(data, list):
        if not data:
            return f"{pad}(none)"
        return "\n".join(
            format_as_text(item, indent) if isinstance(item, (dict, list))
            else f"{pad}- {item}"
            for item in data
        )
    return f"{pad}{data}"


def format_output(data: Any, format_type: str = "text") -> str:
    if format_type == "json":
        return format_as_json(data)
    return format_as_text(data)


def print_success(message: str) -> None:
    click.secho(f"✅ {message}", fg="green")


def print_error(message: str) -> None:
    click.secho(f"❌ {message}", fg="red", err=True)


def print_info(message: str) -> None:
    click.echo(f"ℹ️  {message}")
