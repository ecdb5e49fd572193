"""Config, output rendering, and prompts shared by the Docs/Slides/auth CLIs."""
from __future__ import annotations

import json
import os
import re
from pathlib import Path
from typing import Any, NoReturn

import typer
import yaml
from rich.console import Console

from docs_errors import DocsError, ValidationError

# auth.py keeps accounts under the same directory
CONFIG_DIR = Path(os.environ.get("GSUITE_CONFIG_DIR", Path.home() / ".agents" / "gsuite"))
CONFIG_FILE = CONFIG_DIR / "config.yml"

OUTPUT_FORMATS = ("text", "json", "yaml")

console = Console(stderr=True)
stdout_console = Console()

_HEX_COLOR = re.compile(r"^#?([0-9a-fA-F]{6})$")


def load_config() -> dict[str, Any]:
    """Parsed config.yml, or {} when it is missing or unreadable."""
    try:
        data = yaml.safe_load(CONFIG_FILE.read_text())
    except FileNotFoundError:
        return {}
    except yaml.YAMLError as e:
        warn(f"ignoring {CONFIG_FILE}: {e}")
        return {}
    return data if isinstance(data, dict) else {}


def get_setting(path: str, default: Any = None) -> Any:
    """Read a dotted config key, e.g. ``get_setting("docs.content_format")``."""
    node: Any = load_config()
    for key in path.split("."):
        if not isinstance(node, dict) or key not in node:
            return default
        node = node[key]
    return node


def debug_enabled() -> bool:
    env = os.environ.get("GSUITE_DEBUG", "")
    if env:
        return env.lower() not in ("0", "false", "no")
    return bool(get_setting("debug", False))


def debug(message: str) -> None:
    if debug_enabled():
        console.print(f"[dim]debug: {message}[/dim]")


def warn(message: str) -> None:
    console.print(f"[yellow]Warning:[/yellow] {message}")


def hex_to_rgb(value: str) -> dict[str, float]:
    """Convert ``#RRGGBB`` to an API RgbColor with 0..1 components."""
    match = _HEX_COLOR.match(value.strip())
    if not match:
        raise ValidationError(f"invalid hex color '{value}' (expected #RRGGBB)")
    digits = match.group(1)
    return {
        "red": int(digits[0:2], 16) / 255,
        "green": int(digits[2:4], 16) / 255,
        "blue": int(digits[4:6], 16) / 255,
    }


def output_format(json_output: bool) -> str:
    """--json wins; otherwise the configured ``format`` (text by default)."""
    if json_output:
        return "json"
    fmt = str(get_setting("format", "text")).lower()
    return fmt if fmt in OUTPUT_FORMATS else "text"


def emit(result: dict[str, Any], json_output: bool = False, message: str | None = None) -> None:
    """Render a command result.

    In text mode ``message`` (rich markup) is shown instead of the raw map
    when given; json and yaml always render the full map on stdout.
    """
    fmt = output_format(json_output)
    if fmt == "json":
        stdout_console.print_json(json.dumps(result))
    elif fmt == "yaml":
        stdout_console.print(yaml.safe_dump(result, sort_keys=False).rstrip(), markup=False, highlight=False)
    elif message:
        console.print(message)
    else:
        for key, value in result.items():
            stdout_console.print(f"{key}: {value}", markup=False, highlight=False)


def fail(error: DocsError, json_output: bool = False) -> NoReturn:
    """Report ``error`` and exit 1."""
    if output_format(json_output) == "json":
        stdout_console.print_json(json.dumps({"error": str(error), "code": error.code}))
    elif error.code == "remote_error":
        console.print(f"[red]API Error:[/red] {error}")
    else:
        console.print(f"[red]Error:[/red] {error}")
    raise typer.Exit(1)


def is_confirmation_enabled(tool: str) -> bool:
    """``confirmation.<tool>``, falling back to ``confirmation.default``, then on."""
    enabled = get_setting(f"confirmation.{tool}")
    if enabled is None:
        enabled = get_setting("confirmation.default", True)
    return bool(enabled)


def confirm_action(action: str, details: str, tool: str, *, skip_confirmation: bool = False) -> bool:
    """Ask before a destructive call. Returns False when the user declines.

    ``--yes`` (``skip_confirmation``) or ``confirmation.<tool>: false`` in the
    config file skip the prompt.
    """
    if skip_confirmation or not is_confirmation_enabled(tool):
        return True

    from rich.panel import Panel

    console.print(Panel(details, title=f"[yellow]{action}[/yellow]", border_style="yellow"))
    return typer.confirm("Continue?", default=False)
