"""Shared helpers for CLI commands."""

from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape

from src.users_api.runtime.config import ConfigData, load_config

console = Console()


def resolve_config(config_file: Path | None) -> ConfigData:
    """Load configuration, turning problems into a clean CLI exit."""
    try:
        return load_config(config_file)
    except (ValueError, FileNotFoundError) as e:
        console.print(f"[red]❌ Configuration error: {escape(str(e))}[/red]")
        raise typer.Exit(code=1) from e


ConfigOption = typer.Option(
    None,
    "--config",
    "-c",
    help="Path to a config.yaml file (defaults to CONFIG_FILE or ./config.yaml)",
)
