"""Main CLI application module."""

from pathlib import Path

import typer
from dotenv import load_dotenv

from .server_commands import register_server_commands
from .user_commands import users_app

# Create the main CLI application
app = typer.Typer(
    help="Users API - serve the REST API and manage its database",
    no_args_is_help=True,
    rich_markup_mode="rich",
)


@app.callback()
def _load_environment(
    env_file: Path = typer.Option(
        Path(".env"), "--env-file", help="Dotenv file read before configuration"
    ),
) -> None:
    """Populate the process environment from a dotenv file, if present."""
    if env_file.is_file():
        load_dotenv(env_file, override=False)


register_server_commands(app)
app.add_typer(users_app, name="users")


def main() -> None:
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
