"""User inspection CLI commands."""

from pathlib import Path

import typer
from rich.markup import escape
from rich.table import Table

from src.users_api.core.exceptions import StoreError
from src.users_api.core.services import DbSessionService
from src.users_api.entities.core.user import SQLUserRepository

from .utils import ConfigOption, console, resolve_config

# Create the users subcommand app
users_app = typer.Typer(help="Inspect users stored in the database")


@users_app.command("list")
def list_users(config_file: Path | None = ConfigOption) -> None:
    """List all users in the database."""
    config = resolve_config(config_file)
    database_service = DbSessionService(config)

    try:
        with database_service.session_scope() as session:
            users = SQLUserRepository(session).get_all()
    except StoreError as e:
        console.print(f"[red]❌ Failed to list users: {escape(str(e))}[/red]")
        raise typer.Exit(code=1) from e
    finally:
        database_service.dispose()

    if not users:
        console.print("[yellow]No users found[/yellow]")
        return

    table = Table(title="Users")
    table.add_column("ID", style="cyan")
    table.add_column("First Name", style="magenta")
    table.add_column("Last Name", style="magenta")
    table.add_column("Email", style="blue")
    table.add_column("Created", style="green")

    for user in users:
        table.add_row(
            user.id,
            user.first_name,
            user.last_name,
            user.email,
            user.created_at.strftime("%Y-%m-%d %H:%M:%S"),
        )

    console.print(table)
    console.print(f"\n[green]Found {len(users)} users[/green]")
