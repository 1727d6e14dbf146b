"""Commands that run or prepare the HTTP service."""

from pathlib import Path

import typer
from rich.markup import escape
from rich.panel import Panel
from sqlalchemy.exc import SQLAlchemyError

from src.users_api.api.utils.app_startup import configure_logging
from src.users_api.core.services import DbManageService, DbSessionService

from .utils import ConfigOption, console, resolve_config


def serve(
    host: str | None = typer.Option(None, help="Host to bind (defaults to app.host)"),
    port: int | None = typer.Option(None, help="Port to bind (defaults to app.port)"),
    reload: bool = typer.Option(False, help="Enable auto-reload on code changes"),
    config_file: Path | None = ConfigOption,
) -> None:
    """
    Start the HTTP API with uvicorn.
    """
    import os

    import uvicorn

    config = resolve_config(config_file)
    bind_host = host or config.app.host
    bind_port = port or config.app.port

    if config_file is not None:
        # The ASGI factory re-resolves configuration in the server process
        os.environ["CONFIG_FILE"] = str(config_file)

    console.print(
        Panel.fit(
            f"[bold green]Starting {config.app.name}[/bold green] on "
            f"http://{bind_host}:{bind_port}",
            border_style="green",
        )
    )

    uvicorn.run(
        "src.users_api.api.http.app:build_app",
        factory=True,
        host=bind_host,
        port=bind_port,
        reload=reload,
        access_log=False,  # Request logging happens in the app middleware
    )


def init_db(config_file: Path | None = ConfigOption) -> None:
    """
    Create the database schema and exit.
    """
    config = resolve_config(config_file)
    configure_logging(config)

    database_service = DbSessionService(config)
    try:
        manager = DbManageService(database_service)
        manager.create_all()
        tables = manager.table_names()
    except SQLAlchemyError as e:
        console.print(f"[red]❌ Failed to initialize database: {escape(str(e))}[/red]")
        raise typer.Exit(code=1) from e
    finally:
        database_service.dispose()

    console.print(f"[green]✅ Database ready; tables: {', '.join(tables)}[/green]")


def register_server_commands(app: typer.Typer) -> None:
    app.command("serve")(serve)
    app.command("init-db")(init_db)
