"""Command line entry point: ``newsdesk serve | migrate | version``."""

import typer
import uvicorn
from rich.console import Console

from .config import Settings
from .domain.exceptions import DomainError, PersistenceError, StartupError
from .infrastructure.database.database import ConnectionPool
from .infrastructure.database.migration_runner import current_revision, run_pending
from .logging_config import setup_logging

console = Console()

app = typer.Typer(
    name="newsdesk",
    help="Newsdesk CRUD API for posts and events",
    add_completion=False,
    no_args_is_help=True,
)


def _fail(error: DomainError) -> None:
    console.print(f"❌ Startup failed: {error}", style="bold red")
    raise typer.Exit(code=1)


@app.command()
def serve(
    host: str | None = typer.Option(None, help="Bind address (default: HOST)"),
    port: int | None = typer.Option(None, help="Bind port (default: PORT)"),
    reload: bool = typer.Option(False, "--reload", help="Restart on code changes"),
) -> None:
    """Run the HTTP API with uvicorn."""
    app_settings = Settings()
    bind_host = host or app_settings.host
    bind_port = port or app_settings.port
    console.print(f"🚀 Serving {app_settings.app_name} on http://{bind_host}:{bind_port}")
    uvicorn.run(
        "newsdesk.main:app",
        host=bind_host,
        port=bind_port,
        reload=reload,
        log_config=None,  # logging is configured by the application lifespan
    )


@app.command()
def migrate() -> None:
    """Apply pending schema migrations and exit."""
    app_settings = Settings()
    setup_logging(app_settings=app_settings)
    try:
        pool = ConnectionPool.from_settings(app_settings)
    except StartupError as e:
        _fail(e)
        return

    try:
        with pool.connect() as connection:
            before = current_revision(connection)
            after = run_pending(connection)
    except (StartupError, PersistenceError) as e:
        _fail(e)
    finally:
        pool.dispose()

    if before == after:
        console.print(f"✅ Schema already at revision {after}", style="green")
    else:
        console.print(f"✅ Migrated from {before} to {after}", style="green")


@app.command()
def version() -> None:
    """Print the application version."""
    app_settings = Settings()
    console.print(f"{app_settings.app_name} {app_settings.version}")


def main() -> None:
    app()


if __name__ == "__main__":
    main()
