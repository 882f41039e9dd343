"""``vidtube`` command line: run the API server and prepare the database."""

import asyncio

import click

from vidtube import __version__
from vidtube.core.config import get_settings
from vidtube.core.logging import configure_logging, get_logger

logger = get_logger(__name__)

APP_IMPORT_PATH = "vidtube.infrastructure.api.app:app"


@click.group()
@click.version_option(version=__version__, prog_name="vidtube")
def cli() -> None:
    """VidTube backend.

    Settings come from VIDTUBE_* environment variables or a .env file.
    """


@cli.command()
@click.option("--host", default=None, help="Bind address [default: VIDTUBE_HOST]")
@click.option("--port", type=int, default=None, help="Bind port [default: VIDTUBE_PORT]")
@click.option("--workers", type=int, default=None, help="Worker processes [default: VIDTUBE_WORKERS]")
@click.option(
    "--reload/--no-reload",
    default=None,
    help="Restart on code changes [default: on in development]",
)
def serve(host: str | None, port: int | None, workers: int | None, reload: bool | None) -> None:
    """Run the API with uvicorn."""
    import uvicorn

    settings = get_settings()
    configure_logging(settings)

    if reload is None:
        reload = settings.is_development
    # uvicorn ignores workers when reloading
    workers = 1 if reload else (workers or settings.workers)
    host = host or settings.host
    port = port or settings.port

    logger.info("Launching uvicorn", host=host, port=port, workers=workers, reload=reload)
    uvicorn.run(
        APP_IMPORT_PATH,
        host=host,
        port=port,
        workers=workers,
        reload=reload,
        log_level=settings.log_level.lower(),
    )


@cli.command("init-db")
@click.option("--force", is_flag=True, help="Do not ask for confirmation")
def init_db(force: bool) -> None:
    """Create the users, videos, subscriptions and watch history tables."""
    from vidtube.infrastructure.persistence.database import (
        close_database,
        get_db_manager,
        init_database,
    )

    configure_logging(get_settings())
    if not force:
        click.confirm("Create missing database tables?", abort=True)

    async def run() -> None:
        try:
            await init_database()
            await get_db_manager().create_tables()
        finally:
            await close_database()

    asyncio.run(run())
    click.echo("Database initialized successfully.")


def main() -> None:
    """Console-script and ``python -m vidtube`` entry point."""
    cli()
