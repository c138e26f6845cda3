"""Server management commands."""

import click
import uvicorn

from minio_file_service.cli.utils import info
from minio_file_service.core.settings import get_app_settings


@click.group(name="server")
def server() -> None:
    """Server management commands."""


@server.command()
@click.option(
    "--host",
    default=None,
    help="Host to bind (default: APP_HOST or 0.0.0.0)",
)
@click.option(
    "--port",
    type=int,
    default=None,
    help="Port to bind (default: APP_PORT or 8000)",
)
@click.option(
    "--reload/--no-reload",
    default=False,
    help="Enable auto-reload on code changes",
)
def run(host: str | None, port: int | None, reload: bool) -> None:
    """Run the HTTP API with uvicorn.

    Examples:
        minio-file server run
        minio-file server run --port 9000 --reload
    """
    settings = get_app_settings()
    bind_host = host or settings.host
    bind_port = port or settings.port

    info(f"Starting uvicorn on {bind_host}:{bind_port}...")
    uvicorn.run(
        "minio_file_service.app.main:app",
        host=bind_host,
        port=bind_port,
        reload=reload,
        log_config=None,
    )
