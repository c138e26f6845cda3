"""Main CLI entry point for minio-file management commands."""

import click

from minio_file_service import __version__
from minio_file_service.cli.commands import server, storage
from minio_file_service.infra.logging.config import setup_logging


@click.group()
@click.version_option(version=__version__, prog_name="minio-file")
@click.pass_context
def cli(ctx: click.Context) -> None:
    """MinIO file service CLI.

    \b
    Command Groups:
      storage    Upload, download, delete and presign files
      server     Run the HTTP API

    \b
    Quick Start:
      minio-file storage info               # Show configuration
      minio-file storage init-bucket        # Create bucket and policy
      minio-file storage upload ./shirt.jpg
      minio-file server run --reload
    """
    ctx.ensure_object(dict)
    setup_logging()


cli.add_command(storage.storage)
cli.add_command(server.server)


if __name__ == "__main__":
    cli()
