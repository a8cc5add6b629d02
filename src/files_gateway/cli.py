# cli.py
import logging

import click
import uvicorn
from pydantic import ValidationError

from files_gateway.main import create_app
from files_gateway.settings import Settings

logger = logging.getLogger(__name__)


def _load_settings() -> Settings:
    try:
        return Settings()
    except ValidationError as e:
        raise click.ClickException(f"Invalid configuration:\n{e}") from e


@click.group()
def cli():
    """Files Gateway commands"""
    pass


@cli.command()
@click.option("--host", default=None, help="Interface to bind (overrides HOST)")
@click.option("--port", type=int, default=None, help="Port to listen on (overrides PORT)")
def serve(host, port):
    """Run the gateway under uvicorn"""
    settings = _load_settings()
    host = host or settings.host
    port = port or settings.port

    app = create_app(settings)
    logger.info(f"Server is running on port {port}")
    uvicorn.run(app, host=host, port=port, log_level=settings.log_level.lower())


@cli.command()
def show_config():
    """Show current configuration"""
    settings = _load_settings()
    values = settings.masked()

    click.echo("Current Configuration:")
    click.echo(f"  Listen: {values['host']}:{values['port']}")
    click.echo(f"  AWS Region: {values['aws_region']}")
    click.echo(f"  AWS Endpoint: {values['aws_endpoint_url']}")
    click.echo(f"  AWS Access Key ID: {values['aws_access_key_id']}")
    click.echo(f"  AWS Secret Access Key: {values['aws_secret_access_key']}")
    click.echo(f"  S3 Bucket: {values['s3_bucket_name']}")
    click.echo(f"  Public Base URL: {values['public_base_url']}")
    click.echo(f"  Max Upload Files: {values['max_upload_files']}")
    click.echo(f"  Download Chunk Size: {values['download_chunk_size']}")
    click.echo(f"  Log Level: {values['log_level']}")


if __name__ == "__main__":
    cli()
