"""
Courier command line interface.

Usage:
    courier serve --addr :8842
    courier status --url https://courier.example.com
    courier store-password --url http://localhost:8842 --id 1234 --password secret
    courier store-certificate --url http://localhost:8842 --id 1234 --file cert.p12
    courier secrets-get --project my-project --name certificate-1234 --out cert.p12
"""

import asyncio
import base64
import sys
from pathlib import Path

import typer

from courier import __version__
from courier.client import ClientError, CourierClient
from courier.config import ConfigurationError, get_settings
from courier.models import StoreCertificateRequest, StorePasswordRequest

DEFAULT_URL = "http://localhost:8842"

app = typer.Typer(
    name="courier",
    help="Standalone certificate delivery webhook service",
    no_args_is_help=True,
)


@app.command()
def version() -> None:
    """Print the courier version."""
    typer.echo(__version__)


@app.command()
def serve(
    addr: str = typer.Option(None, "--addr", "-a", help="Address to bind on (host:port)"),
) -> None:
    """Run the courier server."""
    from courier.main import serve as run_server

    settings = get_settings()
    if addr:
        settings = settings.model_copy(update={"bind_addr": addr})

    try:
        run_server(settings)
    except ConfigurationError as err:
        typer.echo(f"✗ Error: {err}", err=True)
        raise typer.Exit(1) from err


@app.command()
def status(
    url: str = typer.Option(DEFAULT_URL, "--url", "-u", help="Courier endpoint"),
) -> None:
    """Print the server status."""

    async def run() -> str:
        async with CourierClient(url) as client:
            reply = await client.status()
        return reply.model_dump_json(indent=2)

    typer.echo(_run_client(run))


@app.command("store-password")
def store_password(
    url: str = typer.Option(DEFAULT_URL, "--url", "-u", help="Courier endpoint"),
    cert_id: str = typer.Option(..., "--id", "-i", help="Certificate id"),
    password: str = typer.Option(None, "--password", "-p", help="PKCS#12 password"),
    password_file: Path = typer.Option(
        None, "--file", "-f", exists=True, dir_okay=False, help="Read the password from a file"
    ),
) -> None:
    """Store the PKCS#12 password for a certificate."""
    if password_file is not None:
        password = password_file.read_text().strip()

    if not password:
        typer.echo("Error: Specify --password or --file", err=True)
        raise typer.Exit(1)

    async def run() -> None:
        async with CourierClient(url) as client:
            await client.store_certificate_password(
                StorePasswordRequest(id=cert_id, password=password)
            )

    _run_client(run)
    typer.echo(f"✓ Stored password for {cert_id}")


@app.command("store-certificate")
def store_certificate(
    url: str = typer.Option(DEFAULT_URL, "--url", "-u", help="Courier endpoint"),
    cert_id: str = typer.Option(..., "--id", "-i", help="Certificate id"),
    cert_file: Path = typer.Option(
        ..., "--file", "-f", exists=True, dir_okay=False, help="PKCS#12 certificate file"
    ),
    no_decrypt: bool = typer.Option(
        False, "--no-decrypt", help="Store the certificate without decrypting it"
    ),
) -> None:
    """Store a PKCS#12 certificate."""
    request = StoreCertificateRequest(
        id=cert_id,
        no_decrypt=no_decrypt,
        base64_certificate=base64.b64encode(cert_file.read_bytes()).decode("ascii"),
    )

    async def run() -> None:
        async with CourierClient(url) as client:
            await client.store_certificate(request)

    _run_client(run)
    typer.echo(f"✓ Stored certificate for {cert_id}")


@app.command("secrets-get")
def secrets_get(
    project: str = typer.Option(..., "--project", help="GCP project"),
    name: str = typer.Option(..., "--name", "-n", help="Secret name, e.g. certificate-1234"),
    credentials: str = typer.Option(
        None, "--credentials", "-c", help="Service account credentials file"
    ),
    out: Path = typer.Option(None, "--out", "-o", help="Write the payload to a file"),
) -> None:
    """Fetch the latest version of a secret from GCP Secret Manager."""
    from courier.infrastructure.implementations.gcloud import (
        SecretManagerClient,
        SecretManagerError,
    )

    async def run() -> bytes:
        client = SecretManagerClient(project=project, credentials=credentials)
        try:
            return await client.get_latest_version(name)
        finally:
            await client.close()

    try:
        payload = asyncio.run(run())
    except SecretManagerError as err:
        typer.echo(f"✗ Error: {err}", err=True)
        raise typer.Exit(1) from err

    if out is not None:
        out.write_bytes(payload)
        typer.echo(f"✓ Wrote {len(payload)} bytes to {out}")
    else:
        sys.stdout.buffer.write(payload)


def _run_client(run):
    try:
        return asyncio.run(run())
    except ClientError as err:
        typer.echo(f"✗ Error: {err}", err=True)
        raise typer.Exit(1) from err


if __name__ == "__main__":
    app()
