"""Operator CLI for the JWNET client."""

import asyncio
import json
import sys
from collections.abc import Coroutine
from pathlib import Path
from typing import Any

import click
from pydantic import BaseModel, ValidationError

from jwnet import __version__
from jwnet.client.client import JwnetClient
from jwnet.client.errors import JwnetApiError, JwnetConfigError
from jwnet.client.registry import get_jwnet_client
from jwnet.models.manifest import (
    ManifestInquiryRequest,
    ManifestRegisterRequest,
    ReservationRequest,
)
from jwnet.observability.logging import configure_logging


EXIT_API_ERROR = 1
EXIT_CONFIG_ERROR = 2


def _client() -> JwnetClient:
    """Get the shared client, exiting cleanly on configuration errors."""
    try:
        return get_jwnet_client()
    except (JwnetConfigError, ValidationError) as exc:
        click.echo(f"Configuration error: {exc}", err=True)
        sys.exit(EXIT_CONFIG_ERROR)


def _run(call: Coroutine[Any, Any, BaseModel]) -> None:
    """Run a client call and print its response as JSON."""
    try:
        response = asyncio.run(call)
    except JwnetApiError as exc:
        click.echo(json.dumps(exc.to_dict(), ensure_ascii=False, default=str), err=True)
        sys.exit(EXIT_API_ERROR)

    click.echo(
        response.model_dump_json(by_alias=True, exclude_none=True, indent=2)
    )


@click.group()
@click.version_option(version=__version__)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default="WARNING",
    show_default=True,
    help="Minimum log level.",
)
@click.option(
    "--json-logs/--console-logs",
    default=True,
    help="Render logs as JSON lines or for a terminal.",
)
def cli(log_level: str, json_logs: bool) -> None:
    """JWNET electronic manifest client."""
    configure_logging(level=log_level, json_format=json_logs)


@cli.command()
def health() -> None:
    """Check connectivity to the JWNET API."""
    client = _client()
    if asyncio.run(client.test_connection()):
        click.echo("JWNET API reachable")
        return
    click.echo("JWNET API unreachable", err=True)
    sys.exit(EXIT_API_ERROR)


@cli.command()
@click.argument("payload", type=click.Path(exists=True, path_type=Path))
def register(payload: Path) -> None:
    """Register the manifest described by a JSON PAYLOAD file."""
    try:
        request = ManifestRegisterRequest.model_validate_json(
            payload.read_text(encoding="utf-8")
        )
    except ValidationError as exc:
        msg = f"{payload} is not a valid manifest: {exc.error_count()} error(s)\n{exc}"
        raise click.BadParameter(msg, param_hint="PAYLOAD") from exc

    client = _client()
    _run(client.register_manifest(request))


@cli.command()
@click.option(
    "--count",
    type=click.IntRange(min=1),
    required=True,
    help="Number of manifest numbers to reserve.",
)
def reserve(count: int) -> None:
    """Reserve manifest numbers for the configured subscriber."""
    client = _client()
    request = ReservationRequest(
        subscriber_no=client.config.subscriber_no,
        public_confirm_no=client.config.public_confirm_no,
        count=count,
    )
    _run(client.reserve_numbers(request))


@cli.command()
@click.argument("manifest_no")
def inquire(manifest_no: str) -> None:
    """Look up manifest MANIFEST_NO."""
    client = _client()
    request = ManifestInquiryRequest(
        manifest_no=manifest_no,
        subscriber_no=client.config.subscriber_no,
    )
    _run(client.inquire_manifest(request))


def main() -> None:
    """Entry point for the jwnet command."""
    cli()
