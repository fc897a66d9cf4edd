"""Command-line interface for the JWNET client."""

from jwnet.cli.main import cli, main


__all__ = ["cli", "main"]
