"""Observability module for logging."""

from jwnet.observability.logging import configure_logging


__all__ = [
    "configure_logging",
]
