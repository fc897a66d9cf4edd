"""JWNET settings loading."""

from .app import JwnetSettings


__all__ = ["JwnetSettings"]
