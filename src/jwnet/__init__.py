"""Resilient client for the JWNET electronic manifest network."""

__version__ = "0.1.0"
