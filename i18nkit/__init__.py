"""Extraction of translatable PHP messages into a message table."""

__version__ = "0.1.0"
