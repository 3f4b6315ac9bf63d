"""Scoped, signed pub/sub channels for pushing model changes to browser clients."""

__version__ = "0.1.0"
