"""Mutter DisplayConfig D-Bus integration module."""

from .client import DisplayConfigClient

__all__ = [
    "DisplayConfigClient",
]
