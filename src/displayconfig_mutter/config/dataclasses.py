"""
Configuration dataclasses for displayconfig-mutter.
"""

from dataclasses import dataclass


@dataclass
class DBusConfig:
    """
    D-Bus connection settings.

    The display configuration service normally lives on the session bus.
    A timeout of -1 uses the D-Bus library default.
    """
    bus: str = "session"
    timeout_ms: int = -1


@dataclass
class LoggingConfig:
    """Logging configuration."""
    level: str = "WARNING"


@dataclass
class OutputConfig:
    """Output settings for listing commands."""
    format: str = "table"  # table or json
