"""
Configuration package for displayconfig-mutter.
"""

from .main import Config
from .dataclasses import (
    DBusConfig,
    LoggingConfig,
    OutputConfig,
)

__all__ = [
    "Config",
    "DBusConfig",
    "LoggingConfig",
    "OutputConfig",
]
