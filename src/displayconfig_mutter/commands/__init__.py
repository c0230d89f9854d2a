"""CLI commands module."""

from .listing import list_monitors, list_modes
from .configure import set_config
from .init import init_config

__all__ = [
    "list_monitors",
    "list_modes",
    "set_config",
    "init_config",
]
