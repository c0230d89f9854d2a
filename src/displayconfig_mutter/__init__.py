"""
displayconfig-mutter - Monitor configuration for GNOME sessions.

Inspect and change resolution, refresh rate, variable refresh rate,
scaling and HDR of a monitor through org.gnome.Mutter.DisplayConfig.
"""

__version__ = "0.1.0"

from .state import (
    ColorMode,
    DisplayState,
    LayoutMode,
    LogicalMonitor,
    Mode,
    Monitor,
    MonitorId,
    RefreshRateMode,
    Transform,
)
from .ordering import mode_sort_key, same_mode, sort_modes_descending
from .resolver import ApplyRequest, Intent, resolve
from .apply import ApplyTransaction, Method, apply_config
from .mutter import DisplayConfigClient

__all__ = [
    "ColorMode",
    "DisplayState",
    "LayoutMode",
    "LogicalMonitor",
    "Mode",
    "Monitor",
    "MonitorId",
    "RefreshRateMode",
    "Transform",
    "mode_sort_key",
    "same_mode",
    "sort_modes_descending",
    "ApplyRequest",
    "Intent",
    "resolve",
    "ApplyTransaction",
    "Method",
    "apply_config",
    "DisplayConfigClient",
]
