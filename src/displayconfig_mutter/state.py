"""
Display state model.

Immutable snapshot of the monitors, their modes and the logical monitor
layout as reported by ``org.gnome.Mutter.DisplayConfig.GetCurrentState``.
A snapshot is fetched once per invocation and never mutated.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import Any, Dict, Iterable, Optional, Sequence, Tuple

logger = logging.getLogger(__name__)


class RefreshRateMode(Enum):
    """Refresh rate mode of a monitor mode. Absence on the wire means fixed."""
    FIXED = "fixed"
    VARIABLE = "variable"


class ColorMode(IntEnum):
    """Monitor color mode."""
    DEFAULT = 0
    BT2100 = 1  # HDR


class LayoutMode(IntEnum):
    """How logical monitors are laid out. Absence on the wire means logical."""
    LOGICAL = 1
    PHYSICAL = 2


class Transform(IntEnum):
    """Logical monitor rotation and flip."""
    NORMAL = 0
    ROTATE_90 = 1
    ROTATE_180 = 2
    ROTATE_270 = 3
    FLIPPED = 4
    ROTATE_90_FLIPPED = 5
    ROTATE_180_FLIPPED = 6
    ROTATE_270_FLIPPED = 7


@dataclass(frozen=True)
class MonitorId:
    """
    Identity of a physical monitor.

    Dataclass equality compares every field. Matching a monitor against a
    logical monitor uses :func:`same_monitor`, which compares connectors only.
    """
    connector: str  # e.g. "DP-1", "HDMI-2"
    vendor: str = ""
    product: str = ""
    serial: str = ""

    def __str__(self) -> str:
        return self.connector


def same_monitor(a: MonitorId, b: MonitorId) -> bool:
    """Whether two identities refer to the same monitor (by connector name)."""
    return a.connector == b.connector


@dataclass(frozen=True)
class ModeProperties:
    """Optional mode properties. ``None`` means the service did not send it."""
    is_current: Optional[bool] = None
    is_preferred: Optional[bool] = None
    is_interlaced: Optional[bool] = None
    refresh_rate_mode: Optional[RefreshRateMode] = None

    @property
    def current(self) -> bool:
        return bool(self.is_current)

    @property
    def variable(self) -> bool:
        return self.refresh_rate_mode == RefreshRateMode.VARIABLE


@dataclass(frozen=True)
class Mode:
    """One concrete resolution / refresh rate / refresh rate mode combination."""
    id: str
    width: int
    height: int
    refresh_rate: float
    preferred_scale: float = 1.0
    supported_scales: Tuple[float, ...] = ()
    properties: ModeProperties = field(default_factory=ModeProperties)

    @property
    def resolution(self) -> Tuple[int, int]:
        return (self.width, self.height)

    def __repr__(self) -> str:
        flag = " VRR" if self.properties.variable else ""
        return f"Mode({self.id}, {self.width}x{self.height}@{self.refresh_rate:.3f}{flag})"


@dataclass(frozen=True)
class MonitorProperties:
    """Optional monitor properties. Absence is kept as ``None``."""
    width_mm: Optional[int] = None
    height_mm: Optional[int] = None
    is_underscanning: Optional[bool] = None
    max_screen_size: Optional[Tuple[int, int]] = None
    is_builtin: Optional[bool] = None
    display_name: Optional[str] = None
    privacy_screen_state: Optional[Tuple[bool, bool]] = None
    min_refresh_rate: Optional[int] = None
    is_for_lease: Optional[bool] = None
    color_mode: Optional[ColorMode] = None
    supported_color_modes: Optional[Tuple[ColorMode, ...]] = None


@dataclass(frozen=True)
class Monitor:
    """A connected physical monitor and the modes it can be driven at."""
    id: MonitorId
    modes: Tuple[Mode, ...] = ()
    properties: MonitorProperties = field(default_factory=MonitorProperties)

    @property
    def connector(self) -> str:
        return self.id.connector

    @property
    def current_mode(self) -> Optional[Mode]:
        return next((mode for mode in self.modes if mode.properties.current), None)

    @property
    def supports_vrr(self) -> bool:
        return any(mode.properties.variable for mode in self.modes)

    @property
    def supports_hdr(self) -> bool:
        supported = self.properties.supported_color_modes
        return supported is not None and ColorMode.BT2100 in supported

    @property
    def hdr_enabled(self) -> bool:
        return self.properties.color_mode == ColorMode.BT2100


@dataclass(frozen=True)
class LogicalMonitor:
    """A placed, scaled region of the desktop shown on one or more monitors."""
    x: int
    y: int
    scale: float
    transform: Transform = Transform.NORMAL
    primary: bool = False
    monitors: Tuple[MonitorId, ...] = ()

    def contains(self, monitor_id: MonitorId) -> bool:
        """Whether this logical monitor displays the given monitor."""
        return any(same_monitor(m, monitor_id) for m in self.monitors)


@dataclass(frozen=True)
class GlobalProperties:
    """Display configuration wide properties."""
    layout_mode: Optional[LayoutMode] = None
    supports_changing_layout_mode: Optional[bool] = None
    global_scale_required: Optional[bool] = None


@dataclass(frozen=True)
class DisplayState:
    """
    Snapshot of the display configuration.

    ``serial`` must be echoed back unchanged when applying a configuration;
    the service rejects the request if the configuration changed since.
    """
    serial: int
    monitors: Tuple[Monitor, ...] = ()
    logical_monitors: Tuple[LogicalMonitor, ...] = ()
    properties: GlobalProperties = field(default_factory=GlobalProperties)

    def find_monitor(self, connector: str) -> Optional[Monitor]:
        """Find a monitor by exact, case-sensitive connector name."""
        return next((m for m in self.monitors if m.id.connector == connector), None)

    def find_logical_monitor(self, monitor_id: MonitorId) -> Optional[LogicalMonitor]:
        """Find the logical monitor displaying the given monitor, if any."""
        return next((lm for lm in self.logical_monitors if lm.contains(monitor_id)), None)

    @classmethod
    def from_dbus(cls, reply: Sequence[Any]) -> 'DisplayState':
        """
        Build a snapshot from an unpacked ``GetCurrentState`` reply.

        The reply has the D-Bus signature
        ``(ua((ssss)a(siiddada{sv})a{sv})a(iiduba(ssss)a{sv})a{sv})``
        unpacked to plain Python values. Unknown property keys are ignored.
        """
        serial, monitors, logical_monitors, properties = reply
        state = cls(
            serial=int(serial),
            monitors=tuple(_parse_monitor(m) for m in monitors),
            logical_monitors=tuple(_parse_logical_monitor(lm) for lm in logical_monitors),
            properties=_parse_global_properties(properties),
        )
        logger.debug(
            f"Parsed display state serial={state.serial}: "
            f"{len(state.monitors)} monitors, {len(state.logical_monitors)} logical monitors"
        )
        return state


# ============================================================================
# Wire parsing
# ============================================================================

def _parse_monitor_id(data: Sequence[Any]) -> MonitorId:
    connector, vendor, product, serial = data
    return MonitorId(connector=connector, vendor=vendor, product=product, serial=serial)


def _optional_enum(enum_type, value: Any):
    if value is None:
        return None
    try:
        return enum_type(value)
    except ValueError:
        logger.warning(f"Ignoring unknown {enum_type.__name__} value: {value!r}")
        return None


def _optional_pair(value: Any) -> Optional[tuple]:
    if value is None:
        return None
    return tuple(value)


def _parse_mode_properties(props: Dict[str, Any]) -> ModeProperties:
    return ModeProperties(
        is_current=props.get("is-current"),
        is_preferred=props.get("is-preferred"),
        is_interlaced=props.get("is-interlaced"),
        refresh_rate_mode=_optional_enum(RefreshRateMode, props.get("refresh-rate-mode")),
    )


def _parse_mode(data: Sequence[Any]) -> Mode:
    mode_id, width, height, refresh_rate, preferred_scale, supported_scales, props = data
    return Mode(
        id=mode_id,
        width=int(width),
        height=int(height),
        refresh_rate=float(refresh_rate),
        preferred_scale=float(preferred_scale),
        supported_scales=tuple(float(s) for s in supported_scales),
        properties=_parse_mode_properties(props),
    )


def _parse_color_modes(value: Optional[Iterable[int]]) -> Optional[Tuple[ColorMode, ...]]:
    if value is None:
        return None
    modes = (_optional_enum(ColorMode, v) for v in value)
    return tuple(m for m in modes if m is not None)


def _parse_monitor_properties(props: Dict[str, Any]) -> MonitorProperties:
    return MonitorProperties(
        width_mm=props.get("width-mm"),
        height_mm=props.get("height-mm"),
        is_underscanning=props.get("is-underscanning"),
        max_screen_size=_optional_pair(props.get("max-screen-size")),
        is_builtin=props.get("is-builtin"),
        display_name=props.get("display-name"),
        privacy_screen_state=_optional_pair(props.get("privacy-screen-state")),
        min_refresh_rate=props.get("min-refresh-rate"),
        is_for_lease=props.get("is-for-lease"),
        color_mode=_optional_enum(ColorMode, props.get("color-mode")),
        supported_color_modes=_parse_color_modes(props.get("supported-color-modes")),
    )


def _parse_monitor(data: Sequence[Any]) -> Monitor:
    monitor_id, modes, props = data
    return Monitor(
        id=_parse_monitor_id(monitor_id),
        modes=tuple(_parse_mode(m) for m in modes),
        properties=_parse_monitor_properties(props),
    )


def _parse_logical_monitor(data: Sequence[Any]) -> LogicalMonitor:
    # Logical monitor properties are currently always empty
    x, y, scale, transform, primary, monitors, _props = data
    parsed_transform = _optional_enum(Transform, transform)
    return LogicalMonitor(
        x=int(x),
        y=int(y),
        scale=float(scale),
        transform=Transform.NORMAL if parsed_transform is None else parsed_transform,
        primary=bool(primary),
        monitors=tuple(_parse_monitor_id(m) for m in monitors),
    )


def _parse_global_properties(props: Dict[str, Any]) -> GlobalProperties:
    return GlobalProperties(
        layout_mode=_optional_enum(LayoutMode, props.get("layout-mode")),
        supports_changing_layout_mode=props.get("supports-changing-layout-mode"),
        global_scale_required=props.get("global-scale-required"),
    )
