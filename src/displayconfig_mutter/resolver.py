"""
Configuration resolver.

Turns a partial request (resolution, refresh rate, variable refresh rate,
scaling, HDR) into one concrete logical monitor update for a single
connector, validated against the modes the monitor actually offers.

The resolver is a pure function of its inputs: it performs no I/O and
never modifies the snapshot it is given.

Usage:
    state = client.fetch_state()
    request = resolve(state, "DP-1", Intent(max_refresh_rate=True, vrr=True))
"""

import logging
import math
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Tuple

from .exceptions import (
    HdrUnsupportedError,
    InternalInvariantError,
    InvalidIntentError,
    MonitorNotActiveError,
    NoCurrentModeError,
    NoMatchingModeError,
    NoMatchingScaleError,
    UnknownConnectorError,
    VrrUnavailableError,
)
from .ordering import rounded_refresh_rate, same_rate, sort_modes_descending
from .state import ColorMode, DisplayState, LogicalMonitor, Mode, Monitor, Transform

logger = logging.getLogger(__name__)

# Scales are matched on a grid of quarter steps
SCALE_STEPS_PER_UNIT = 4


@dataclass(frozen=True)
class Intent:
    """
    Requested change for one monitor. Unset fields keep the current value.

    ``resolution`` and ``max_resolution`` are mutually exclusive, as are
    ``refresh_rate`` and ``max_refresh_rate``.
    """
    resolution: Optional[Tuple[int, int]] = None
    max_resolution: bool = False
    refresh_rate: Optional[float] = None
    max_refresh_rate: bool = False
    vrr: Optional[bool] = None
    scaling_percent: Optional[int] = None
    hdr: Optional[bool] = None

    def __post_init__(self) -> None:
        if self.resolution is not None and self.max_resolution:
            raise InvalidIntentError("an explicit resolution cannot be combined with max resolution")
        if self.refresh_rate is not None and self.max_refresh_rate:
            raise InvalidIntentError("an explicit refresh rate cannot be combined with max refresh rate")
        if self.refresh_rate is not None and not (math.isfinite(self.refresh_rate) and self.refresh_rate > 0):
            raise InvalidIntentError(f"refresh rate must be a positive number of Hz, got {self.refresh_rate}")
        if self.scaling_percent is not None and self.scaling_percent <= 0:
            raise InvalidIntentError(f"scaling must be a positive percentage, got {self.scaling_percent}")


@dataclass(frozen=True)
class MonitorUpdate:
    """Monitor entry of an ``ApplyMonitorsConfig`` logical monitor."""
    connector: str
    mode_id: str
    color_mode: Optional[ColorMode] = None  # None leaves the color mode as is
    underscanning: Optional[bool] = None

    def properties(self) -> Dict[str, Any]:
        """Monitor properties keyed by their D-Bus names, unset values omitted."""
        props: Dict[str, Any] = {}
        if self.underscanning is not None:
            props["underscanning"] = self.underscanning
        if self.color_mode is not None:
            props["color-mode"] = int(self.color_mode)
        return props

    def to_dbus(self) -> tuple:
        return (self.connector, self.mode_id, self.properties())


@dataclass(frozen=True)
class LogicalMonitorUpdate:
    """Logical monitor entry of an ``ApplyMonitorsConfig`` call."""
    x: int
    y: int
    scale: float
    transform: Transform
    primary: bool
    monitors: Tuple[MonitorUpdate, ...]

    def to_dbus(self) -> tuple:
        """Plain Python value matching the ``(iiduba(ssa{sv}))`` signature."""
        return (
            self.x,
            self.y,
            self.scale,
            int(self.transform),
            self.primary,
            [monitor.to_dbus() for monitor in self.monitors],
        )


@dataclass(frozen=True)
class ApplyRequest:
    """Resolver output: the update plus the serial of the snapshot it came from."""
    serial: int
    logical_monitor: LogicalMonitorUpdate
    mode: Mode

    @property
    def logical_monitors(self) -> List[LogicalMonitorUpdate]:
        return [self.logical_monitor]

    def describe(self) -> str:
        """One-line human readable summary."""
        update = self.logical_monitor.monitors[0]
        parts = [
            update.connector,
            f"{self.mode.width}x{self.mode.height}@{self.mode.refresh_rate:.2f}Hz",
            f"scale {self.logical_monitor.scale * 100:g}%",
        ]
        if self.mode.properties.variable:
            parts.append("VRR")
        if update.color_mode == ColorMode.BT2100:
            parts.append("HDR")
        return " ".join(parts)


def resolve(state: DisplayState, connector: str, intent: Intent) -> ApplyRequest:
    """
    Resolve a requested change against a display state snapshot.

    Args:
        state: Snapshot fetched from the display configuration service
        connector: Connector name of the monitor to configure (e.g. "DP-1")
        intent: Requested change

    Returns:
        ApplyRequest carrying the snapshot serial and one logical monitor update

    Raises:
        UnknownConnectorError: No monitor with this connector
        MonitorNotActiveError: Monitor is not part of any logical monitor
        NoCurrentModeError: Monitor reports no current mode
        NoMatchingModeError: No mode exists for the target resolution
        VrrUnavailableError: VRR requested but no variable mode matches
        NoMatchingScaleError: No supported scale matches the requested scale
        HdrUnsupportedError: HDR requested but not supported
        InternalInvariantError: No fixed mode exists for a matched rate
    """
    monitor = state.find_monitor(connector)
    if monitor is None:
        raise UnknownConnectorError(
            f'could not find a display with "{connector}" connector name', connector
        )

    logical_monitor = state.find_logical_monitor(monitor.id)
    if logical_monitor is None:
        raise MonitorNotActiveError(
            f'display "{connector}" is not part of any logical monitor; enable it before configuring it',
            connector,
        )

    candidates = sort_modes_descending(monitor.modes)
    current_mode = next((mode for mode in candidates if mode.properties.current), None)
    if current_mode is None:
        raise NoCurrentModeError(
            f'could not find the current mode of "{connector}"', connector
        )
    logger.debug(f"{connector}: current mode {current_mode!r}, {len(candidates)} modes available")

    width, height = _select_resolution(candidates, current_mode, intent)
    rate_mode = _select_refresh_rate(candidates, (width, height), current_mode, intent, connector)
    mode = _select_refresh_rate_mode(candidates, rate_mode, intent.vrr, connector)
    logger.debug(f"{connector}: selected mode {mode!r}")

    scale = _select_scale(mode, logical_monitor, intent.scaling_percent, connector)
    color_mode = _select_color_mode(monitor, intent.hdr)
    logger.debug(f"{connector}: scale {scale}, color mode {color_mode!r}")

    update = LogicalMonitorUpdate(
        x=logical_monitor.x,
        y=logical_monitor.y,
        scale=scale,
        transform=logical_monitor.transform,
        primary=logical_monitor.primary,
        monitors=(
            MonitorUpdate(
                connector=monitor.id.connector,
                mode_id=mode.id,
                color_mode=color_mode,
            ),
        ),
    )
    return ApplyRequest(serial=state.serial, logical_monitor=update, mode=mode)


# ============================================================================
# Resolution steps
# ============================================================================

def _select_resolution(
    candidates: Sequence[Mode], current_mode: Mode, intent: Intent
) -> Tuple[int, int]:
    """Target resolution. An explicit resolution is checked by the refresh rate lookup."""
    if intent.max_resolution:
        return candidates[0].resolution
    if intent.resolution is not None:
        return tuple(intent.resolution)
    return current_mode.resolution


def _select_refresh_rate(
    candidates: Sequence[Mode],
    resolution: Tuple[int, int],
    current_mode: Mode,
    intent: Intent,
    connector: str,
) -> Mode:
    """
    Pick the mode whose refresh rate best matches the request at a resolution.

    With max_refresh_rate the greatest mode wins. Otherwise the refresh rate
    closest to the requested (or current) rate wins; equally close rates
    prefer the higher one, then fixed over variable.
    """
    width, height = resolution
    at_resolution = [mode for mode in candidates if mode.resolution == resolution]
    if not at_resolution:
        raise NoMatchingModeError(
            f'"{connector}" has no mode with {width}x{height} resolution', connector
        )

    if intent.max_refresh_rate:
        return max(
            at_resolution,
            key=lambda m: (rounded_refresh_rate(m), m.refresh_rate, not m.properties.variable),
        )

    target = intent.refresh_rate if intent.refresh_rate is not None else current_mode.refresh_rate
    return min(
        at_resolution,
        key=lambda m: (abs(m.refresh_rate - target), -m.refresh_rate, m.properties.variable),
    )


def _select_refresh_rate_mode(
    candidates: Sequence[Mode], rate_mode: Mode, vrr: Optional[bool], connector: str
) -> Mode:
    """
    Choose between the fixed and the variable variant of a matched rate.

    A monitor offers at most one fixed and one variable mode per resolution
    and rounded refresh rate, so toggling VRR is a matter of picking the
    other variant.
    """
    same = [mode for mode in candidates if same_rate(mode, rate_mode)]
    if vrr:
        variants = [mode for mode in same if mode.properties.variable]
        if not variants:
            raise VrrUnavailableError(
                f'VRR is not available on "{connector}" at '
                f"{rate_mode.width}x{rate_mode.height}@{rounded_refresh_rate(rate_mode)}Hz",
                connector,
            )
    else:
        variants = [mode for mode in same if not mode.properties.variable]
        if not variants:
            raise InternalInvariantError(
                f'"{connector}" has no fixed refresh rate mode matching {rate_mode!r}'
            )
    return min(variants, key=lambda m: abs(m.refresh_rate - rate_mode.refresh_rate))


def quantize_scale(value: float) -> int:
    """Scale on the quarter step grid, rounded half to even (1.125 -> 4, 1.375 -> 6)."""
    return round(value * SCALE_STEPS_PER_UNIT)


def match_scale(requested: float, supported_scales: Sequence[float]) -> Optional[float]:
    """
    Find the supported scale matching a requested scale.

    The nearest supported scale is accepted only when it falls into the same
    quarter step as the requested one. Equally near scales prefer the one in
    the requested quarter step, then the higher.

    Returns:
        The matching supported scale, or None
    """
    if not supported_scales:
        return None
    step = quantize_scale(requested)
    nearest = min(
        supported_scales,
        key=lambda s: (abs(s - requested), quantize_scale(s) != step, -s),
    )
    if quantize_scale(nearest) != step:
        return None
    return nearest


def _select_scale(
    mode: Mode,
    logical_monitor: LogicalMonitor,
    scaling_percent: Optional[int],
    connector: str,
) -> float:
    requested = scaling_percent / 100.0 if scaling_percent is not None else logical_monitor.scale
    scale = match_scale(requested, mode.supported_scales)
    if scale is None:
        percent = requested * 100
        supported = ", ".join(f"{s * 100:g}%" for s in mode.supported_scales) or "none"
        raise NoMatchingScaleError(
            f'scaling {percent:g}% is not supported by "{connector}" at '
            f"{mode.width}x{mode.height} (supported: {supported})",
            connector,
            requested_percent=percent,
        )
    return scale


def _select_color_mode(monitor: Monitor, hdr: Optional[bool]) -> Optional[ColorMode]:
    """
    Target color mode, or None to leave it unchanged.

    The color mode is omitted when the monitor does not advertise any
    supported color modes. Only an explicit HDR request is checked against
    such a monitor.
    """
    supported = monitor.properties.supported_color_modes
    if hdr is None and supported is None:
        return None

    if hdr is not None:
        target = ColorMode.BT2100 if hdr else ColorMode.DEFAULT
    elif monitor.properties.color_mode is not None:
        target = monitor.properties.color_mode
    else:
        target = ColorMode.DEFAULT

    if target == ColorMode.BT2100 and not monitor.supports_hdr:
        raise HdrUnsupportedError(
            f'display "{monitor.connector}" does not support HDR', monitor.connector
        )

    if supported is None:
        return None
    return target
