"""Test configuration and fixtures.

Display states are built directly from the model dataclasses; raw D-Bus
replies are provided for the parsing and client tests.
"""

from typing import Callable, Optional, Sequence, Tuple
from unittest.mock import Mock

import pytest

from displayconfig_mutter.mutter import DisplayConfigClient
from displayconfig_mutter.state import (
    ColorMode,
    DisplayState,
    LogicalMonitor,
    Mode,
    ModeProperties,
    Monitor,
    MonitorId,
    MonitorProperties,
    RefreshRateMode,
    Transform,
)


def _make_mode(
    width: int,
    height: int,
    refresh_rate: float,
    *,
    current: bool = False,
    variable: bool = False,
    scales: Sequence[float] = (1.0,),
    mode_id: Optional[str] = None,
) -> Mode:
    suffix = "+vrr" if variable else ""
    return Mode(
        id=mode_id or f"{width}x{height}@{refresh_rate:.3f}{suffix}",
        width=width,
        height=height,
        refresh_rate=refresh_rate,
        preferred_scale=scales[0] if scales else 1.0,
        supported_scales=tuple(scales),
        properties=ModeProperties(
            is_current=True if current else None,
            refresh_rate_mode=RefreshRateMode.VARIABLE if variable else None,
        ),
    )


@pytest.fixture
def make_mode() -> Callable[..., Mode]:
    """Factory for modes: make_mode(1920, 1080, 60.0, current=True, scales=[1.0])."""
    return _make_mode


@pytest.fixture
def make_state() -> Callable[..., DisplayState]:
    """
    Factory for a single-monitor display state.

    make_state(modes, connector="DP-1", scale=1.0, active=True, ...)
    """
    def factory(
        modes: Sequence[Mode],
        connector: str = "DP-1",
        scale: float = 1.0,
        active: bool = True,
        color_mode: Optional[ColorMode] = None,
        supported_color_modes: Optional[Tuple[ColorMode, ...]] = None,
        serial: int = 7,
    ) -> DisplayState:
        monitor_id = MonitorId(connector, "DEL", "DELL U2720Q", "ABC123")
        monitor = Monitor(
            id=monitor_id,
            modes=tuple(modes),
            properties=MonitorProperties(
                color_mode=color_mode,
                supported_color_modes=supported_color_modes,
            ),
        )
        logical_monitors = ()
        if active:
            logical_monitors = (
                LogicalMonitor(
                    x=0,
                    y=0,
                    scale=scale,
                    transform=Transform.NORMAL,
                    primary=True,
                    monitors=(monitor_id,),
                ),
            )
        return DisplayState(serial=serial, monitors=(monitor,), logical_monitors=logical_monitors)

    return factory


@pytest.fixture
def dp1_state() -> DisplayState:
    """
    DP-1 at 1920x1080@60 (scales 1.0, 1.25) that also offers 3840x2160@60
    (scales 1.0, 1.5, 2.0), plus a connected but disabled HDMI-1.
    """
    dp1 = MonitorId("DP-1", "GSM", "LG HDR 4K", "0x0001")
    hdmi1 = MonitorId("HDMI-1", "SAM", "S24E450", "H4ZK")
    return DisplayState(
        serial=42,
        monitors=(
            Monitor(
                id=dp1,
                modes=(
                    _make_mode(1920, 1080, 60.0, current=True, scales=[1.0, 1.25]),
                    _make_mode(3840, 2160, 60.0, scales=[1.0, 1.5, 2.0]),
                ),
                properties=MonitorProperties(
                    color_mode=ColorMode.DEFAULT,
                    supported_color_modes=(ColorMode.DEFAULT,),
                ),
            ),
            Monitor(
                id=hdmi1,
                modes=(_make_mode(1920, 1080, 60.0, scales=[1.0]),),
            ),
        ),
        logical_monitors=(
            LogicalMonitor(
                x=0, y=0, scale=1.0, transform=Transform.NORMAL, primary=True, monitors=(dp1,)
            ),
        ),
    )


@pytest.fixture
def gaming_state() -> DisplayState:
    """
    DP-2: 2560x1440 panel with fixed and variable variants at 144 and 120 Hz,
    HDR capable, placed right of another output and rotated.
    """
    dp2 = MonitorId("DP-2", "AUS", "PG279Q", "#ASOBNF")
    scales = [1.0, 1.25, 1.5, 1.7475728, 2.0]
    return DisplayState(
        serial=1001,
        monitors=(
            Monitor(
                id=dp2,
                modes=(
                    _make_mode(2560, 1440, 59.951, scales=scales),
                    _make_mode(2560, 1440, 143.998, current=True, scales=scales),
                    _make_mode(2560, 1440, 143.998, variable=True, scales=scales),
                    _make_mode(2560, 1440, 119.998, scales=scales),
                    _make_mode(2560, 1440, 119.998, variable=True, scales=scales),
                    _make_mode(1920, 1080, 60.0, scales=[1.0, 1.25]),
                    _make_mode(1920, 1080, 59.94, scales=[1.0, 1.25]),
                ),
                properties=MonitorProperties(
                    color_mode=ColorMode.DEFAULT,
                    supported_color_modes=(ColorMode.DEFAULT, ColorMode.BT2100),
                ),
            ),
        ),
        logical_monitors=(
            LogicalMonitor(
                x=1920, y=0, scale=1.25, transform=Transform.ROTATE_90, primary=False, monitors=(dp2,)
            ),
        ),
    )


@pytest.fixture
def raw_state_reply() -> tuple:
    """GetCurrentState reply as unpacked by PyGObject."""
    return (
        12,
        [
            (
                ("eDP-1", "BOE", "0x095f", "0x00000000"),
                [
                    ("2256x1504@59.999", 2256, 1504, 59.999, 1.5, [1.0, 1.25, 1.5, 1.75, 2.0],
                     {"is-current": True, "is-preferred": True}),
                    ("1920x1200@59.950", 1920, 1200, 59.95, 1.0, [1.0, 1.25],
                     {}),
                ],
                {
                    "is-builtin": True,
                    "display-name": "Built-in display",
                    "width-mm": 285,
                    "height-mm": 190,
                    "min-refresh-rate": 40,
                },
            ),
            (
                ("DP-3", "GSM", "LG ULTRAGEAR", "112NTVS1X345"),
                [
                    ("2560x1440@143.912", 2560, 1440, 143.912, 1.0, [1.0, 1.25, 1.5],
                     {"is-current": True, "refresh-rate-mode": "fixed"}),
                    ("2560x1440@143.912+vrr", 2560, 1440, 143.912, 1.0, [1.0, 1.25, 1.5],
                     {"refresh-rate-mode": "variable"}),
                ],
                {
                    "color-mode": 0,
                    "supported-color-modes": [0, 1],
                    "max-screen-size": (8192, 8192),
                    "privacy-screen-state": (False, False),
                },
            ),
        ],
        [
            (0, 0, 1.5, 0, True, [("eDP-1", "BOE", "0x095f", "0x00000000")], {}),
            (1504, 0, 1.0, 1, False, [("DP-3", "GSM", "LG ULTRAGEAR", "112NTVS1X345")], {}),
        ],
        {"layout-mode": 1, "supports-changing-layout-mode": True},
    )


@pytest.fixture
def mock_transport(raw_state_reply: tuple) -> Mock:
    """Transport stub that serves raw_state_reply and accepts every apply."""
    transport = Mock()
    transport.get_current_state.return_value = raw_state_reply
    transport.apply_monitors_config.return_value = None
    transport.apply_allowed.return_value = True
    return transport


@pytest.fixture
def client(mock_transport: Mock) -> DisplayConfigClient:
    """DisplayConfigClient backed by mock_transport."""
    return DisplayConfigClient(mock_transport)
