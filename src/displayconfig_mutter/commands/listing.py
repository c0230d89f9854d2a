"""List commands: connected monitors, or the modes of one monitor."""

import json
from typing import Any, Dict, List, Sequence

from ..exceptions import UnknownConnectorError
from ..ordering import rounded_refresh_rate
from ..state import DisplayState, Monitor

MONITOR_COLUMNS = [
    ("connector", "Connector"),
    ("vendor", "Vendor"),
    ("product", "Product name"),
    ("resolution", "Resolution"),
    ("refresh_rate", "Refresh rate"),
    ("scaling", "Scaling"),
    ("vrr", "VRR"),
    ("hdr", "HDR"),
]


def _feature_status(supported: bool, enabled: bool) -> str:
    if supported and enabled:
        return "Enabled"
    if supported:
        return "Supported"
    return "No"


def monitor_row(state: DisplayState, monitor: Monitor) -> Dict[str, str]:
    """Summary of one monitor. Inactive monitors have an empty scaling column."""
    logical_monitor = state.find_logical_monitor(monitor.id)
    scaling = f"{logical_monitor.scale * 100:.0f}%" if logical_monitor else ""

    current_mode = monitor.current_mode
    if current_mode is not None:
        resolution = f"{current_mode.width}x{current_mode.height}"
        refresh_rate = str(rounded_refresh_rate(current_mode))
        vrr_enabled = current_mode.properties.variable
    else:
        resolution = ""
        refresh_rate = ""
        vrr_enabled = False

    return {
        "connector": monitor.id.connector,
        "vendor": monitor.id.vendor,
        "product": monitor.id.product,
        "resolution": resolution,
        "refresh_rate": refresh_rate,
        "scaling": scaling,
        "vrr": _feature_status(monitor.supports_vrr, vrr_enabled),
        "hdr": _feature_status(monitor.supports_hdr, monitor.hdr_enabled),
    }


def mode_summary(state: DisplayState, connector: str) -> Dict[str, Any]:
    """
    Distinct resolutions and rounded refresh rates of one monitor.

    Resolutions are sorted by width then height, refresh rates numerically,
    both largest first.

    Raises:
        UnknownConnectorError: If no monitor has this connector
    """
    monitor = state.find_monitor(connector)
    if monitor is None:
        raise UnknownConnectorError(
            f'Could not find a monitor with "{connector}" as a connector', connector
        )

    resolutions = sorted({mode.resolution for mode in monitor.modes}, reverse=True)
    refresh_rates = sorted({rounded_refresh_rate(mode) for mode in monitor.modes}, reverse=True)
    return {
        "connector": connector,
        "resolutions": [f"{width}x{height}" for width, height in resolutions],
        "refresh_rates": refresh_rates,
    }


def _print_table(headers: Sequence[str], rows: List[Sequence[str]]) -> None:
    widths = [len(h) for h in headers]
    for row in rows:
        for i, cell in enumerate(row):
            widths[i] = max(widths[i], len(cell))

    print("  ".join(f"{h:<{widths[i]}}" for i, h in enumerate(headers)).rstrip())
    print("-" * (sum(widths) + 2 * (len(widths) - 1)))
    for row in rows:
        print("  ".join(f"{cell:<{widths[i]}}" for i, cell in enumerate(row)).rstrip())


def list_monitors(state: DisplayState, format_output: str = "table") -> None:
    """
    Print every connected monitor.

    Args:
        state: Display state snapshot
        format_output: Output format (table, json)
    """
    rows = [monitor_row(state, monitor) for monitor in state.monitors]

    if format_output == "json":
        print(json.dumps(rows, indent=2))
        return

    if not rows:
        print("No monitors connected")
        return

    _print_table(
        [title for _, title in MONITOR_COLUMNS],
        [[row[key] for key, _ in MONITOR_COLUMNS] for row in rows],
    )


def list_modes(state: DisplayState, connector: str, format_output: str = "table") -> None:
    """
    Print the available resolutions and refresh rates of one monitor.

    Args:
        state: Display state snapshot
        connector: Connector name of the monitor
        format_output: Output format (table, json)
    """
    summary = mode_summary(state, connector)

    if format_output == "json":
        print(json.dumps(summary, indent=2))
        return

    resolutions = summary["resolutions"]
    refresh_rates = [str(rate) for rate in summary["refresh_rates"]]
    rows = []
    for i in range(max(len(resolutions), len(refresh_rates), 1)):
        rows.append([
            connector if i == 0 else "",
            resolutions[i] if i < len(resolutions) else "",
            refresh_rates[i] if i < len(refresh_rates) else "",
        ])
    _print_table(["Connector", "Resolutions", "Refresh rates"], rows)
