"""
D-Bus transport for org.gnome.Mutter.DisplayConfig.

Handles low-level communication: proxy creation, method calls, variant
packing and translation of GLib errors.
"""

import logging
from typing import Any, Dict, List, Optional, Sequence

import gi

gi.require_version("Gio", "2.0")
gi.require_version("GLib", "2.0")
from gi.repository import Gio, GLib

from ..config import DBusConfig
from ..exceptions import ServiceUnavailableError, TransportError


SERVICE_NAME = "org.gnome.Mutter.DisplayConfig"
OBJECT_PATH = "/org/gnome/Mutter/DisplayConfig"
INTERFACE = "org.gnome.Mutter.DisplayConfig"

APPLY_MONITORS_CONFIG_SIGNATURE = "(uua(iiduba(ssa{sv}))a{sv})"

# Signatures of the a{sv} keys sent to ApplyMonitorsConfig
PROPERTY_SIGNATURES = {
    "color-mode": "u",
    "underscanning": "b",
    "layout-mode": "u",
}

logger = logging.getLogger(__name__)


def wrap_properties(properties: Dict[str, Any]) -> Dict[str, GLib.Variant]:
    """
    Wrap an a{sv} dictionary in variants. ``None`` values are omitted.

    Raises:
        TransportError: For a key without a known signature
    """
    wrapped = {}
    for key, value in properties.items():
        if value is None:
            continue
        signature = PROPERTY_SIGNATURES.get(key)
        if signature is None:
            raise TransportError(f"Unsupported configuration property: {key}")
        wrapped[key] = GLib.Variant(signature, value)
    return wrapped


def build_apply_parameters(
    serial: int,
    method: int,
    logical_monitors: Sequence[Sequence[Any]],
    properties: Dict[str, Any],
) -> GLib.Variant:
    """Pack ApplyMonitorsConfig arguments from plain Python values."""
    packed: List[tuple] = []
    for x, y, scale, transform, primary, monitors in logical_monitors:
        packed.append((
            x,
            y,
            scale,
            transform,
            primary,
            [(connector, mode_id, wrap_properties(props)) for connector, mode_id, props in monitors],
        ))
    return GLib.Variant(
        APPLY_MONITORS_CONFIG_SIGNATURE,
        (serial, method, packed, wrap_properties(properties)),
    )


class DisplayConfigTransport:
    """
    Low-level D-Bus transport for the Mutter display configuration service.

    Handles:
    - Proxy creation on the configured bus
    - GetCurrentState and ApplyMonitorsConfig calls
    - The ApplyMonitorsConfigAllowed property
    """

    def __init__(self, config: DBusConfig, proxy: Optional[Gio.DBusProxy] = None) -> None:
        self.config = config
        self.timeout_ms = config.timeout_ms
        self._proxy = proxy if proxy is not None else self._connect()

    def _connect(self) -> Gio.DBusProxy:
        """
        Create the service proxy.

        Raises:
            ServiceUnavailableError: Bus unreachable or service not running
        """
        bus_type = Gio.BusType.SYSTEM if self.config.bus == "system" else Gio.BusType.SESSION
        try:
            proxy = Gio.DBusProxy.new_for_bus_sync(
                bus_type,
                Gio.DBusProxyFlags.DO_NOT_CONNECT_SIGNALS,
                None,
                SERVICE_NAME,
                OBJECT_PATH,
                INTERFACE,
                None,
            )
        except GLib.Error as e:
            raise ServiceUnavailableError(
                f"Cannot connect to the {self.config.bus} bus: {e.message}",
                dbus_error=Gio.DBusError.get_remote_error(e),
            ) from e

        if proxy.get_name_owner() is None:
            raise ServiceUnavailableError(
                f"{SERVICE_NAME} is not available on the {self.config.bus} bus. "
                "Make sure a GNOME (Mutter) session is running."
            )

        logger.debug(f"Connected to {SERVICE_NAME} on the {self.config.bus} bus")
        return proxy

    def _call(self, method: str, parameters: Optional[GLib.Variant] = None) -> tuple:
        """
        Call a method and return its unpacked reply.

        Raises:
            TransportError: With the service's error message
        """
        logger.debug(f"Calling {INTERFACE}.{method}")
        try:
            result = self._proxy.call_sync(
                method,
                parameters,
                Gio.DBusCallFlags.NONE,
                self.timeout_ms,
                None,
            )
        except GLib.Error as e:
            remote_error = Gio.DBusError.get_remote_error(e)
            logger.debug(f"{method} failed ({remote_error}): {e.message}")
            raise TransportError(e.message, dbus_error=remote_error) from e

        if result is None:
            return ()
        return result.unpack()

    def get_current_state(self) -> tuple:
        """
        Fetch the current state.

        Returns:
            Unpacked (serial, monitors, logical_monitors, properties) reply
        """
        return self._call("GetCurrentState")

    def apply_monitors_config(
        self,
        serial: int,
        method: int,
        logical_monitors: Sequence[Sequence[Any]],
        properties: Dict[str, Any],
    ) -> None:
        """Submit a monitors configuration."""
        parameters = build_apply_parameters(serial, method, logical_monitors, properties)
        self._call("ApplyMonitorsConfig", parameters)

    def apply_allowed(self) -> Optional[bool]:
        """
        Value of the ApplyMonitorsConfigAllowed property.

        Returns:
            None if the service does not expose the property
        """
        value = self._proxy.get_cached_property("ApplyMonitorsConfigAllowed")
        if value is None:
            return None
        return bool(value.unpack())
