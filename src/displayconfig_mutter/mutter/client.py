"""
Display configuration client.

Typed facade over the D-Bus transport: snapshots come back as DisplayState
and updates go out as LogicalMonitorUpdate values.
"""

import logging
from typing import Any, Dict, Optional, Sequence, TYPE_CHECKING

from ..config import DBusConfig
from ..exceptions import ApplyNotAllowedError, TransportError
from ..resolver import LogicalMonitorUpdate
from ..state import DisplayState

if TYPE_CHECKING:
    from .transport import DisplayConfigTransport


class DisplayConfigClient:
    """
    Client for the Mutter display configuration service.

    Usage:
        client = DisplayConfigClient.connect(config.dbus)
        state = client.fetch_state()
        client.apply(state.serial, Method.VERIFY, [update], {})
    """

    def __init__(self, transport: 'DisplayConfigTransport') -> None:
        self._transport = transport
        self.logger = logging.getLogger(__name__)

    @classmethod
    def connect(cls, config: DBusConfig) -> 'DisplayConfigClient':
        """
        Connect to the service on the configured bus.

        Raises:
            ServiceUnavailableError: If the service cannot be reached
        """
        # Imported here so that the rest of the package works without PyGObject
        from .transport import DisplayConfigTransport
        return cls(DisplayConfigTransport(config))

    def fetch_state(self) -> DisplayState:
        """
        Fetch a fresh display state snapshot.

        Raises:
            TransportError: If the call fails or the reply is malformed
        """
        reply = self._transport.get_current_state()
        try:
            state = DisplayState.from_dbus(reply)
        except (TypeError, ValueError) as e:
            raise TransportError(f"Unexpected GetCurrentState reply: {e}") from e
        self.logger.info(
            f"Fetched display state serial={state.serial} with {len(state.monitors)} monitors"
        )
        return state

    def apply(
        self,
        serial: int,
        method: int,
        logical_monitors: Sequence[LogicalMonitorUpdate],
        properties: Optional[Dict[str, Any]] = None,
    ) -> None:
        """
        Apply a monitors configuration.

        Args:
            serial: Serial of the snapshot the configuration was resolved from
            method: Apply method (verify, temporary or persistent)
            logical_monitors: Logical monitor updates
            properties: Global properties, empty to keep the layout mode

        Raises:
            TransportError: If the service rejects the configuration
        """
        self._transport.apply_monitors_config(
            serial,
            int(method),
            [lm.to_dbus() for lm in logical_monitors],
            properties or {},
        )
        self.logger.debug(f"ApplyMonitorsConfig accepted for serial={serial}")

    def apply_allowed(self) -> Optional[bool]:
        """Whether the service accepts configurations; None when unknown."""
        return self._transport.apply_allowed()

    def ensure_apply_allowed(self) -> None:
        """
        Raises:
            ApplyNotAllowedError: If the service reports that applying is not allowed
        """
        if self.apply_allowed() is False:
            raise ApplyNotAllowedError(
                "The display configuration service does not allow applying monitor "
                "configurations right now (e.g. the session is locked or remote)."
            )
