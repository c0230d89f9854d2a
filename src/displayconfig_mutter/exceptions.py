"""
Common exception classes for displayconfig-mutter.

Provides domain-specific exceptions for consistent error handling across modules.
All user-facing exceptions inherit from DisplayConfigError for unified catching
at CLI level.
"""

from typing import Optional


class DisplayConfigError(Exception):
    """
    Base exception for all displayconfig-mutter errors.

    All domain-specific exceptions inherit from this class, allowing
    callers to catch all errors with a single except clause.
    """
    pass


# ============================================================================
# Configuration Errors
# ============================================================================

class ConfigError(DisplayConfigError):
    """
    Configuration-related errors.

    Raised when:
    - Config file is malformed
    - Config contains unknown sections or keys
    - A config value has the wrong type
    """
    pass


class ConfigValidationError(ConfigError):
    """
    Config value validation failed.

    Raised when a config value is present but invalid (e.g., unknown bus
    name, unknown log level, out of range timeout).
    """
    pass


# ============================================================================
# Resolve Errors
# ============================================================================

class ResolveError(DisplayConfigError):
    """
    The requested configuration cannot be resolved against the current state.

    Base class for every failure of the configuration resolver. Carries the
    connector the request was made for.
    """

    def __init__(self, message: str, connector: Optional[str] = None) -> None:
        super().__init__(message)
        self.connector = connector


class InvalidIntentError(ResolveError):
    """
    The requested change is self-contradictory.

    Raised when mutually exclusive options are combined, e.g. an explicit
    resolution together with the max-resolution flag.
    """
    pass


class UnknownConnectorError(ResolveError):
    """No monitor with the requested connector name is connected."""
    pass


class MonitorNotActiveError(ResolveError):
    """
    Monitor is connected but disabled.

    Raised when the monitor is not part of any logical monitor. Only
    existing placements are reconfigured; disabled outputs are never
    activated.
    """
    pass


class NoCurrentModeError(ResolveError):
    """
    Active monitor reports no current mode.

    Indicates an inconsistent reply from the display service.
    """
    pass


class NoMatchingModeError(ResolveError):
    """No mode exists for the requested resolution."""
    pass


class VrrUnavailableError(ResolveError):
    """Variable refresh rate was requested but no variable mode matches."""
    pass


class NoMatchingScaleError(ResolveError):
    """
    No supported scale is within a quarter step of the requested scale.

    Carries the requested scaling percentage.
    """

    def __init__(
        self,
        message: str,
        connector: Optional[str] = None,
        requested_percent: Optional[float] = None,
    ) -> None:
        super().__init__(message, connector)
        self.requested_percent = requested_percent


class HdrUnsupportedError(ResolveError):
    """HDR was requested but the monitor does not support BT.2100."""
    pass


# ============================================================================
# Transport Errors
# ============================================================================

class TransportError(DisplayConfigError):
    """
    Failure reported by the display configuration service.

    Raised for any D-Bus level failure during fetch or apply, including a
    stale serial. The message is the service's own and is not reinterpreted.
    """

    def __init__(self, message: str, dbus_error: Optional[str] = None) -> None:
        super().__init__(message)
        self.dbus_error = dbus_error


class ServiceUnavailableError(TransportError):
    """
    Cannot reach the display configuration service.

    Raised when the session bus is not reachable or the proxy cannot be
    created.
    """
    pass


class ApplyNotAllowedError(TransportError):
    """The service reports that applying monitor configurations is not allowed."""
    pass


# ============================================================================
# Internal Errors
# ============================================================================

class InternalInvariantError(AssertionError):
    """
    A precondition that the resolver relies on does not hold.

    Not a user error: the CLI reports it as an unexpected failure.
    """
    pass
