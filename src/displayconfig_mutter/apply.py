"""
Apply transaction.

Packages a resolved update with the method the service should use and
submits it in a single ``ApplyMonitorsConfig`` call. Failures reported by the
service are propagated as TransportError without reinterpretation.
"""

import logging
from dataclasses import dataclass
from enum import IntEnum
from typing import TYPE_CHECKING

from .resolver import ApplyRequest, Intent, resolve
from .state import DisplayState

if TYPE_CHECKING:
    from .mutter import DisplayConfigClient

logger = logging.getLogger(__name__)


class Method(IntEnum):
    """How the service should handle a configuration."""
    VERIFY = 0      # Validate only
    TEMPORARY = 1   # Apply for this session
    PERSISTENT = 2  # Apply and store; the service asks the user to confirm

    @classmethod
    def for_flags(cls, persistent: bool = False, dry_run: bool = False) -> 'Method':
        if dry_run:
            return cls.VERIFY
        return cls.PERSISTENT if persistent else cls.TEMPORARY


@dataclass(frozen=True)
class ApplyTransaction:
    """A resolved request bound to an apply method."""
    request: ApplyRequest
    method: Method = Method.TEMPORARY

    def submit(self, client: 'DisplayConfigClient') -> None:
        """
        Submit the configuration with exactly one apply call.

        Global properties are sent empty so the layout mode stays unchanged.

        Raises:
            TransportError: The service rejected the configuration
        """
        logger.info(
            f"Applying ({self.method.name.lower()}) serial={self.request.serial}: "
            f"{self.request.describe()}"
        )
        client.apply(
            self.request.serial,
            self.method,
            self.request.logical_monitors,
            {},
        )


def apply_config(
    client: 'DisplayConfigClient',
    state: DisplayState,
    connector: str,
    intent: Intent,
    method: Method = Method.TEMPORARY,
) -> ApplyRequest:
    """
    Resolve a request against a snapshot and submit it.

    Nothing is submitted when resolving fails.

    Returns:
        The submitted ApplyRequest
    """
    request = resolve(state, connector, intent)
    ApplyTransaction(request, method).submit(client)
    return request
