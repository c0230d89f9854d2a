"""Set command: resolve a requested change for one monitor and apply it."""

import logging

from ..apply import Method, apply_config
from ..mutter import DisplayConfigClient
from ..resolver import ApplyRequest, Intent

logger = logging.getLogger(__name__)


def set_config(
    client: DisplayConfigClient,
    connector: str,
    intent: Intent,
    method: Method = Method.TEMPORARY,
) -> ApplyRequest:
    """
    Fetch the current state, resolve the change and apply it once.

    A stale snapshot is reported by the service as a TransportError; it is
    not retried.

    Args:
        client: Connected display configuration client
        connector: Connector name of the monitor to configure
        intent: Requested change
        method: Apply method

    Returns:
        The submitted request
    """
    logger.debug(f"Configuring {connector} ({method.name.lower()}): {intent}")
    state = client.fetch_state()

    if method != Method.VERIFY:
        client.ensure_apply_allowed()

    request = apply_config(client, state, connector, intent, method)

    if method == Method.VERIFY:
        print(f"Configuration is valid: {request.describe()}")
    elif method == Method.PERSISTENT:
        print(f"Applied {request.describe()} (confirm the change to keep it)")
    else:
        print(f"Applied {request.describe()}")
    return request
