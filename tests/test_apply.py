"""Tests for the apply transaction."""

import pytest
from unittest.mock import Mock

from displayconfig_mutter.apply import ApplyTransaction, Method, apply_config
from displayconfig_mutter.exceptions import TransportError, VrrUnavailableError
from displayconfig_mutter.resolver import Intent, resolve


@pytest.mark.parametrize("persistent,dry_run,expected", [
    (False, False, Method.TEMPORARY),
    (True, False, Method.PERSISTENT),
    (False, True, Method.VERIFY),
    (True, True, Method.VERIFY),
])
def test_method_for_flags(persistent, dry_run, expected):
    """Test that dry run always verifies only."""
    assert Method.for_flags(persistent=persistent, dry_run=dry_run) == expected


def test_method_values():
    """Test the values sent to the service."""
    assert [int(m) for m in Method] == [0, 1, 2]


def test_submit_makes_one_apply_call(gaming_state):
    """Test that a transaction maps to exactly one apply call."""
    client = Mock()
    request = resolve(gaming_state, "DP-2", Intent(vrr=True))

    ApplyTransaction(request, Method.PERSISTENT).submit(client)

    client.apply.assert_called_once_with(1001, Method.PERSISTENT, [request.logical_monitor], {})


def test_apply_config(gaming_state):
    """Test resolve then submit with the snapshot serial."""
    client = Mock()

    request = apply_config(client, gaming_state, "DP-2", Intent(scaling_percent=150), Method.VERIFY)

    assert request.serial == 1001
    assert request.logical_monitor.scale == 1.5
    client.apply.assert_called_once()
    serial, method, logical_monitors, properties = client.apply.call_args[0]
    assert serial == 1001
    assert method == Method.VERIFY
    assert logical_monitors == [request.logical_monitor]
    assert properties == {}


def test_apply_config_default_method(dp1_state):
    """Test that configurations are temporary by default."""
    client = Mock()

    apply_config(client, dp1_state, "DP-1", Intent())

    assert client.apply.call_args[0][1] == Method.TEMPORARY


def test_nothing_submitted_when_resolving_fails(dp1_state):
    """Test that resolve errors stop before the service is called."""
    client = Mock()

    with pytest.raises(VrrUnavailableError):
        apply_config(client, dp1_state, "DP-1", Intent(vrr=True))

    client.apply.assert_not_called()


def test_transport_error_propagates_unchanged(dp1_state):
    """Test that the service's rejection reaches the caller as is."""
    error = TransportError("Logical monitors not adjacent", dbus_error="org.freedesktop.DBus.Error.InvalidArgs")
    client = Mock()
    client.apply.side_effect = error

    with pytest.raises(TransportError) as exc_info:
        apply_config(client, dp1_state, "DP-1", Intent(max_resolution=True))

    assert exc_info.value is error
    assert exc_info.value.dbus_error == "org.freedesktop.DBus.Error.InvalidArgs"
