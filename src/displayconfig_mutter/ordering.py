"""
Total order over monitor modes.

Modes are compared by width, then height, then refresh rate rounded to the
nearest integer (half to even), then refresh rate mode (fixed before
variable). Two modes whose refresh rates differ by a fraction of a hertz but
round to the same integer are the same mode for ordering and grouping, even
though their ids and dataclass equality differ.
"""

from typing import Iterable, Tuple

from .state import Mode

ModeKey = Tuple[int, int, int, int]


def rounded_refresh_rate(mode: Mode) -> int:
    """Refresh rate rounded half to even, e.g. 59.94 -> 60, 60.5 -> 60."""
    return round(mode.refresh_rate)


def mode_sort_key(mode: Mode) -> ModeKey:
    """Sort key implementing the mode order."""
    return (
        mode.width,
        mode.height,
        rounded_refresh_rate(mode),
        1 if mode.properties.variable else 0,
    )


def same_mode(a: Mode, b: Mode) -> bool:
    """Equality under the mode order (not dataclass equality)."""
    return mode_sort_key(a) == mode_sort_key(b)


def same_rate(a: Mode, b: Mode) -> bool:
    """Same resolution and rounded refresh rate, ignoring the refresh rate mode."""
    return mode_sort_key(a)[:3] == mode_sort_key(b)[:3]


def mode_less(a: Mode, b: Mode) -> bool:
    return mode_sort_key(a) < mode_sort_key(b)


def sort_modes_descending(modes: Iterable[Mode]) -> Tuple[Mode, ...]:
    """Return the modes greatest first. The sort is stable for equal keys."""
    return tuple(sorted(modes, key=mode_sort_key, reverse=True))


def max_mode(modes: Iterable[Mode]) -> Mode:
    """Greatest mode under the mode order. Raises ValueError when empty."""
    return max(modes, key=mode_sort_key)
