"""Decade tick computation for logarithmic axes.

The renderer's automatic log ticking varies a lot between datasets of very
different magnitude, so charts use explicit decade ticks instead.
"""

from __future__ import annotations

import math
from collections.abc import Iterable

LOG_FLOOR = 1e-10


def decade_powers(values: Iterable[float], *, floor: float = LOG_FLOOR) -> tuple[int, int] | None:
    """Return the (min_power, max_power) decade range bracketing `values`.

    Args:
        values: Data values; non-positive values are clamped to `floor`.
        floor: Smallest positive value considered for the range.

    Returns:
        Inclusive power range, or None when `values` is empty.
    """

    clamped = [max(float(v), floor) for v in values]
    if not clamped:
        return None
    min_power = math.floor(math.log10(min(clamped)))
    max_power = math.ceil(math.log10(max(clamped)))
    return min_power, max_power


def decade_tick_values(values: Iterable[float], *, floor: float = LOG_FLOOR) -> list[float]:
    """Return one tick at ``10**p`` for each decade bracketing `values`.

    Args:
        values: Data values across every series of the chart.
        floor: Smallest positive value considered for the range.

    Returns:
        Ascending tick values, or an empty list when `values` is empty.
    """

    powers = decade_powers(values, floor=floor)
    if powers is None:
        return []
    min_power, max_power = powers
    return [10.0**power for power in range(min_power, max_power + 1)]
