"""Tests for decade tick computation on log axes."""

from __future__ import annotations

import pytest

from analysis.log_axis import LOG_FLOOR, decade_powers, decade_tick_values

pytestmark = pytest.mark.unit


def test_decade_ticks_bracket_the_data_range() -> None:
    """Values 0.003 and 250 produce ticks from 1e-3 to 1e3."""

    ticks = decade_tick_values([0.003, 250])

    assert ticks == pytest.approx([1e-3, 1e-2, 1e-1, 1.0, 10.0, 100.0, 1000.0])


def test_exact_decades_do_not_widen_the_range() -> None:
    """A value on a decade boundary maps to exactly that power."""

    assert decade_powers([1.0, 100.0]) == (0, 2)


def test_non_positive_values_are_clamped_for_ticks() -> None:
    """Zero and negative values are clamped to the floor instead of failing."""

    assert decade_powers([0.0, -5.0, 10.0]) == (-10, 1)
    assert decade_tick_values([0.0])[0] == pytest.approx(LOG_FLOOR)


def test_empty_input_has_no_ticks() -> None:
    """No values means no ticks and no range."""

    assert decade_powers([]) is None
    assert decade_tick_values([]) == []
