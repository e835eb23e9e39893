"""Structural validation for chart descriptions.

Chart descriptions may come from a process outside the dashboard's control,
so validation is strict: every structural problem is collected and the caller
refuses to render a partially valid chart.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any

from .schema import ValidationResult

SECONDARY_AXIS_PATTERN = re.compile(r"^[xy]axis[1-9][0-9]*$")

MAPPING_REGIONS: tuple[str, ...] = ("xaxis", "yaxis", "legend", "margin", "font")


class InvalidChartDescription(ValueError):
    """Raised when a chart description is structurally unusable.

    Args:
        errors: Every structural problem found in the payload.
    """

    def __init__(self, errors: tuple[str, ...]) -> None:
        self.errors = errors
        super().__init__("Invalid chart description: " + " ".join(errors))


def validate_chart_description(payload: object) -> ValidationResult:
    """Validate a ``{data, layout, config?}`` chart description.

    Args:
        payload: Decoded chart description.

    Returns:
        ValidationResult containing errors and warnings.
    """

    errors: list[str] = []
    warnings: list[str] = []

    if not isinstance(payload, Mapping):
        return ValidationResult(is_valid=False, errors=("Chart description must be an object.",))

    if "data" not in payload:
        errors.append("Chart description is missing its trace list ('data').")
    elif not isinstance(payload["data"], (list, tuple)):
        errors.append("Chart description 'data' must be a list of traces.")
    else:
        traces = payload["data"]
        if not traces:
            warnings.append("Chart description contains no traces.")
        for idx, trace in enumerate(traces):
            if not isinstance(trace, Mapping):
                warnings.append(f"Chart description data[{idx}] is not an object.")

    if "layout" not in payload:
        errors.append("Chart description is missing its layout ('layout').")
    elif not isinstance(payload["layout"], Mapping):
        errors.append("Chart description 'layout' must be an object.")
    else:
        _validate_regions(payload["layout"], errors=errors)

    config = payload.get("config")
    if config is not None and not isinstance(config, Mapping):
        errors.append("Chart description 'config' must be an object when present.")

    return ValidationResult(is_valid=not errors, errors=tuple(errors), warnings=tuple(warnings))


def ensure_chart_description(payload: object) -> Mapping[str, Any]:
    """Return `payload` when structurally valid.

    Raises:
        InvalidChartDescription: When validation reports any error.
    """

    result = validate_chart_description(payload)
    if not result.is_valid:
        raise InvalidChartDescription(result.errors)
    assert isinstance(payload, Mapping)
    return payload


def secondary_axis_keys(layout: Mapping[str, Any]) -> list[str]:
    """Return layout keys naming secondary axes (``xaxis2``, ``yaxis3``, ...)."""

    return [key for key in layout if SECONDARY_AXIS_PATTERN.match(key)]


def _validate_regions(layout: Mapping[str, Any], *, errors: list[str]) -> None:
    """Require reconciled layout regions to be objects when present."""

    for key in (*MAPPING_REGIONS, *secondary_axis_keys(layout)):
        if key in layout and not isinstance(layout[key], Mapping):
            errors.append(f"Chart layout '{key}' must be an object.")
    legend = layout.get("legend")
    if isinstance(legend, Mapping) and "font" in legend and not isinstance(legend["font"], Mapping):
        errors.append("Chart layout 'legend.font' must be an object.")
