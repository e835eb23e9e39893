"""Reconcile externally produced chart descriptions with presentation defaults.

Remote charts may already carry domain content (annotations, shapes, images,
secondary axes). Reconciliation therefore only fills gaps: a field present in
the source is never replaced by a default, at any depth, in any region.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from .layout import COMPARISON_DEFAULTS, PresentationDefaults
from .schema import ChartDescription
from .validator import ensure_chart_description, secondary_axis_keys

logger = logging.getLogger(__name__)


def reconcile(
    source: Mapping[str, Any] | ChartDescription,
    defaults: PresentationDefaults = COMPARISON_DEFAULTS,
) -> ChartDescription:
    """Merge a chart description with presentation defaults.

    Args:
        source: Chart description from the upstream API (or built locally).
        defaults: Presentation policy used to fill fields the source omitted.

    Returns:
        ChartDescription with every source field preserved and gaps filled.

    Raises:
        InvalidChartDescription: When `source` lacks a trace list or a layout,
            or a reconciled region is not an object.
    """

    if isinstance(source, ChartDescription):
        source = source.as_json()
    payload = ensure_chart_description(source)
    layout: Mapping[str, Any] = payload["layout"]

    merged: dict[str, Any] = dict(layout)
    merged["autosize"] = layout["autosize"] if "autosize" in layout else defaults.autosize
    merged["showlegend"] = layout["showlegend"] if "showlegend" in layout else defaults.showlegend
    merged["margin"] = merge_fields(layout.get("margin"), defaults.margin.as_layout())
    merged["font"] = merge_fields(layout.get("font"), defaults.font.as_layout())

    axis_defaults = defaults.axis.as_layout()
    merged["xaxis"] = merge_fields(layout.get("xaxis"), axis_defaults)
    merged["yaxis"] = merge_fields(layout.get("yaxis"), axis_defaults)
    secondary = secondary_axis_keys(layout)
    for key in secondary:
        merged[key] = merge_fields(layout[key], axis_defaults)

    merged["legend"] = merge_fields(layout.get("legend"), defaults.legend.as_layout())

    config = merge_fields(payload.get("config"), defaults.config)

    logger.debug(
        "Reconciled chart layout (traces=%d, secondary_axes=%s, source_keys=%s)",
        len(payload["data"]),
        secondary,
        sorted(layout),
    )
    return ChartDescription(data=list(payload["data"]), layout=merged, config=config)


def merge_fields(source: Mapping[str, Any] | None, defaults: Mapping[str, Any]) -> dict[str, Any]:
    """Merge `source` over `defaults` field by field, recursively.

    Every key of `source` is kept with its value; nested objects present on
    both sides are merged the same way. Keys only present in `defaults` are
    added as plain JSON values.

    Args:
        source: Source region (None when the source omitted the region).
        defaults: Default region.

    Returns:
        A new merged dictionary; neither input is modified.
    """

    merged: dict[str, Any] = dict(source or {})
    for key, default in defaults.items():
        if key not in merged:
            merged[key] = _plain(default)
            continue
        current = merged[key]
        if isinstance(current, Mapping) and isinstance(default, Mapping):
            merged[key] = merge_fields(current, default)
    return merged


def _plain(value: Any) -> Any:
    """Copy default values into plain JSON containers (dict/list)."""

    if isinstance(value, Mapping):
        return {key: _plain(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_plain(item) for item in value]
    return value
