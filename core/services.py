"""Service-layer functions for the core app.

Services coordinate the upstream API client with the pure charting modules:
a dataset payload goes through the series builder, a pre-rendered chart goes
through the layout reconciler.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence
from typing import Any

from analysis.ec10eq_dataset import is_dataset_payload, parse_dataset
from core import endpoints
from core.api_client import fetch_json
from core.charting.layout import COMPARISON_DEFAULTS, PLOT_VIEWER_DEFAULTS
from core.charting.reconciler import reconcile
from core.charting.schema import ChartDescription, ColorMode, NoChartData
from core.charting.series_builder import build_series
from core.charting.validator import InvalidChartDescription

logger = logging.getLogger(__name__)

MIN_COMPARISON_SUBSTANCES = 2
MAX_COMPARISON_SUBSTANCES = 3


def load_ec10eq_chart(cas: str, *, color_mode: ColorMode = "trophic_group") -> ChartDescription | NoChartData:
    """Load the EC10eq chart for a substance.

    The upstream endpoint returns either the raw dataset (built locally) or a
    pre-rendered chart description (reconciled with the viewer defaults).

    Args:
        cas: Normalized CAS number.
        color_mode: Marker coloring strategy for locally built charts.

    Returns:
        ChartDescription, or NoChartData when the substance has no observation.

    Raises:
        ApiError: When the upstream request fails.
        DatasetShapeError: When a dataset payload is malformed.
        InvalidChartDescription: When the payload is neither a dataset nor a chart.
    """

    payload = fetch_json(endpoints.ec10eq_plot(cas))
    if is_dataset_payload(payload):
        return build_series(parse_dataset(payload), color_mode)
    if isinstance(payload, Mapping) and "data" in payload and "layout" in payload:
        return reconcile(payload, PLOT_VIEWER_DEFAULTS)
    logger.warning("EC10eq payload for CAS %s is neither a dataset nor a chart", cas)
    raise InvalidChartDescription(("EC10eq payload is neither a dataset nor a chart description.",))


def load_ssd_chart(cas: str) -> ChartDescription:
    """Load the pre-rendered species-sensitivity distribution chart for a substance."""

    return reconcile(fetch_json(endpoints.ssd_plot(cas)), PLOT_VIEWER_DEFAULTS)


def load_comparison_chart(cas_list: Sequence[str]) -> ChartDescription:
    """Load the SSD comparison chart for two or three substances.

    Raises:
        ValueError: When the selection size or uniqueness rules are violated.
        ApiError: When the upstream request fails.
        InvalidChartDescription: When the upstream chart is structurally invalid.
    """

    selection = list(cas_list)
    if len(set(selection)) != len(selection):
        raise ValueError("Comparison substances must be distinct.")
    if not MIN_COMPARISON_SUBSTANCES <= len(selection) <= MAX_COMPARISON_SUBSTANCES:
        raise ValueError(
            f"Comparison requires {MIN_COMPARISON_SUBSTANCES} to {MAX_COMPARISON_SUBSTANCES} substances; "
            f"got {len(selection)}."
        )
    payload = fetch_json(endpoints.COMPARISON_PLOT, method="POST", payload={"cas_list": selection})
    return reconcile(payload, COMPARISON_DEFAULTS)


def load_chemical_info(cas: str) -> dict[str, Any]:
    """Return the upstream chemical-info record for a substance."""

    payload = fetch_json(endpoints.chemical_info(cas))
    return dict(payload) if isinstance(payload, Mapping) else {}


def load_stats() -> dict[str, Any]:
    """Return upstream database statistics (records, chemicals, species)."""

    payload = fetch_json(endpoints.STATS)
    return dict(payload) if isinstance(payload, Mapping) else {}


def load_cas_list() -> Any:
    """Return the raw upstream CAS list payload."""

    return fetch_json(endpoints.CAS_LIST)


def effect_factors(info: Mapping[str, Any]) -> list[dict[str, Any]]:
    """Extract effect factors from a chemical-info record.

    The upstream API has used both ``effect_factors`` and ``effectFactors``.
    """

    raw = info.get("effect_factors") or info.get("effectFactors") or []
    if not isinstance(raw, Iterable) or isinstance(raw, (str, bytes, Mapping)):
        return []
    return [dict(item) for item in raw if isinstance(item, Mapping)]
