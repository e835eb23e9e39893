"""Build EC10eq scatter chart descriptions from observation datasets.

One trace is produced per (trophic group, species) bucket. Traces share a
legend group per trophic group so the legend shows one entry per group no
matter how many species were tested.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Hashable, Iterable, Mapping
from typing import Any

from analysis.ec10eq_dataset import Ec10eqDataset, Observation, parse_dataset
from analysis.log_axis import decade_tick_values

from .palettes import palette_color, trophic_group_color, trophic_group_symbol
from .schema import (
    COLOR_MODE_LABELS,
    COLOR_MODES,
    ChartDescription,
    ChartStatistics,
    ColorMode,
    NoChartData,
    ScatterTrace,
)

logger = logging.getLogger(__name__)

CHART_TITLE = "EC10eq Distribution by Trophic Group and Species"
LABEL_SEPARATOR = " - "

HOVER_TEMPLATE = (
    "<b>EC10eq:</b> %{y:.4f} mg/L<br>"
    "<b>Test ID:</b> %{customdata[0]}<br>"
    "<b>Year:</b> %{customdata[1]}<br>"
    "<b>Author:</b> %{customdata[2]}<br>"
    "<extra></extra>"
)


def build_series(
    dataset: Ec10eqDataset | Mapping[str, Any],
    color_mode: ColorMode = "trophic_group",
) -> ChartDescription | NoChartData:
    """Build the EC10eq scatter chart for one substance.

    Args:
        dataset: Parsed dataset, or a raw nested/flat wire payload.
        color_mode: Marker coloring strategy (trophic group, year or author).

    Returns:
        A ChartDescription, or NoChartData when the dataset has no observation.

    Raises:
        ValueError: When `color_mode` is not supported.
        DatasetShapeError: When a raw payload cannot be decoded.
    """

    if color_mode not in COLOR_MODES:
        raise ValueError(f"Unsupported color mode: {color_mode!r}.")
    if not isinstance(dataset, Ec10eqDataset):
        dataset = parse_dataset(dataset)

    if not dataset.trophic_groups or dataset.is_empty:
        logger.info("No EC10eq observations for CAS %s", dataset.cas)
        return NoChartData(cas=dataset.cas, chemical_name=dataset.chemical_name)

    group_colors = {
        group: _group_color_map(dataset, group=group, color_mode=color_mode) for group in dataset.trophic_groups
    }

    traces: list[ScatterTrace] = []
    labels: list[str] = []
    first_species: dict[str, str] = {}
    for group, species, observations in dataset.iter_buckets():
        first_species.setdefault(group, species)
        label = f"{group}{LABEL_SEPARATOR}{species}"
        labels.append(label)
        traces.append(
            _trace(
                group=group,
                label=label,
                observations=observations,
                colors=_marker_colors(observations, group=group, color_mode=color_mode, color_map=group_colors[group]),
                show_legend=first_species[group] == species,
            )
        )

    stats = chart_statistics(dataset)
    tick_values = decade_tick_values(value for trace in traces for value in trace["y"])
    layout = _layout(
        title=chart_title(dataset, color_mode=color_mode, stats=stats),
        labels=labels,
        species_labels=[label.split(LABEL_SEPARATOR, 1)[1] for label in labels],
        tick_values=tick_values,
        color_mode=color_mode,
    )
    logger.debug("Built %d EC10eq traces for CAS %s (color_mode=%s)", len(traces), dataset.cas, color_mode)
    return ChartDescription(data=list(traces), layout=layout, config=None)


def chart_statistics(dataset: Ec10eqDataset) -> ChartStatistics:
    """Count trophic groups, distinct species (across groups) and endpoints."""

    species: set[str] = set()
    endpoints = 0
    for bucket in dataset.trophic_groups.values():
        for name, observations in bucket.items():
            species.add(name)
            endpoints += len(observations)
    return ChartStatistics(trophic_groups=len(dataset.trophic_groups), species=len(species), endpoints=endpoints)


def chart_title(dataset: Ec10eqDataset, *, color_mode: ColorMode, stats: ChartStatistics) -> str:
    """Build the multi-line chart title."""

    title = CHART_TITLE
    if color_mode != "trophic_group":
        title += f" (colored by {color_mode})"
    if dataset.chemical_name:
        title += f"<br><sub>CAS: {dataset.cas} - {dataset.chemical_name}</sub>"
    else:
        title += f"<br><sub>CAS: {dataset.cas}</sub>"
    title += (
        f"<br><sub>Trophic group(s): {stats.trophic_groups} | "
        f"Species: {stats.species} | Endpoints: {stats.endpoints}</sub>"
    )
    return title


def _group_color_map(dataset: Ec10eqDataset, *, group: str, color_mode: ColorMode) -> dict[Hashable, str]:
    """Assign palette colors to the distinct years/authors of one trophic group.

    Notes:
        The mapping is built per trophic group, not across the dataset, so the
        same year can get different colors in different groups.
    """

    key = _color_key(color_mode)
    if key is None:
        return {}
    observations = [obs for bucket in dataset.trophic_groups[group].values() for obs in bucket]
    distinct = sorted({key(obs) for obs in observations}, key=_none_last)
    return {value: palette_color(position) for position, value in enumerate(distinct)}


def _color_key(color_mode: ColorMode) -> Callable[[Observation], Hashable] | None:
    """Return the observation attribute driving marker colors, if any."""

    if color_mode == "year":
        return lambda obs: obs.year
    if color_mode == "author":
        return lambda obs: obs.author
    return None


def _none_last(value: Hashable) -> tuple[bool, Any]:
    """Sort key placing missing years/authors after known ones."""

    return (value is None, "" if value is None else value)


def _marker_colors(
    observations: tuple[Observation, ...],
    *,
    group: str,
    color_mode: ColorMode,
    color_map: Mapping[Hashable, str],
) -> list[str]:
    """Return per-point marker colors for one bucket."""

    key = _color_key(color_mode)
    if key is None:
        color = trophic_group_color(group)
        return [color for _ in observations]
    return [color_map[key(obs)] for obs in observations]


def _trace(
    *,
    group: str,
    label: str,
    observations: Iterable[Observation],
    colors: list[str],
    show_legend: bool,
) -> ScatterTrace:
    """Build the scatter trace for one (trophic group, species) bucket."""

    rows = list(observations)
    return {
        "x": [label for _ in rows],
        "y": [obs.value for obs in rows],
        "mode": "markers",
        "name": group[:1].upper() + group[1:],
        "type": "scatter",
        "marker": {
            "color": colors,
            "symbol": trophic_group_symbol(group),
            "size": 10,
            "opacity": 0.7,
            "line": {"width": 1, "color": "white"},
        },
        "customdata": [[obs.test_id, obs.year, obs.author] for obs in rows],
        "hovertemplate": HOVER_TEMPLATE,
        "legendgroup": group,
        "showlegend": show_legend,
    }


def _layout(
    *,
    title: str,
    labels: list[str],
    species_labels: list[str],
    tick_values: list[float],
    color_mode: ColorMode,
) -> dict[str, Any]:
    """Assemble the layout tree for an EC10eq chart."""

    return {
        "title": {
            "text": title,
            "x": 0.5,
            "xanchor": "center",
            "font": {"size": 14},
        },
        "xaxis": {
            "title": {"text": "Trophic Group - Species"},
            "tickangle": -45,
            "tickmode": "array",
            "tickvals": labels,
            "ticktext": species_labels,
            "categoryorder": "category ascending",
        },
        "yaxis": {
            "title": {"text": "EC10eq (mg/L) - Log Scale"},
            "type": "log",
            "tickmode": "array",
            "tickvals": tick_values,
            "tickformat": ".0e",
        },
        "template": "plotly_white",
        "width": 1800,
        "height": 900,
        "hovermode": "closest",
        "legend": {
            "title": {"text": COLOR_MODE_LABELS[color_mode]},
            "orientation": "v",
            "yanchor": "top",
            "y": 1,
            "xanchor": "left",
            "x": 1.01 if color_mode == "trophic_group" else 1.15,
        },
        "margin": {
            "l": 80,
            "r": 250 if color_mode == "year" else 200,
            "t": 120,
            "b": 150,
        },
    }
