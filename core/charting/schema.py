"""Schema types for declarative chart descriptions.

Charts are exchanged as plotly-style chart descriptions: a list of traces, a
layout tree and an optional rendering config. The dashboard never inspects the
renderer; it only builds, reconciles and hands over these descriptions.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Literal, TypedDict

ColorMode = Literal["trophic_group", "year", "author"]

COLOR_MODES: tuple[ColorMode, ...] = ("trophic_group", "year", "author")

COLOR_MODE_LABELS: Mapping[ColorMode, str] = MappingProxyType(
    {
        "trophic_group": "Trophic Group",
        "year": "Year",
        "author": "Author",
    }
)


class MarkerLine(TypedDict):
    """Outline of a scatter marker."""

    width: int
    color: str


class ScatterMarker(TypedDict):
    """Marker styling for one EC10eq trace."""

    color: list[str]
    symbol: str
    size: int
    opacity: float
    line: MarkerLine


class ScatterTrace(TypedDict):
    """A plotly scatter trace for one (trophic group, species) bucket."""

    x: list[str]
    y: list[float]
    mode: str
    name: str
    type: str
    marker: ScatterMarker
    customdata: list[list[Any]]
    hovertemplate: str
    legendgroup: str
    showlegend: bool


@dataclass(frozen=True, slots=True)
class ChartDescription:
    """The rendering contract: traces, layout and optional config.

    Args:
        data: Trace list handed to the renderer as-is.
        layout: Layout tree (title, axes, legend, margins, ...).
        config: Optional renderer interaction config.
    """

    data: list[Any]
    layout: dict[str, Any]
    config: dict[str, Any] | None = None

    def as_json(self) -> dict[str, Any]:
        """Return the ``{data, layout, config?}`` wire representation."""

        payload: dict[str, Any] = {"data": self.data, "layout": self.layout}
        if self.config is not None:
            payload["config"] = self.config
        return payload


@dataclass(frozen=True, slots=True)
class NoChartData:
    """Explicit empty result: valid input that yields no data points.

    Args:
        cas: Substance the chart was requested for.
        chemical_name: Optional substance display name.
        reason: Short user-facing explanation.
    """

    cas: str
    chemical_name: str | None = None
    reason: str = "No EC10eq data available for this substance."

    def as_json(self) -> dict[str, Any]:
        """Return a JSON-serializable representation."""

        return {"cas": self.cas, "chemical_name": self.chemical_name, "reason": self.reason}


@dataclass(frozen=True, slots=True)
class ChartStatistics:
    """Counts shown in the chart title."""

    trophic_groups: int
    species: int
    endpoints: int


@dataclass(frozen=True, slots=True)
class ValidationResult:
    """Result of validating a chart description."""

    is_valid: bool
    errors: tuple[str, ...] = ()
    warnings: tuple[str, ...] = ()
