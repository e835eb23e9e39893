"""Presentation defaults applied to externally produced chart layouts.

Each layout region the dashboard has an opinion about is modelled as its own
frozen dataclass. The reconciler walks these regions explicitly, so adding a
region means adding a field here and a line in `reconciler.reconcile`.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Final, Literal

LegendOrientation = Literal["v", "h"]


@dataclass(frozen=True, slots=True)
class FontDefaults:
    """Default font block."""

    size: int = 12

    def as_layout(self) -> dict[str, Any]:
        """Return the layout fragment for this region."""

        return {"size": self.size}


@dataclass(frozen=True, slots=True)
class MarginDefaults:
    """Default plot margins (pixels)."""

    l: int = 80  # noqa: E741 - plotly's own key name
    r: int = 120
    t: int = 100
    b: int = 120
    pad: int = 10

    def as_layout(self) -> dict[str, Any]:
        """Return the layout fragment for this region."""

        return {"l": self.l, "r": self.r, "t": self.t, "b": self.b, "pad": self.pad}


@dataclass(frozen=True, slots=True)
class AxisDefaults:
    """Defaults injected into every primary and secondary axis."""

    automargin: bool = True

    def as_layout(self) -> dict[str, Any]:
        """Return the layout fragment for this region."""

        return {"automargin": self.automargin}


@dataclass(frozen=True, slots=True)
class LegendDefaults:
    """Default legend block: vertical, outside the plot on the right."""

    orientation: LegendOrientation = "v"
    x: float = 1.02
    y: float = 1
    xanchor: str = "left"
    yanchor: str = "top"
    visible: bool = True
    font: FontDefaults = FontDefaults(size=11)

    def as_layout(self) -> dict[str, Any]:
        """Return the layout fragment for this region."""

        return {
            "orientation": self.orientation,
            "x": self.x,
            "y": self.y,
            "xanchor": self.xanchor,
            "yanchor": self.yanchor,
            "visible": self.visible,
            "font": self.font.as_layout(),
        }


@dataclass(frozen=True, slots=True)
class PresentationDefaults:
    """Client presentation policy reconciled into remote chart descriptions.

    Args:
        margin: Margin region defaults.
        font: Global font defaults.
        axis: Defaults for primary and secondary axes.
        legend: Legend defaults (used whole when the source has no legend).
        autosize: Default for ``layout.autosize``.
        showlegend: Default for ``layout.showlegend``.
        config: Renderer interaction config defaults.
    """

    margin: MarginDefaults = MarginDefaults()
    font: FontDefaults = FontDefaults()
    axis: AxisDefaults = AxisDefaults()
    legend: LegendDefaults = LegendDefaults()
    autosize: bool = True
    showlegend: bool = True
    config: Mapping[str, Any] = field(default_factory=dict)


COMPARISON_DEFAULTS: Final[PresentationDefaults] = PresentationDefaults(
    config=MappingProxyType(
        {
            "responsive": True,
            "displayModeBar": True,
            "displaylogo": False,
            "modeBarButtonsToRemove": ("lasso2d", "select2d"),
        }
    ),
)

PLOT_VIEWER_DEFAULTS: Final[PresentationDefaults] = PresentationDefaults(
    config=MappingProxyType(
        {
            "responsive": True,
            "displayModeBar": True,
        }
    ),
)
