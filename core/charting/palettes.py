"""Fixed color and marker tables for EC10eq charts.

These tables are configuration data shared with the upstream plotting code.
Hex strings and symbol names must stay identical so charts look the same
whichever side builds them.
"""

from __future__ import annotations

from collections.abc import Mapping
from functools import lru_cache
from types import MappingProxyType
from typing import Final

import plotly.graph_objects as go

DEFAULT_COLOR: Final[str] = "#000000"
DEFAULT_SYMBOL: Final[str] = "circle"

TROPHIC_GROUP_COLORS: Final[Mapping[str, str]] = MappingProxyType(
    {
        "algae": "#2ca02c",
        "crustaceans": "#1f77b4",
        "fish": "#ff7f0e",
        "plants": "#9467bd",
        "molluscs": "#8c564b",
        "insects": "#e377c2",
        "amphibians": "#7f7f7f",
        "annelids": "#bcbd22",
    }
)

TROPHIC_GROUP_SYMBOLS: Final[Mapping[str, str]] = MappingProxyType(
    {
        "algae": "circle",
        "crustaceans": "square",
        "fish": "triangle-up",
        "plants": "diamond",
        "molluscs": "diamond",
        "insects": "x",
        "amphibians": "star",
        "annelids": "hourglass",
    }
)

# Symbol names used by older plotting code that the browser renderer rejects.
SYMBOL_ALIASES: Final[Mapping[str, str]] = MappingProxyType({"hash": "x"})

CATEGORY_PALETTE: Final[tuple[str, ...]] = (
    "#1f77b4",
    "#ff7f0e",
    "#2ca02c",
    "#d62728",
    "#9467bd",
    "#8c564b",
    "#e377c2",
    "#7f7f7f",
    "#bcbd22",
    "#17becf",
)


def trophic_group_color(group: str) -> str:
    """Return the fixed color for a trophic group (case-insensitive)."""

    return TROPHIC_GROUP_COLORS.get(group.lower(), DEFAULT_COLOR)


def trophic_group_symbol(group: str) -> str:
    """Return a renderer-safe marker symbol for a trophic group (case-insensitive)."""

    return resolve_symbol(TROPHIC_GROUP_SYMBOLS.get(group.lower(), DEFAULT_SYMBOL))


def resolve_symbol(symbol: str) -> str:
    """Map a symbol name onto the renderer's marker vocabulary.

    Known-bad names are aliased first; anything the renderer still rejects
    falls back to `DEFAULT_SYMBOL`.
    """

    candidate = SYMBOL_ALIASES.get(symbol, symbol)
    if is_supported_symbol(candidate):
        return candidate
    return DEFAULT_SYMBOL


@lru_cache(maxsize=64)
def is_supported_symbol(symbol: str) -> bool:
    """Return True when plotly accepts `symbol` as a scatter marker symbol."""

    try:
        go.scatter.Marker(symbol=symbol)
    except ValueError:
        return False
    return True


def palette_color(position: int) -> str:
    """Return the cyclic category palette color for a sorted position."""

    return CATEGORY_PALETTE[position % len(CATEGORY_PALETTE)]
