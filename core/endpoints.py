"""Upstream OpenChemFacts API endpoint paths."""

from __future__ import annotations

from typing import Final
from urllib.parse import quote

ROOT: Final[str] = "/"
CAS_LIST: Final[str] = "/api/cas-list"
COMPARISON_PLOT: Final[str] = "/api/comparison-plot"
STATS: Final[str] = "/api/stats"


def chemical_info(cas: str) -> str:
    """Return the chemical-info endpoint for a CAS number."""

    return f"/api/chemical-info/{quote(cas, safe='')}"


def ssd_plot(cas: str) -> str:
    """Return the SSD chart endpoint for a CAS number."""

    return f"/api/ssd-plot/{quote(cas, safe='')}"


def ec10eq_plot(cas: str) -> str:
    """Return the EC10eq endpoint (dataset or chart) for a CAS number."""

    return f"/api/ec10eq-plot/{quote(cas, safe='')}"
