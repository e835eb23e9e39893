"""Tests for reconciling remote chart descriptions with presentation defaults."""

from __future__ import annotations

import copy

import pytest

from core.charting.layout import COMPARISON_DEFAULTS, PLOT_VIEWER_DEFAULTS, PresentationDefaults
from core.charting.reconciler import merge_fields, reconcile
from core.charting.schema import ChartDescription
from core.charting.validator import InvalidChartDescription

pytestmark = pytest.mark.unit


def _fully_specified() -> dict:
    return {
        "data": [{"type": "scatter", "x": [1, 2], "y": [3, 4]}],
        "layout": {
            "autosize": False,
            "showlegend": False,
            "margin": {"l": 10, "r": 20, "t": 30, "b": 40, "pad": 0},
            "font": {"size": 9},
            "xaxis": {"automargin": False, "type": "log"},
            "yaxis": {"automargin": False},
            "legend": {
                "orientation": "h",
                "x": 0,
                "y": -0.2,
                "xanchor": "center",
                "yanchor": "bottom",
                "visible": False,
                "font": {"size": 8},
            },
            "annotations": [{"text": "HC20"}],
        },
        "config": {
            "responsive": False,
            "displayModeBar": False,
            "displaylogo": True,
            "modeBarButtonsToRemove": [],
        },
    }


def test_fully_specified_description_is_returned_unchanged() -> None:
    """Reconciling a description that covers every default is the identity."""

    source = _fully_specified()
    expected = copy.deepcopy(source)

    result = reconcile(source, COMPARISON_DEFAULTS)

    assert result.as_json() == expected
    assert source == expected


def test_empty_layout_receives_every_default() -> None:
    """An empty layout is filled with the complete default blocks."""

    result = reconcile({"data": [], "layout": {}}, COMPARISON_DEFAULTS)

    assert result.layout["autosize"] is True
    assert result.layout["showlegend"] is True
    assert result.layout["margin"] == {"l": 80, "r": 120, "t": 100, "b": 120, "pad": 10}
    assert result.layout["font"] == {"size": 12}
    assert result.layout["xaxis"] == {"automargin": True}
    assert result.layout["legend"] == {
        "orientation": "v",
        "x": 1.02,
        "y": 1,
        "xanchor": "left",
        "yanchor": "top",
        "visible": True,
        "font": {"size": 11},
    }
    assert result.config == {
        "responsive": True,
        "displayModeBar": True,
        "displaylogo": False,
        "modeBarButtonsToRemove": ["lasso2d", "select2d"],
    }


def test_source_fields_are_never_dropped() -> None:
    """Every source key survives with its value, in every region."""

    source = {
        "data": [{"type": "scatter"}],
        "layout": {
            "title": {"text": "SSD"},
            "shapes": [{"type": "line"}],
            "images": [{"source": "logo.png"}],
            "xaxis": {"title": {"text": "Concentration"}, "type": "log"},
            "legend": {"x": 0.5},
            "margin": {"l": 5},
        },
    }

    layout = reconcile(source).layout

    for key, value in source["layout"].items():
        if isinstance(value, dict):
            for inner_key, inner_value in value.items():
                assert layout[key][inner_key] == inner_value
        else:
            assert layout[key] == value


def test_margin_fields_merge_individually() -> None:
    """Supplying one margin side keeps the other defaults."""

    layout = reconcile({"data": [], "layout": {"margin": {"l": 5}}}).layout

    assert layout["margin"] == {"l": 5, "r": 120, "t": 100, "b": 120, "pad": 10}


def test_legend_font_merges_field_by_field() -> None:
    """A partial legend keeps its fields; the nested font block is merged too."""

    layout = reconcile(
        {"data": [], "layout": {"legend": {"orientation": "h", "font": {"family": "Arial"}}}}
    ).layout

    assert layout["legend"]["orientation"] == "h"
    assert layout["legend"]["xanchor"] == "left"
    assert layout["legend"]["font"] == {"family": "Arial", "size": 11}


def test_secondary_axes_are_kept_with_automargin() -> None:
    """xaxis3 and yaxis2 survive unchanged apart from automargin."""

    source = {
        "data": [],
        "layout": {
            "xaxis3": {"anchor": "y3", "domain": [0, 0.3]},
            "yaxis2": {"overlaying": "y", "side": "right", "automargin": False},
        },
    }

    layout = reconcile(source).layout

    assert layout["xaxis3"] == {"anchor": "y3", "domain": [0, 0.3], "automargin": True}
    assert layout["yaxis2"] == {"overlaying": "y", "side": "right", "automargin": False}


def test_config_fields_override_matching_defaults() -> None:
    """Source config wins per key; unmatched defaults are kept."""

    result = reconcile({"data": [], "layout": {}, "config": {"displaylogo": True, "scrollZoom": True}})

    assert result.config is not None
    assert result.config["displaylogo"] is True
    assert result.config["scrollZoom"] is True
    assert result.config["modeBarButtonsToRemove"] == ["lasso2d", "select2d"]


def test_traces_are_passed_through_untouched() -> None:
    """The trace list keeps the very same trace objects."""

    traces = [{"type": "scatter", "y": [1]}, {"type": "bar", "y": [2]}]

    result = reconcile({"data": traces, "layout": {}})

    assert all(out is src for out, src in zip(result.data, traces, strict=True))


def test_reconcile_accepts_chart_descriptions() -> None:
    """Locally built descriptions reconcile like remote payloads."""

    result = reconcile(ChartDescription(data=[], layout={"margin": {"r": 1}}), PLOT_VIEWER_DEFAULTS)

    assert result.layout["margin"]["r"] == 1
    assert result.config == {"responsive": True, "displayModeBar": True}


def test_default_policy_without_config_yields_empty_config() -> None:
    """A policy with no config defaults still returns a config object."""

    result = reconcile({"data": [], "layout": {}}, PresentationDefaults())

    assert result.config == {}


@pytest.mark.parametrize(
    "payload",
    [
        {"data": []},
        {"layout": {}},
        {"data": [], "layout": {"legend": "top"}},
        {"data": [], "layout": {"xaxis2": None}},
    ],
)
def test_structurally_invalid_sources_raise(payload: dict) -> None:
    """Missing trace lists, layouts or object regions are refused."""

    with pytest.raises(InvalidChartDescription):
        reconcile(payload)


def test_merge_fields_does_not_mutate_inputs() -> None:
    """Merging returns new dictionaries."""

    source = {"font": {"size": 3}}
    defaults = {"font": {"size": 9, "family": "Arial"}, "x": 1}

    merged = merge_fields(source, defaults)

    assert merged == {"font": {"size": 3, "family": "Arial"}, "x": 1}
    assert source == {"font": {"size": 3}}
