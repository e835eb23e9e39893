"""Tests for the offline plotly HTML renderer."""

from __future__ import annotations

import pytest

from core.charting.plotly_renderer import PlotlyHtmlRenderer, resolve_template
from core.charting.series_builder import build_series
from core.charting.surface import ChartSurface

pytestmark = pytest.mark.integration


def test_renderer_writes_and_purges_html(tmp_path) -> None:
    """Rendering writes a standalone page; purging removes it."""

    chart = build_series(
        {"cas": "71-43-2", "chemical_name": "Benzene", "trophic_groups": {"fish": {"Danio rerio": [{"EC10eq": 2.5}]}}}
    )
    target = tmp_path / "out" / "benzene.html"
    renderer = PlotlyHtmlRenderer()

    surface = ChartSurface(target, renderer=renderer)
    assert surface.show(chart)

    html = target.read_text(encoding="utf-8")
    assert "Danio rerio" in html
    assert "cdn.plot.ly" in html

    surface.clear()
    assert not target.exists()


def test_purge_of_a_missing_file_is_a_no_op(tmp_path) -> None:
    """Purging a container that was never written does not fail."""

    PlotlyHtmlRenderer().purge(tmp_path / "missing.html")


def test_named_templates_are_expanded_for_plotly_js() -> None:
    """Template names are resolved into template objects before writing."""

    layout = {"template": "plotly_white", "title": {"text": "t"}}

    resolved = resolve_template(layout)

    assert isinstance(resolved["template"], dict)
    assert "layout" in resolved["template"]
    assert layout["template"] == "plotly_white"
    assert resolve_template({"template": "no-such-template"}) == {"template": "no-such-template"}


def test_unknown_trace_fields_are_preserved(tmp_path) -> None:
    """Fields plotly.py does not know are written through unchanged."""

    target = tmp_path / "chart.html"

    PlotlyHtmlRenderer().render(target, [{"type": "scatter", "y": [1], "futureAttr": "kept"}], {}, {})

    html = target.read_text(encoding="utf-8")
    assert "futureAttr" in html
    assert "kept" in html
