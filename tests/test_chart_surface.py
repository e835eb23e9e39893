"""Tests for the chart surface render/purge lifecycle."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

import pytest

from core.charting.schema import ChartDescription, NoChartData
from core.charting.surface import ChartSurface, ResizableRenderer

pytestmark = pytest.mark.unit


class RecordingRenderer:
    """Renderer double that records every call in order."""

    def __init__(self) -> None:
        self.calls: list[tuple[Any, ...]] = []

    def render(self, container: Any, data: list[Any], layout: dict[str, Any], config: dict[str, Any]) -> None:
        self.calls.append(("render", container, layout.get("title"), config))

    def purge(self, container: Any) -> None:
        self.calls.append(("purge", container))

    def resize(self, container: Any) -> None:
        self.calls.append(("resize", container))


class RecordingResizeEvents:
    """Resize source double tracking registered listeners."""

    def __init__(self) -> None:
        self.listeners: list[Callable[[], None]] = []
        self.log: list[str] = []

    def add_listener(self, callback: Callable[[], None]) -> None:
        self.listeners.append(callback)
        self.log.append("add")

    def remove_listener(self, callback: Callable[[], None]) -> None:
        self.listeners.remove(callback)
        self.log.append("remove")

    def fire(self) -> None:
        for listener in list(self.listeners):
            listener()


def _chart(title: str) -> ChartDescription:
    return ChartDescription(data=[{"type": "scatter"}], layout={"title": title}, config={"responsive": True})


def test_first_render_does_not_purge() -> None:
    """Nothing is purged before the first chart exists."""

    renderer = RecordingRenderer()
    surface = ChartSurface("plot", renderer=renderer)

    assert surface.show(_chart("one"))
    assert renderer.calls == [("render", "plot", "one", {"responsive": True})]
    assert surface.has_chart


def test_replacing_a_chart_purges_before_rendering() -> None:
    """The previous handle is purged before the new chart is rendered."""

    renderer = RecordingRenderer()
    events = RecordingResizeEvents()
    surface = ChartSurface("plot", renderer=renderer, resize_events=events)

    surface.show(_chart("one"))
    surface.show(_chart("two"))

    assert [call[0] for call in renderer.calls] == ["render", "purge", "render"]
    assert events.log == ["add", "remove", "add"]
    assert len(events.listeners) == 1


def test_resize_events_reach_only_the_live_chart() -> None:
    """Resize notifications resize the current chart; none remain after clear."""

    renderer = RecordingRenderer()
    events = RecordingResizeEvents()
    surface = ChartSurface("plot", renderer=renderer, resize_events=events)

    surface.show(_chart("one"))
    events.fire()
    surface.clear()
    events.fire()

    assert renderer.calls == [
        ("render", "plot", "one", {"responsive": True}),
        ("resize", "plot"),
        ("purge", "plot"),
    ]
    assert events.listeners == []


def test_stale_selection_never_overwrites_a_newer_chart() -> None:
    """A slow result for an older selection is dropped."""

    renderer = RecordingRenderer()
    surface = ChartSurface("plot", renderer=renderer)

    slow = surface.begin("71-43-2")
    fast = surface.begin("50-00-0")

    assert surface.show(_chart("fast"), token=fast)
    assert not surface.show(_chart("slow"), token=slow)
    assert renderer.calls == [("render", "plot", "fast", {"responsive": True})]
    assert surface.is_current(fast)
    assert not surface.is_current(slow)


def test_no_chart_data_clears_the_surface() -> None:
    """An empty result purges the old chart and renders nothing."""

    renderer = RecordingRenderer()
    surface = ChartSurface("plot", renderer=renderer)

    surface.show(_chart("one"))
    assert surface.show(NoChartData(cas="71-43-2"))

    assert [call[0] for call in renderer.calls] == ["render", "purge"]
    assert not surface.has_chart


def test_context_manager_purges_on_exit() -> None:
    """Leaving the context tears the chart down."""

    renderer = RecordingRenderer()
    with ChartSurface("plot", renderer=renderer) as surface:
        surface.show(_chart("one"))

    assert renderer.calls[-1] == ("purge", "plot")


def test_missing_config_renders_with_an_empty_config() -> None:
    """Descriptions without config hand the renderer an empty mapping."""

    renderer = RecordingRenderer()
    ChartSurface("plot", renderer=renderer).show(ChartDescription(data=[], layout={}))

    assert renderer.calls == [("render", "plot", None, {})]


class MinimalRenderer:
    """Renderer double without resize support."""

    def __init__(self) -> None:
        self.calls: list[str] = []

    def render(self, container: Any, data: list[Any], layout: dict[str, Any], config: dict[str, Any]) -> None:
        self.calls.append("render")

    def purge(self, container: Any) -> None:
        self.calls.append("purge")


def test_resizable_renderer_protocol_is_detected() -> None:
    """Only renderers declaring resize satisfy ResizableRenderer."""

    assert isinstance(RecordingRenderer(), ResizableRenderer)
    assert not isinstance(MinimalRenderer(), ResizableRenderer)


def test_resize_is_skipped_for_renderers_without_resize() -> None:
    """Resize events are ignored when the renderer cannot resize."""

    renderer = MinimalRenderer()
    events = RecordingResizeEvents()
    surface = ChartSurface("plot", renderer=renderer, resize_events=events)

    surface.show(_chart("one"))
    events.fire()

    assert renderer.calls == ["render"]
    assert len(events.listeners) == 1
