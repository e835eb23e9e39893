"""Rendering-surface lifecycle for chart descriptions.

A surface owns at most one renderer handle. Applying a new chart always runs
"unregister resize listener -> purge previous handle -> render -> register
listener", and results for a superseded selection are dropped instead of
overwriting a newer chart.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Hashable
from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable

from .schema import ChartDescription, NoChartData

logger = logging.getLogger(__name__)


class ChartRenderer(Protocol):
    """The rendering engine, treated as an opaque collaborator."""

    def render(self, container: Any, data: list[Any], layout: dict[str, Any], config: dict[str, Any]) -> None:
        """Instantiate a chart in `container`."""

    def purge(self, container: Any) -> None:
        """Release everything the renderer holds for `container`."""


@runtime_checkable
class ResizableRenderer(ChartRenderer, Protocol):
    """A renderer that can refit a live chart to its container."""

    def resize(self, container: Any) -> None:
        """Relayout the chart in `container` to the current container size."""


class ResizeEvents(Protocol):
    """Source of window-resize notifications."""

    def add_listener(self, callback: Callable[[], None]) -> None:
        """Register a resize callback."""

    def remove_listener(self, callback: Callable[[], None]) -> None:
        """Unregister a previously registered resize callback."""


@dataclass(frozen=True, slots=True)
class SelectionToken:
    """Identifies one selection request on a surface.

    Args:
        selection: The selected key (e.g. a CAS number or a tuple of them).
        sequence: Monotonic request counter on the owning surface.
    """

    selection: Hashable
    sequence: int


class ChartSurface:
    """A display surface bound to one renderer container.

    Args:
        container: Renderer-specific target (DOM node id, output path, ...).
        renderer: Rendering engine used for render/purge; resize events
            reach it only when it is a `ResizableRenderer`.
        resize_events: Optional resize notification source.
    """

    def __init__(
        self,
        container: Any,
        *,
        renderer: ChartRenderer,
        resize_events: ResizeEvents | None = None,
    ) -> None:
        self.container = container
        self._renderer = renderer
        self._resize_events = resize_events
        self._sequence = 0
        self._current: SelectionToken | None = None
        self._has_handle = False
        self._resize_handler: Callable[[], None] | None = None

    @property
    def has_chart(self) -> bool:
        """True while a renderer handle is alive on this surface."""

        return self._has_handle

    def begin(self, selection: Hashable) -> SelectionToken:
        """Start a new selection; earlier tokens become stale."""

        self._sequence += 1
        self._current = SelectionToken(selection=selection, sequence=self._sequence)
        return self._current

    def is_current(self, token: SelectionToken) -> bool:
        """Return True when `token` belongs to the latest selection."""

        return self._current is not None and token.sequence == self._current.sequence

    def show(self, result: ChartDescription | NoChartData, *, token: SelectionToken | None = None) -> bool:
        """Apply a chart (or an empty result) to the surface.

        Args:
            result: Chart description to render, or NoChartData to leave the
                surface empty.
            token: Selection token returned by `begin`; stale tokens are ignored.

        Returns:
            True when the surface was updated, False when `token` was stale.
        """

        if token is not None and not self.is_current(token):
            logger.debug("Dropping stale chart for selection %r on %r", token.selection, self.container)
            return False

        self._teardown()
        if isinstance(result, NoChartData):
            return True

        self._renderer.render(self.container, result.data, result.layout, dict(result.config or {}))
        self._has_handle = True
        if self._resize_events is not None:
            handler = self._on_resize
            self._resize_events.add_listener(handler)
            self._resize_handler = handler
        return True

    def clear(self) -> None:
        """Tear down the current chart and forget the active selection."""

        self._teardown()
        self._current = None

    def __enter__(self) -> ChartSurface:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.clear()

    def _teardown(self) -> None:
        if self._resize_handler is not None and self._resize_events is not None:
            self._resize_events.remove_listener(self._resize_handler)
        self._resize_handler = None
        if self._has_handle:
            self._renderer.purge(self.container)
            self._has_handle = False

    def _on_resize(self) -> None:
        if self._has_handle and isinstance(self._renderer, ResizableRenderer):
            self._renderer.resize(self.container)
