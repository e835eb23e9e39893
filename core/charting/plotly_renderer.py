"""Offline renderer writing chart descriptions to standalone HTML files."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Literal

import plotly.io as pio

logger = logging.getLogger(__name__)

PlotlyJsMode = Literal["cdn", "inline", "directory"]


class PlotlyHtmlRenderer:
    """Render chart descriptions through plotly into HTML files.

    The container is the output file path; purging removes the file. Figures
    are written unvalidated so fields only plotly.js knows about survive.

    Args:
        include_plotlyjs: How plotly.js is embedded in the generated page.
    """

    def __init__(self, *, include_plotlyjs: PlotlyJsMode = "cdn") -> None:
        self.include_plotlyjs = include_plotlyjs

    def render(self, container: Any, data: list[Any], layout: dict[str, Any], config: dict[str, Any]) -> None:
        """Write the chart to `container` (a filesystem path)."""

        path = Path(container)
        path.parent.mkdir(parents=True, exist_ok=True)
        pio.write_html(
            {"data": list(data), "layout": resolve_template(layout)},
            file=str(path),
            config=config,
            include_plotlyjs=self.include_plotlyjs,
            full_html=True,
            validate=False,
        )
        logger.debug("Wrote chart HTML to %s", path)

    def purge(self, container: Any) -> None:
        """Delete a previously written chart file."""

        Path(container).unlink(missing_ok=True)

    def resize(self, container: Any) -> None:
        """Static files have a fixed size; nothing to do."""


def resolve_template(layout: dict[str, Any]) -> dict[str, Any]:
    """Expand a named plotly template (e.g. ``"plotly_white"``) into its definition.

    plotly.js only understands template objects; names are a plotly.py
    convenience. Unknown names are left untouched.
    """

    name = layout.get("template")
    if not isinstance(name, str) or name not in pio.templates:
        return layout
    resolved = dict(layout)
    resolved["template"] = pio.templates[name].to_plotly_json()
    return resolved
