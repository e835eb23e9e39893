"""Export substance charts to standalone HTML files.

Each chart is fetched through the same services as the dashboard views and
written by the plotly HTML renderer, one file per substance (or one file for a
comparison).
"""

from __future__ import annotations

from pathlib import Path

from django.core.management.base import BaseCommand, CommandError

from analysis.cas import InvalidCasNumber, normalize_cas
from analysis.ec10eq_dataset import DatasetShapeError
from core.api_client import ApiError
from core.charting.plotly_renderer import PlotlyHtmlRenderer
from core.charting.schema import COLOR_MODES, NoChartData
from core.charting.surface import ChartSurface
from core.charting.validator import InvalidChartDescription
from core.services import load_comparison_chart, load_ec10eq_chart, load_ssd_chart


class Command(BaseCommand):
    """Write EC10eq, SSD or comparison charts as HTML files."""

    help = "Export EC10eq, SSD or comparison charts for CAS numbers to HTML files."

    def add_arguments(self, parser) -> None:
        """Add command arguments."""

        parser.add_argument("cas", nargs="+", help="CAS registry numbers.")
        parser.add_argument("--out", default="charts", help="Output directory (default: charts).")
        parser.add_argument(
            "--kind",
            choices=("ec10eq", "ssd", "comparison"),
            default="ec10eq",
            help="Chart kind to export.",
        )
        parser.add_argument(
            "--color-by",
            choices=COLOR_MODES,
            default="trophic_group",
            help="Marker coloring for EC10eq charts.",
        )
        parser.add_argument(
            "--inline-plotlyjs",
            action="store_true",
            help="Embed plotly.js in each file instead of loading it from the CDN.",
        )

    def handle(self, *args, **options) -> None:
        """Run the command."""

        try:
            cas_numbers = [normalize_cas(value) for value in options["cas"]]
        except InvalidCasNumber as exc:
            raise CommandError(str(exc)) from exc

        out_dir = Path(options["out"])
        renderer = PlotlyHtmlRenderer(include_plotlyjs="inline" if options["inline_plotlyjs"] else "cdn")
        kind = options["kind"]

        if kind == "comparison":
            target = out_dir / f"comparison_{'_'.join(cas_numbers)}.html"
            try:
                result = load_comparison_chart(cas_numbers)
            except ValueError as exc:
                raise CommandError(str(exc)) from exc
            except ApiError as exc:
                raise CommandError(f"Comparison chart failed: {exc.message}") from exc
            ChartSurface(target, renderer=renderer).show(result)
            self.stdout.write(self.style.SUCCESS(f"Wrote {target}"))
            return

        written = 0
        for cas in cas_numbers:
            target = out_dir / f"{kind}_{cas}.html"
            try:
                if kind == "ssd":
                    result = load_ssd_chart(cas)
                else:
                    result = load_ec10eq_chart(cas, color_mode=options["color_by"])
            except ApiError as exc:
                raise CommandError(f"{kind} chart for {cas} failed: {exc.message}") from exc
            except (DatasetShapeError, InvalidChartDescription) as exc:
                raise CommandError(f"{kind} chart for {cas} is unusable: {exc}") from exc

            if isinstance(result, NoChartData):
                self.stdout.write(self.style.WARNING(f"{cas}: {result.reason}"))
                continue
            ChartSurface(target, renderer=renderer).show(result)
            written += 1
            self.stdout.write(f"Wrote {target}")

        self.stdout.write(self.style.SUCCESS(f"Exported {written} chart(s) to {out_dir}"))
