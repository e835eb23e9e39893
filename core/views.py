"""Views for the OpenChemFacts dashboard and its chart JSON endpoints."""

from __future__ import annotations

import json
import logging
from collections.abc import Callable
from typing import Any

from django.http import HttpRequest, HttpResponse, JsonResponse, QueryDict
from django.shortcuts import render
from django.views.decorators.http import require_GET, require_http_methods

from analysis.ec10eq_dataset import DatasetShapeError
from core.api_client import ApiError
from core.charting.schema import ChartDescription, NoChartData
from core.charting.validator import InvalidChartDescription
from core.forms import ComparisonForm, SubstanceForm
from core.search import filter_substances, parse_cas_list
from core.services import (
    MAX_COMPARISON_SUBSTANCES,
    effect_factors,
    load_cas_list,
    load_chemical_info,
    load_comparison_chart,
    load_ec10eq_chart,
    load_ssd_chart,
    load_stats,
)

logger = logging.getLogger(__name__)


@require_GET
def dashboard(request: HttpRequest) -> HttpResponse:
    """Render the dashboard with the EC10eq chart for the selected substance.

    The chart is embedded with `json_script` and rendered by the page script
    with plotly.js; comparisons are fetched through `comparison_chart_api`.
    """

    form = SubstanceForm(request.GET or None)
    context: dict[str, Any] = {
        "form": form,
        "chart": None,
        "chart_message": None,
        "chemical_info": None,
        "effect_factors": [],
        "max_comparison": MAX_COMPARISON_SUBSTANCES,
        "stats": None,
        "selected_cas": None,
    }
    try:
        context["stats"] = load_stats() or None
    except ApiError as exc:
        logger.info("Upstream statistics unavailable: %s", exc.message)
    if form.is_bound and form.is_valid() and form.cleaned_data.get("cas"):
        cas = form.cleaned_data["cas"]
        context["selected_cas"] = cas
        try:
            result = load_ec10eq_chart(cas, color_mode=form.cleaned_data["color_by"])
        except ApiError as exc:
            context["chart_message"] = exc.message
        except (DatasetShapeError, InvalidChartDescription) as exc:
            logger.warning("Unusable EC10eq payload for CAS %s: %s", cas, exc)
            context["chart_message"] = "The data server returned an unusable chart."
        else:
            if isinstance(result, NoChartData):
                context["chart_message"] = result.reason
            else:
                context["chart"] = result.as_json()
        try:
            info = load_chemical_info(cas)
        except ApiError:
            info = {}
        context["chemical_info"] = info or None
        context["effect_factors"] = effect_factors(info)
    return render(request, "core/dashboard.html", context)


@require_GET
def ec10eq_chart_api(request: HttpRequest, cas: str) -> JsonResponse:
    """Return the EC10eq chart (or an empty marker) for one substance."""

    form = SubstanceForm({"cas": cas, "color_by": request.GET.get("color_by", "")})
    if not form.is_valid() or not form.cleaned_data.get("cas"):
        return _form_error_response(form)
    return _chart_response(
        lambda: load_ec10eq_chart(form.cleaned_data["cas"], color_mode=form.cleaned_data["color_by"]),
        label=f"EC10eq {form.cleaned_data['cas']}",
    )


@require_GET
def ssd_chart_api(request: HttpRequest, cas: str) -> JsonResponse:
    """Return the species-sensitivity distribution chart for one substance."""

    form = SubstanceForm({"cas": cas})
    if not form.is_valid() or not form.cleaned_data.get("cas"):
        return _form_error_response(form)
    return _chart_response(lambda: load_ssd_chart(form.cleaned_data["cas"]), label=f"SSD {form.cleaned_data['cas']}")


@require_http_methods(["GET", "POST"])
def comparison_chart_api(request: HttpRequest) -> JsonResponse:
    """Return the SSD comparison chart for two or three substances.

    GET reads repeated ``cas`` query parameters; POST reads a JSON body with a
    ``cas_list`` array.
    """

    if request.method == "POST":
        try:
            body = json.loads(request.body or b"{}")
        except (UnicodeDecodeError, json.JSONDecodeError):
            return JsonResponse({"status": "error", "errors": {"cas": ["Request body must be JSON."]}}, status=400)
        cas_list = body.get("cas_list") if isinstance(body, dict) else None
        data = QueryDict(mutable=True)
        if isinstance(cas_list, list):
            data.setlist("cas", [str(value) for value in cas_list])
    else:
        data = request.GET
    form = ComparisonForm(data)
    if not form.is_valid():
        return _form_error_response(form)
    selection = form.cleaned_data["cas"]
    return _chart_response(lambda: load_comparison_chart(selection), label=f"comparison {', '.join(selection)}")


@require_GET
def substance_search_api(request: HttpRequest) -> JsonResponse:
    """Return JSON substance matches for the CAS picker typeahead."""

    query = (request.GET.get("q") or "").strip()
    if not query:
        return JsonResponse({"query": "", "results": []})
    try:
        items = parse_cas_list(load_cas_list())
    except ApiError as exc:
        return JsonResponse({"status": "error", "message": exc.message}, status=502)
    results = filter_substances(items, query=query, exclude=request.GET.getlist("exclude"))
    return JsonResponse({"query": query, "results": [item.as_json() for item in results]})


def _chart_response(loader: Callable[[], ChartDescription | NoChartData], *, label: str) -> JsonResponse:
    """Run a chart loader and translate its outcome into a JSON response."""

    try:
        result = loader()
    except ApiError as exc:
        status = 404 if exc.is_not_found else 502
        return JsonResponse({"status": "error", "message": exc.message}, status=status)
    except (DatasetShapeError, InvalidChartDescription) as exc:
        logger.warning("Unusable upstream payload for %s: %s", label, exc)
        return JsonResponse(
            {"status": "error", "message": "The data server returned an unusable chart."},
            status=502,
        )
    if isinstance(result, NoChartData):
        return JsonResponse({"status": "empty", "message": result.reason, "cas": result.cas})
    return JsonResponse({"status": "ok", "chart": result.as_json()})


def _form_error_response(form: SubstanceForm | ComparisonForm) -> JsonResponse:
    errors = {name: [str(message) for message in messages] for name, messages in form.errors.items()}
    if not errors:
        errors = {"cas": ["A CAS number is required."]}
    return JsonResponse({"status": "error", "errors": errors}, status=400)
