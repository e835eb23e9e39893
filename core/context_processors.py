"""Template context processors for the OpenChemFacts dashboard."""

from __future__ import annotations

from django.conf import settings
from django.http import HttpRequest


def api_settings(request: HttpRequest) -> dict[str, str]:
    """Expose the upstream API location to all templates.

    Args:
        request: Current request object.

    Returns:
        Context dict with `api_base_url`.
    """

    return {"api_base_url": settings.OPENCHEMFACTS_API_BASE_URL}
