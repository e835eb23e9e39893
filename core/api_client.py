"""HTTP client for the upstream OpenChemFacts API.

Every transport or HTTP failure is surfaced as an `ApiError` carrying a
classified, user-facing message and the HTTP status (0 for network-level
failures). There is no retry here; callers decide how to degrade.
"""

from __future__ import annotations

import json
import logging
import urllib.error
import urllib.request
from typing import Any, Final

from django.conf import settings

logger = logging.getLogger(__name__)

STATUS_MESSAGES: Final[dict[int, str]] = {
    400: "Invalid request",
    401: "Unauthorized",
    403: "Forbidden",
    404: "Resource not found",
    500: "Internal server error",
    503: "Service temporarily unavailable",
}


class ApiError(Exception):
    """A classified failure talking to the upstream API.

    Args:
        message: User-facing message.
        status: HTTP status code, or 0 for network/decoding failures.
        status_text: HTTP reason phrase or failure category.
    """

    def __init__(self, message: str, *, status: int, status_text: str) -> None:
        super().__init__(message)
        self.message = message
        self.status = status
        self.status_text = status_text

    @property
    def is_not_found(self) -> bool:
        """True for upstream 404 responses."""

        return self.status == 404

    @property
    def is_network_error(self) -> bool:
        """True when the upstream API could not be reached at all."""

        return self.status == 0 and self.status_text == "Network Error"


def fetch_json(
    endpoint: str,
    *,
    method: str = "GET",
    payload: Any = None,
    base_url: str | None = None,
    timeout: int | None = None,
) -> Any:
    """Fetch and decode a JSON document from the upstream API.

    Args:
        endpoint: Endpoint path (see `core.endpoints`).
        method: HTTP method.
        payload: Optional JSON-serializable request body.
        base_url: Override for `settings.OPENCHEMFACTS_API_BASE_URL`.
        timeout: Override for `settings.OPENCHEMFACTS_API_TIMEOUT` (seconds).

    Returns:
        The decoded JSON payload.

    Raises:
        ApiError: On HTTP errors, network failures or undecodable bodies.
    """

    root = (base_url if base_url is not None else settings.OPENCHEMFACTS_API_BASE_URL).rstrip("/")
    url = f"{root}{endpoint}"
    body = json.dumps(payload).encode("utf-8") if payload is not None else None
    request = urllib.request.Request(
        url,
        data=body,
        method=method,
        headers={
            "Content-Type": "application/json",
            "Accept": "application/json",
            "User-Agent": "openChemFacts-dashboard",
        },
    )
    logger.debug("Fetching %s %s", method, url)
    try:
        with urllib.request.urlopen(
            request, timeout=timeout if timeout is not None else settings.OPENCHEMFACTS_API_TIMEOUT
        ) as response:
            raw = response.read()
    except urllib.error.HTTPError as exc:
        error = _http_error(exc)
        logger.warning("Upstream API error %s on %s: %s", error.status, url, error.message)
        raise error from exc
    except (urllib.error.URLError, TimeoutError, OSError) as exc:
        logger.warning("Upstream API unreachable at %s: %s", url, exc)
        raise ApiError(
            f"Unable to reach the data server ({root}). Check the network connection and that the server is running.",
            status=0,
            status_text="Network Error",
        ) from exc

    try:
        return json.loads(raw.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        logger.warning("Upstream API returned a non-JSON body on %s", url)
        raise ApiError("The data server returned an unreadable response.", status=0, status_text="Invalid Response") from exc


def _http_error(exc: urllib.error.HTTPError) -> ApiError:
    """Classify an HTTP error, preferring the server's own detail message."""

    status = int(exc.code)
    reason = str(exc.reason or "")
    message = STATUS_MESSAGES.get(status, f"Error {status}: {reason}")
    try:
        detail = json.loads(exc.read().decode("utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError, AttributeError):
        detail = None
    if isinstance(detail, dict):
        server_message = detail.get("detail") or detail.get("message")
        if isinstance(server_message, str) and server_message.strip():
            message = server_message.strip()
    return ApiError(message, status=status, status_text=reason)
