"""Thin client for the SerpAPI google_maps engine.

Used by the proxy route only; it holds the API key and never runs in the
caller's process. One GET per call, no retries.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Optional

import requests

from domain.models import NearCenter
from services.errors import MalformedInput, UpstreamFailure
from settings import settings

logger = logging.getLogger(__name__)
_session = requests.Session()

SERP_ENGINE = "google_maps"
NEAR_CENTER_ZOOM = 14


def parse_near_center(raw: Optional[str]) -> Optional[NearCenter]:
    """Parse the `nearCenter` query parameter (`{"lat": .., "lng": ..}`)."""
    if raw is None or raw == "":
        return None
    try:
        data = json.loads(raw)
        return NearCenter(lat=float(data["lat"]), lng=float(data["lng"]))
    except (ValueError, TypeError, KeyError) as exc:
        raise MalformedInput(f"Invalid nearCenter value {raw!r}: {exc}") from exc


def build_serp_params(
    query: str,
    country: str,
    near_center: Optional[NearCenter] = None,
    api_key: Optional[str] = None,
    locale: Optional[str] = None,
) -> dict[str, str]:
    params = {
        "engine": SERP_ENGINE,
        "q": query,
        "api_key": api_key or "",
        "hl": locale or settings.SERP_LOCALE,
        "type": "search",
        "gl": country,
    }
    if near_center is not None:
        params["ll"] = f"@{near_center.lat},{near_center.lng},{NEAR_CENTER_ZOOM}z"
    return params


def fetch_serp_results(params: dict[str, str], timeout: Optional[float] = None) -> Any:
    """GET the provider and return the decoded JSON body.

    Raises UpstreamFailure on network errors, non-2xx statuses and bodies
    that are not JSON.
    """
    url = settings.SERP_API_BASE_URL
    try:
        resp = _session.get(url, params=params, timeout=timeout or settings.SERP_TIMEOUT_SECONDS)
    except requests.RequestException as exc:
        raise UpstreamFailure(f"SerpAPI request failed: {exc}") from exc

    if not 200 <= resp.status_code < 300:
        raise UpstreamFailure(f"SerpAPI error: HTTP {resp.status_code}", status_code=resp.status_code)

    try:
        data = resp.json()
    except ValueError as exc:
        raise UpstreamFailure(f"SerpAPI returned invalid JSON: {exc}") from exc

    logger.debug(
        "fetch_serp_results: q=%r gl=%s local_results=%s place_results=%s",
        params.get("q"),
        params.get("gl"),
        len(data.get("local_results") or []) if isinstance(data, dict) else "-",
        bool(data.get("place_results")) if isinstance(data, dict) else "-",
    )
    return data
