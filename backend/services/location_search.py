"""
Location search orchestration: compose query, check cache, call the proxy,
normalize, filter by region, cache the result.
"""
from __future__ import annotations

import json
import logging
from typing import Any, List, Optional

import requests

from domain.models import SearchOptions, SearchOutcome, Suggestion
from services.errors import UpstreamFailure
from services.geo_filter import compose_query, filter_by_region
from services.search_cache import SearchCache, get_default_search_cache
from services.serp_normalizer import normalize_payload
from settings import settings


class LocationSearchService:
    def __init__(
        self,
        endpoint: Optional[str] = None,
        cache: Optional[SearchCache] = None,
        session: Optional[requests.Session] = None,
        timeout: Optional[float] = None,
        locale: str = "en",
    ):
        self.endpoint = endpoint or settings.LOCATION_SEARCH_ENDPOINT
        self.cache = cache or get_default_search_cache()
        self.session = session or requests.Session()
        self.timeout = timeout or settings.SERP_TIMEOUT_SECONDS
        self.locale = locale
        self.logger = logging.getLogger(__name__)

    def _fetch(self, query: str, country: Optional[str], options: SearchOptions) -> Any:
        params = {"q": query, "hl": self.locale}
        if country:
            params["country"] = country
        if options.near_center is not None:
            params["nearCenter"] = json.dumps(options.near_center.to_dict())

        resp = self.session.get(self.endpoint, params=params, timeout=self.timeout)
        if not resp.ok:
            raise UpstreamFailure(
                f"Location search proxy error: HTTP {resp.status_code}",
                status_code=resp.status_code,
            )
        return resp.json()

    def search(
        self,
        query: str,
        country: Optional[str] = None,
        options: Optional[SearchOptions] = None,
    ) -> SearchOutcome:
        """
        Run one search and report failures on the outcome instead of raising.

        Empty queries return an empty outcome without touching cache or network.
        """
        if not query or not query.strip():
            return SearchOutcome()

        opts = options or SearchOptions()
        composed = compose_query(query, opts.region_name)
        key = self.cache.build_key(composed)

        cached = self.cache.get(key)
        if cached is not None:
            self.logger.debug("LocationSearchService.search: cache hit key=%r (%d results)", key, len(cached))
            return SearchOutcome(suggestions=cached, from_cache=True)

        try:
            data = self._fetch(composed, country, opts)
            suggestions = normalize_payload(data, query=query)
            suggestions = filter_by_region(suggestions, opts.region_name, opts.bbox)
        except Exception as exc:
            self.logger.warning("Location search failed for q=%r: %s", composed, exc)
            return SearchOutcome(error=str(exc) or exc.__class__.__name__)

        self.cache.put(key, suggestions)
        self.logger.debug(
            "LocationSearchService.search: q=%r country=%s region=%s got %d results",
            composed,
            country,
            opts.region_name,
            len(suggestions),
        )
        return SearchOutcome(suggestions=suggestions)

    def search_locations(
        self,
        query: str,
        country: Optional[str] = None,
        options: Optional[SearchOptions] = None,
    ) -> List[Suggestion]:
        """Never raises; a failed search looks the same as a search with no matches."""
        return self.search(query, country, options).suggestions


_default_location_search_service: Optional[LocationSearchService] = None


def get_default_location_search_service() -> LocationSearchService:
    global _default_location_search_service
    if _default_location_search_service is None:
        _default_location_search_service = LocationSearchService()
    return _default_location_search_service


def search_locations(
    query: str,
    country: Optional[str] = None,
    options: Optional[SearchOptions] = None,
) -> List[Suggestion]:
    return get_default_location_search_service().search_locations(query, country, options)
