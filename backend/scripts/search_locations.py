"""Run a location search against the configured proxy and print the suggestions.

Usage (from `backend/`):
    python -m scripts.search_locations "Surya Mahal" --region Rajasthan
    python -m scripts.search_locations "Bhilwara station" --near 25.35,74.64 --json

The proxy endpoint comes from LOCATION_SEARCH_ENDPOINT. Exit status is 1 when
the search failed (proxy down, bad response), 0 otherwise, even with no matches.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

load_dotenv(Path(__file__).resolve().parents[1] / ".env")

from domain.models import NearCenter, SearchOptions, Suggestion
from services.location_search import LocationSearchService
from services.search_cache import SearchCache, SqliteStorage
from settings import settings

LOG = logging.getLogger("search_locations")


def parse_near(value: str) -> NearCenter:
    try:
        lat_s, lng_s = value.split(",", 1)
        return NearCenter(lat=float(lat_s), lng=float(lng_s))
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"expected LAT,LNG, got {value!r}") from exc


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Search locations through the SerpAPI proxy")
    parser.add_argument("query", help="free-text place query")
    parser.add_argument("--country", default=None, help="ISO2 country code (proxy default: IN)")
    parser.add_argument("--region", default=None, help="region name to append and filter by")
    parser.add_argument("--near", type=parse_near, default=None, metavar="LAT,LNG", help="bias results around a point")
    parser.add_argument("--endpoint", default=None, help="proxy URL (default: LOCATION_SEARCH_ENDPOINT)")
    parser.add_argument("--json", action="store_true", help="print the suggestions as a JSON array")
    parser.add_argument("--no-cache", action="store_true", help="clear the search cache before searching")
    parser.add_argument("-v", "--verbose", action="store_true")
    return parser


def format_suggestion(s: Suggestion) -> str:
    line = s.place_name or s.text
    if s.coordinates is not None:
        lng, lat = s.coordinates
        line += f"  ({lat:.5f}, {lng:.5f})"
    return line


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO)

    if settings.SEARCH_CACHE_PATH:
        cache = SearchCache(SqliteStorage(settings.SEARCH_CACHE_PATH))
    else:
        cache = SearchCache()
    if args.no_cache:
        cache.clear()

    service = LocationSearchService(endpoint=args.endpoint, cache=cache)
    options = SearchOptions(region_name=args.region, near_center=args.near)
    LOG.info("Searching %s for %r", service.endpoint, args.query)
    outcome = service.search(args.query, args.country, options)

    if args.json:
        print(json.dumps([s.to_dict() for s in outcome.suggestions], indent=2))
    else:
        for s in outcome.suggestions:
            print(format_suggestion(s))
        if not outcome.suggestions:
            print("No locations found")

    if not outcome.ok:
        LOG.error("Search failed: %s", outcome.error)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
