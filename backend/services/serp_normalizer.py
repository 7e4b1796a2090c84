"""
Normalize SerpAPI (google_maps engine) payloads into Suggestion values.

A payload comes in one of a few shapes. `classify_payload` turns it into an
explicit variant so the precedence between them lives in one place:

- LocalResults: a `local_results` list with at least one object (always wins)
- SinglePlace: a `place_results` object
- SuggestionList: a top-level array, as returned by our own proxy endpoint
- EmptyPayload: anything else
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Any, List, Optional, Union

from domain.models import SERPAPI_SOURCE, Coordinates, Suggestion

logger = logging.getLogger(__name__)

_LEADING_SEP = re.compile(r"^,\s*")
_TRAILING_SEP = re.compile(r",\s*$")


@dataclass
class LocalResults:
    items: List[dict]


@dataclass
class SinglePlace:
    place: dict


@dataclass
class SuggestionList:
    items: List[Any]


@dataclass
class EmptyPayload:
    reason: str = field(default="no results")


Payload = Union[LocalResults, SinglePlace, SuggestionList, EmptyPayload]


def classify_payload(data: Any) -> Payload:
    if isinstance(data, dict):
        local = data.get("local_results")
        if isinstance(local, list):
            items = [item for item in local if isinstance(item, dict)]
            if items:
                return LocalResults(items=items)
        place = data.get("place_results")
        if isinstance(place, dict) and place:
            return SinglePlace(place=place)
        return EmptyPayload()
    if isinstance(data, list):
        return SuggestionList(items=data)
    return EmptyPayload(reason=f"unexpected payload type {type(data).__name__}")


def compose_place_name(title: str, address: str) -> str:
    """Join title and address, dropping the separator when either side is empty."""
    composed = f"{title}, {address}"
    composed = _LEADING_SEP.sub("", composed)
    return _TRAILING_SEP.sub("", composed)


def extract_coordinates(gps: Any) -> Optional[Coordinates]:
    if not isinstance(gps, dict):
        return None
    lat = gps.get("latitude")
    lng = gps.get("longitude")
    if lat is None or lng is None:
        return None
    try:
        return (float(lng), float(lat))
    except (TypeError, ValueError):
        return None


def _local_result_to_suggestion(item: dict) -> Suggestion:
    title = str(item.get("title") or item.get("name") or "")
    address = str(item.get("address") or item.get("full_address") or item.get("description") or "")
    suggestion_id = (
        item.get("place_id")
        or item.get("data_id")
        or f"{item.get('position') or ''}-{item.get('title') or ''}"
    )
    return Suggestion(
        id=str(suggestion_id),
        text=title,
        place_name=compose_place_name(title, address),
        coordinates=extract_coordinates(item.get("gps_coordinates")),
        address=address or None,
        source=SERPAPI_SOURCE,
    )


def _place_result_to_suggestion(place: dict, query: str) -> Suggestion:
    title = str(place.get("title") or place.get("name") or query)
    address = str(place.get("address") or place.get("formatted_address") or "")
    suggestion_id = (
        place.get("place_id")
        or place.get("data_id")
        or place.get("cid")
        or place.get("title")
        or place.get("name")
        or query
    )
    return Suggestion(
        id=str(suggestion_id),
        text=title,
        place_name=compose_place_name(title, address),
        coordinates=extract_coordinates(place.get("gps_coordinates")),
        address=address or None,
        source=SERPAPI_SOURCE,
    )


def _suggestion_list(items: List[Any]) -> List[Suggestion]:
    results: List[Suggestion] = []
    for item in items:
        try:
            results.append(Suggestion.from_dict(item))
        except (TypeError, ValueError) as exc:
            logger.warning("Skipping malformed suggestion %r: %s", item, exc)
    return results


def normalize_payload(data: Any, query: str = "") -> List[Suggestion]:
    """
    Map one upstream payload to Suggestions.

    `query` is only used as the id/text of a place result that carries no
    identifying fields.
    """
    payload = classify_payload(data)
    if isinstance(payload, LocalResults):
        return [_local_result_to_suggestion(item) for item in payload.items]
    if isinstance(payload, SinglePlace):
        return [_place_result_to_suggestion(payload.place, query)]
    if isinstance(payload, SuggestionList):
        return _suggestion_list(payload.items)
    logger.debug("normalize_payload: empty payload for q=%r (%s)", query, payload.reason)
    return []
