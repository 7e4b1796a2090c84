"""
Region helpers for location search: query composition and bounding-box filtering.
"""
from __future__ import annotations

from typing import List, Optional, Sequence

from domain.models import BoundingBox, Suggestion

DEFAULT_REGION_NAME = "Rajasthan"

# Approximate Rajasthan bounding box
DEFAULT_REGION_BBOX = BoundingBox(min_lat=23.0, max_lat=30.5, min_lng=69.0, max_lng=78.9)


def compose_query(query: str, region_name: Optional[str] = None) -> str:
    """Trim the query and append the region name unless it is already mentioned."""
    composed = (query or "").strip()
    if region_name and region_name.lower() not in composed.lower():
        composed = f"{composed} {region_name}".strip()
    return composed


def _matches_name(suggestion: Suggestion, region_lower: str) -> bool:
    return region_lower in (suggestion.place_name or "").lower() or region_lower in (
        suggestion.text or ""
    ).lower()


def filter_by_region(
    suggestions: Sequence[Suggestion],
    region_name: Optional[str] = None,
    bbox: Optional[BoundingBox] = None,
) -> List[Suggestion]:
    """
    Keep suggestions that mention the region by name or sit inside the box.

    Without a region name or box the input is returned unchanged. A region
    name on its own falls back to DEFAULT_REGION_BBOX. Order is preserved.
    """
    if not region_name and bbox is None:
        return list(suggestions)

    box = bbox or DEFAULT_REGION_BBOX
    region_lower = region_name.lower() if region_name else None

    kept: List[Suggestion] = []
    for s in suggestions:
        if region_lower and _matches_name(s, region_lower):
            kept.append(s)
        elif box.contains(s.coordinates):
            kept.append(s)
    return kept
