"""
Core domain models for location search.
These are framework-agnostic and shared by the proxy, the orchestrator and the cache.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

SERPAPI_SOURCE = "serpapi"

# (longitude, latitude), the order used on the wire and by map widgets
Coordinates = Tuple[float, float]


@dataclass
class Suggestion:
    """
    One candidate location returned from a search.

    `id` is unique within a single response only. When the provider gives no
    identifier it is built from list position and title, so the same place can
    get a different id on a later call.
    """
    id: str
    text: str
    place_name: str
    coordinates: Optional[Coordinates] = None
    address: Optional[str] = None
    source: str = SERPAPI_SOURCE

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "id": self.id,
            "text": self.text,
            "place_name": self.place_name,
        }
        if self.coordinates is not None:
            data["coordinates"] = [self.coordinates[0], self.coordinates[1]]
        if self.address is not None:
            data["address"] = self.address
        data["source"] = self.source
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Suggestion":
        if not isinstance(data, dict):
            raise ValueError(f"suggestion must be an object, got {type(data).__name__}")
        if "id" not in data or "text" not in data:
            raise ValueError("suggestion is missing 'id' or 'text'")
        coords = data.get("coordinates")
        coordinates: Optional[Coordinates] = None
        if coords is not None:
            lng, lat = coords
            coordinates = (float(lng), float(lat))
        return cls(
            id=str(data["id"]),
            text=str(data["text"]),
            place_name=str(data.get("place_name") or ""),
            coordinates=coordinates,
            address=str(data["address"]) if data.get("address") is not None else None,
            source=str(data.get("source") or SERPAPI_SOURCE),
        )


@dataclass(frozen=True)
class BoundingBox:
    """Rectangular lat/lng range approximating a region."""
    min_lat: float
    max_lat: float
    min_lng: float
    max_lng: float

    def contains(self, coordinates: Optional[Coordinates]) -> bool:
        """Inclusive of edges. Missing coordinates are never inside."""
        if coordinates is None:
            return False
        lng, lat = coordinates
        return self.min_lat <= lat <= self.max_lat and self.min_lng <= lng <= self.max_lng


@dataclass(frozen=True)
class NearCenter:
    """Point used to bias provider results geographically."""
    lat: float
    lng: float

    def to_dict(self) -> Dict[str, float]:
        return {"lat": self.lat, "lng": self.lng}


@dataclass
class SearchOptions:
    region_name: Optional[str] = None
    bbox: Optional[BoundingBox] = None
    near_center: Optional[NearCenter] = None


@dataclass
class SearchOutcome:
    """
    Result of one orchestrated search.

    `error` holds the reason when the search failed; callers that only want
    suggestions can ignore it and read an empty list.
    """
    suggestions: List[Suggestion] = field(default_factory=list)
    error: Optional[str] = None
    from_cache: bool = False

    @property
    def ok(self) -> bool:
        return self.error is None
