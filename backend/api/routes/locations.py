"""
Location search proxy routes.

Adds the SerpAPI key server-side, forwards the query and returns normalized
suggestions.
"""
import logging
from typing import List, Optional

from fastapi import APIRouter
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from services.errors import BadRequest
from services.geo_filter import filter_by_region
from services.serp_client import build_serp_params, fetch_serp_results, parse_near_center
from services.serp_normalizer import normalize_payload
from settings import settings

router = APIRouter()
logger = logging.getLogger(__name__)


class SuggestionResponse(BaseModel):
    id: str
    text: str
    place_name: str
    coordinates: Optional[List[float]] = None
    address: Optional[str] = None
    source: str


def _search(q: Optional[str], country: Optional[str], region_name: Optional[str], near_center: Optional[str]):
    if not q or not q.strip():
        raise BadRequest("Query parameter is required")

    center = parse_near_center(near_center)
    params = build_serp_params(
        q,
        country or settings.DEFAULT_COUNTRY,
        near_center=center,
        api_key=settings.SERP_API_KEY,
    )
    data = fetch_serp_results(params)
    suggestions = normalize_payload(data, query=q)
    if region_name:
        suggestions = filter_by_region(suggestions, region_name)
    return suggestions


@router.get(
    "/search-locations",
    response_model=List[SuggestionResponse],
    response_model_exclude_none=True,
)
def search_locations(
    q: Optional[str] = None,
    country: Optional[str] = None,
    regionName: Optional[str] = None,
    nearCenter: Optional[str] = None,
):
    """
    Search places through SerpAPI.

    400 when `q` is missing or blank, 500 for every other failure
    (including an unparsable `nearCenter`).
    """
    try:
        suggestions = _search(q, country, regionName, nearCenter)
    except BadRequest as exc:
        return JSONResponse(status_code=400, content={"error": str(exc)})
    except Exception as exc:
        logger.exception("Proxy error for q=%r", q)
        return JSONResponse(
            status_code=500,
            content={"error": "Internal server error", "message": str(exc)},
        )
    return [s.to_dict() for s in suggestions]
