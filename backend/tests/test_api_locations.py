from datetime import datetime
from unittest.mock import patch

from fastapi import FastAPI
from fastapi.testclient import TestClient

from api import main as api_main
from api.routes import locations as locations_router
from services.errors import UpstreamFailure

SERP_PAYLOAD = {
    "local_results": [
        {
            "position": 1,
            "title": "Surya Mahal",
            "address": "Bhilwara, Rajasthan",
            "gps_coordinates": {"latitude": 25.35, "longitude": 74.64},
        },
        {
            "position": 2,
            "title": "Surya Mahal Banquet",
            "address": "Chennai",
            "gps_coordinates": {"latitude": 13.08, "longitude": 80.27},
        },
        {"position": 3, "title": "Surya Mahal Annex"},
    ]
}


def _client():
    app = FastAPI()
    app.include_router(locations_router.router, prefix="/api")
    return TestClient(app)


@patch.object(locations_router, "fetch_serp_results", return_value=SERP_PAYLOAD)
def test_search_returns_normalized_suggestions(mock_fetch):
    resp = _client().get("/api/search-locations", params={"q": "Surya Mahal"})
    assert resp.status_code == 200
    data = resp.json()
    assert [d["id"] for d in data] == ["1-Surya Mahal", "2-Surya Mahal Banquet", "3-Surya Mahal Annex"]
    assert data[0] == {
        "id": "1-Surya Mahal",
        "text": "Surya Mahal",
        "place_name": "Surya Mahal, Bhilwara, Rajasthan",
        "coordinates": [74.64, 25.35],
        "address": "Bhilwara, Rajasthan",
        "source": "serpapi",
    }
    # absent optional fields are omitted, not null
    assert "coordinates" not in data[2]
    assert "address" not in data[2]

    params = mock_fetch.call_args.args[0]
    assert params["gl"] == "IN"
    assert params["engine"] == "google_maps"
    assert "ll" not in params


@patch.object(locations_router, "fetch_serp_results", return_value=SERP_PAYLOAD)
def test_search_forwards_country_and_bias(mock_fetch):
    resp = _client().get(
        "/api/search-locations",
        params={"q": "Surya Mahal", "country": "US", "nearCenter": '{"lat": 25.35, "lng": 74.64}'},
    )
    assert resp.status_code == 200
    params = mock_fetch.call_args.args[0]
    assert params["gl"] == "US"
    assert params["ll"] == "@25.35,74.64,14z"


@patch.object(locations_router, "fetch_serp_results", return_value=SERP_PAYLOAD)
def test_region_name_filters_server_side(mock_fetch):
    resp = _client().get("/api/search-locations", params={"q": "Surya Mahal", "regionName": "Rajasthan"})
    assert resp.status_code == 200
    assert [d["id"] for d in resp.json()] == ["1-Surya Mahal"]


@patch.object(locations_router, "fetch_serp_results", return_value={"place_results": {"title": "City Palace", "place_id": "cp"}})
def test_place_result_fallback(mock_fetch):
    resp = _client().get("/api/search-locations", params={"q": "city palace udaipur"})
    assert resp.json() == [{"id": "cp", "text": "City Palace", "place_name": "City Palace", "source": "serpapi"}]


@patch.object(locations_router, "fetch_serp_results")
def test_missing_query_is_400(mock_fetch):
    client = _client()
    for params in ({}, {"q": ""}, {"q": "   "}):
        resp = client.get("/api/search-locations", params=params)
        assert resp.status_code == 400
        assert resp.json() == {"error": "Query parameter is required"}
    mock_fetch.assert_not_called()


@patch.object(locations_router, "fetch_serp_results", side_effect=UpstreamFailure("SerpAPI error: HTTP 401", 401))
def test_upstream_failure_is_500(mock_fetch):
    resp = _client().get("/api/search-locations", params={"q": "Surya Mahal"})
    assert resp.status_code == 500
    assert resp.json() == {"error": "Internal server error", "message": "SerpAPI error: HTTP 401"}


@patch.object(locations_router, "fetch_serp_results")
def test_malformed_near_center_is_500(mock_fetch):
    resp = _client().get("/api/search-locations", params={"q": "x", "nearCenter": "{oops"})
    assert resp.status_code == 500
    assert resp.json()["error"] == "Internal server error"
    mock_fetch.assert_not_called()


def test_health_endpoint():
    client = TestClient(api_main.app)
    resp = client.get("/health")
    assert resp.status_code == 200
    body = resp.json()
    assert body["status"] == "OK"
    assert datetime.fromisoformat(body["timestamp"]).tzinfo is not None


@patch.object(locations_router, "fetch_serp_results", return_value={})
def test_app_mounts_search_under_api_prefix(mock_fetch):
    client = TestClient(api_main.app)
    resp = client.get("/api/search-locations", params={"q": "nothing"})
    assert resp.status_code == 200
    assert resp.json() == []


def test_cors_allows_configured_origin():
    client = TestClient(api_main.app)
    origin = api_main.settings.FRONTEND_URL
    resp = client.options(
        "/api/search-locations",
        headers={"Origin": origin, "Access-Control-Request-Method": "GET"},
    )
    assert resp.headers.get("access-control-allow-origin") == origin
    assert resp.headers.get("access-control-allow-credentials") == "true"


@patch.object(
    locations_router,
    "fetch_serp_results",
    return_value={"local_results": [{"position": 1, "title": 1984, "address": 42}]},
)
def test_non_string_provider_fields_are_returned_as_strings(mock_fetch):
    resp = _client().get("/api/search-locations", params={"q": "cafe"})
    assert resp.status_code == 200
    assert resp.headers["content-type"].startswith("application/json")
    assert resp.json() == [
        {"id": "1-1984", "text": "1984", "place_name": "1984, 42", "address": "42", "source": "serpapi"}
    ]
