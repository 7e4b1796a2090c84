import os

# Basic settings helper to read environment configuration.

DEFAULT_SERP_API_BASE_URL = "https://serpapi.com/search.json"
DEFAULT_SEARCH_ENDPOINT = "http://localhost:3001/api/search-locations"


def _as_int(val: str | None, default: int) -> int:
    if val is None or not val.strip():
        return default
    try:
        return int(val)
    except ValueError:
        return default


def _as_float(val: str | None, default: float) -> float:
    if val is None or not val.strip():
        return default
    try:
        return float(val)
    except ValueError:
        return default


class Settings:
    def __init__(self) -> None:
        self.SERP_API_KEY: str | None = os.getenv("SERP_API_KEY")
        self.SERP_API_BASE_URL: str = os.getenv("SERP_API_BASE_URL") or DEFAULT_SERP_API_BASE_URL
        self.SERP_LOCALE: str = os.getenv("SERP_LOCALE") or "en"
        self.SERP_TIMEOUT_SECONDS: float = _as_float(os.getenv("SERP_TIMEOUT_SECONDS"), 10.0)
        self.FRONTEND_URL: str = os.getenv("FRONTEND_URL") or "http://localhost:5173"
        self.PORT: int = _as_int(os.getenv("PORT"), 3001)
        self.DEFAULT_COUNTRY: str = os.getenv("DEFAULT_COUNTRY") or "IN"
        self.LOCATION_SEARCH_ENDPOINT: str = (
            os.getenv("LOCATION_SEARCH_ENDPOINT") or DEFAULT_SEARCH_ENDPOINT
        )
        # Unset means the in-memory cache; a path switches to SQLite.
        self.SEARCH_CACHE_PATH: str | None = os.getenv("SEARCH_CACHE_PATH") or None


settings = Settings()
