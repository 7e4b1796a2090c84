import sys
from pathlib import Path

import pytest

# Ensure the backend package root is on sys.path for direct pytest runs
BACKEND_ROOT = Path(__file__).resolve().parents[1]
if str(BACKEND_ROOT) not in sys.path:
    sys.path.insert(0, str(BACKEND_ROOT))


@pytest.fixture(autouse=True)
def reset_search_singletons(monkeypatch):
    """Keep the module-level default cache/service from leaking between tests."""
    from services import location_search, search_cache

    monkeypatch.setattr(search_cache, "_default_search_cache", None)
    monkeypatch.setattr(location_search, "_default_location_search_service", None)
    monkeypatch.setattr(search_cache.settings, "SEARCH_CACHE_PATH", None)
