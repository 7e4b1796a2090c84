"""
FastAPI application entry point.

Run with: uvicorn api.main:app --reload
or:       python -m api.main   (listens on $PORT)
"""
import logging
from datetime import datetime, timezone
from pathlib import Path

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

# Load environment variables from backend/.env (optional) before other imports that read env
env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(env_path)

from api.routes import locations
from settings import settings

logger = logging.getLogger(__name__)

# Create app
app = FastAPI(
    title="Event Dispatch Location API",
    description="Location search proxy for the event dispatch dashboard",
    version="0.1.0",
)

# CORS middleware for the dashboard frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.FRONTEND_URL],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(locations.router, prefix="/api", tags=["locations"])


@app.on_event("startup")
def startup_event():
    if not settings.SERP_API_KEY:
        logger.warning("SERP_API_KEY not set in environment; upstream searches will be rejected.")


@app.get("/")
async def root():
    return {"status": "ok", "service": "Event Dispatch Location API"}


@app.get("/health")
async def health():
    """Health check endpoint. Does not touch the search provider."""
    return {"status": "OK", "timestamp": datetime.now(timezone.utc).isoformat()}


def main():
    import uvicorn

    logging.basicConfig(level=logging.INFO)
    logger.info("Backend proxy server running on port %s", settings.PORT)
    logger.info("SerpAPI proxy: http://localhost:%s/api/search-locations", settings.PORT)
    uvicorn.run(app, host="0.0.0.0", port=settings.PORT)


if __name__ == "__main__":
    main()
