import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from scrobble_slots.config import get_settings
from scrobble_slots.core.exceptions import register_exception_handlers
from scrobble_slots.routers import lastfm
from scrobble_slots.services.cache_service import CacheService
from scrobble_slots.services.http_client import HTTPClientManager

settings = get_settings()

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for startup/shutdown events.
    """
    # Startup
    logger.info(f"Starting {settings.app_name}...")
    if not settings.lastfm_api_key:
        logger.warning("LASTFM_API_KEY is not set, lookups will fail with 500")
    if not settings.spotify_configured:
        logger.warning("Spotify credentials are not set, enrichment is disabled")
    yield
    # Shutdown
    logger.info(f"Shutting down {settings.app_name}...")
    await HTTPClientManager.close()
    await CacheService.close()


app = FastAPI(
    title=settings.app_name,
    description="Slot machine over a Last.fm scrobble history, with Spotify matches",
    version="1.0.0",
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

# The widget only issues GET requests
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["GET"],
    allow_headers=["*"],
)

register_exception_handlers(app)

app.include_router(
    lastfm.router,
    prefix=settings.api_prefix,
    tags=["Last.fm"]
)


@app.get("/", tags=["Health"])
async def root():
    """Root endpoint - API info."""
    return {
        "name": settings.app_name,
        "version": "1.0.0",
        "docs": "/docs",
    }


@app.get("/health", tags=["Health"])
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}
