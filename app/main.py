"""Main FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api import api_router
from app.core.config import settings
from app.core.errors import register_exception_handlers
from app.database import SessionLocal, init_db
from app.middleware import RateLimitMiddleware
from app.scheduler import start_scheduler, shutdown_scheduler
from app.services.rate_limit_store import DatabaseWindowCounter, RateLimitStore, SlidingWindowCounter

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    # Startup
    logger.info("🚀 Starting Coffee Chat API...")

    logger.info("📊 Initializing database...")
    init_db()

    if settings.SCHEDULER_ENABLED:
        start_scheduler()

    logger.info("✅ Application started successfully!")

    yield

    # Shutdown
    logger.info("🛑 Shutting down...")
    shutdown_scheduler()
    logger.info("👋 Application stopped")


def build_rate_limit_store() -> RateLimitStore:
    if settings.RATE_LIMIT_BACKEND == "database":
        return DatabaseWindowCounter(SessionLocal, window=settings.RATE_LIMIT_WINDOW_SECONDS)
    return SlidingWindowCounter(window=float(settings.RATE_LIMIT_WINDOW_SECONDS))


app = FastAPI(
    title=settings.PROJECT_NAME,
    version=settings.VERSION,
    description=settings.DESCRIPTION,
    openapi_url=f"{settings.API_PREFIX}/openapi.json",
    docs_url=f"{settings.API_PREFIX}/docs",
    redoc_url=f"{settings.API_PREFIX}/redoc",
    lifespan=lifespan,
)

register_exception_handlers(app)

if settings.RATE_LIMIT_ENABLED:
    app.add_middleware(
        RateLimitMiddleware,
        requests_per_window=settings.RATE_LIMIT_REQUESTS,
        store=build_rate_limit_store(),
        trusted_proxies=tuple(settings.trusted_proxies_list),
    )

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(api_router, prefix=settings.API_PREFIX)


@app.get("/", tags=["Health"])
async def root() -> dict[str, str]:
    """Root endpoint - Health check."""
    return {
        "message": "API server is running",
        "status": "running",
        "version": settings.VERSION,
    }


@app.get("/health", tags=["Health"])
async def health_check() -> dict[str, str]:
    """Health check endpoint."""
    return {"status": "healthy"}
