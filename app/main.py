"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api.middleware import RequestContextMiddleware
from app.api.routes import api_router
from app.domain.services.configuration_service import ActiveProfileCache
from app.logging_config import setup_logging
from app.persistence.database import AsyncSessionLocal, create_all_tables
from app.persistence.seed import seed_defaults
from app.settings import settings

# Setup logging
setup_logging()

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    # Startup
    app.state.active_profile_cache = ActiveProfileCache(
        ttl_seconds=settings.active_profile_cache_ttl_seconds
    )
    if settings.seed_defaults_on_startup:
        await create_all_tables()
        async with AsyncSessionLocal() as session:
            await seed_defaults(session)
    logger.info("Application started", extra={"environment": settings.environment})
    yield
    # Shutdown
    app.state.active_profile_cache.invalidate()


# Create FastAPI app
app = FastAPI(
    title="Widget Console API",
    description="Chat widget configuration profiles and prompt templates",
    version="0.1.0",
    lifespan=lifespan,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["ETag", "X-Request-ID"],
)

# Add request context middleware
app.add_middleware(RequestContextMiddleware)

# Include API routes
app.include_router(api_router, prefix=settings.api_v1_prefix)


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": "Widget Console API",
        "version": "0.1.0",
        "docs": "/docs",
    }
