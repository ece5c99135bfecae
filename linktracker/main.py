"""
FastAPI Application Entry Point

This module initializes the FastAPI application and configures:
- Logging
- API routes
- Middleware (logging, CORS, rate limiting)
- Startup/shutdown of the link service and expiry reaper
"""

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from linktracker.api import endpoints
from linktracker.middleware.logging import add_logging_middleware
from linktracker.core.rate_limit import limiter
from linktracker.core.service_manager import initialize_services, shutdown_services
from linktracker.core.setting import settings

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s"
)

app = FastAPI(
    title="Link Tracker Service",
    description="Short-lived tracking links with click accounting",
    version="1.0.0",
    docs_url="/docs",  # Swagger UI documentation
    redoc_url="/redoc",  # ReDoc documentation
)

app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

add_logging_middleware(app)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type"],
)


@app.get("/", tags=["Health"])
async def root():
    """
    Root endpoint for health checks.
    
    Returns:
        Simple JSON response indicating service is running
    """
    return {
        "message": "Link Tracker Service",
        "version": "1.0.0",
        "docs": "/docs"
    }


@app.get("/health", tags=["Health"])
async def health_check():
    """Health check endpoint for monitoring."""
    return {"status": "healthy"}


app.include_router(endpoints.router, tags=["Link Tracker"])


@app.on_event("startup")
async def startup_event():
    """Initialize services on startup."""
    await initialize_services()


@app.on_event("shutdown")
async def shutdown_event():
    """Cleanup on shutdown."""
    await shutdown_services()
