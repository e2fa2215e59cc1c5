"""FastAPI application for avalanche and weather information.

Provides REST API endpoints for:
- Avalanche bulletin for the configured massif
- Weather warnings for the configured department
- Extended multi-day forecast
- Health checks

Example:
    >>> from avalanchewatch.api import create_app
    >>> app = create_app()
    >>> # Run with: uvicorn avalanchewatch.api.app:app --reload
"""

import logging
from datetime import timedelta
from typing import Optional

from fastapi import FastAPI, HTTPException, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from avalanchewatch.api.schemas import (
    Bulletin,
    CacheStatus,
    ErrorResponse,
    ForecastResource,
    HealthResponse,
    WarningsResource,
)
from avalanchewatch.cache import FreshnessCache
from avalanchewatch.config import MAX_FORECAST_DAYS, Settings, load_settings
from avalanchewatch.errors import ForecastUnavailableError
from avalanchewatch.pipeline import AvalanchePipeline, ForecastService, WarningsPipeline

logger = logging.getLogger(__name__)

# API version
API_VERSION = "1.0.0"


def create_app(
    settings: Optional[Settings] = None,
    cache: Optional[FreshnessCache] = None,
) -> FastAPI:
    """Create FastAPI application.

    Args:
        settings: Service settings (read from the environment if not provided)
        cache: Freshness cache shared by all resources (new one if not provided)

    Returns:
        Configured FastAPI application
    """
    settings = settings or load_settings()
    cache = cache or FreshnessCache(ttl=timedelta(hours=settings.cache_ttl_hours))
    region = settings.region

    avalanche = AvalanchePipeline(settings, cache)
    warnings = WarningsPipeline(settings, cache)
    forecast = ForecastService(settings, cache)

    avalanche_path = f"/api/avalanche/{region.massif_slug}"
    warnings_path = f"/api/warnings/{region.department_slug}"

    app = FastAPI(
        title="Avalanche Watch API",
        description=(
            f"Avalanche risk and mountain weather for {region.massif} ({region.department})"
        ),
        version=API_VERSION,
        docs_url="/docs",
        redoc_url="/redoc",
    )
    app.state.settings = settings
    app.state.cache = cache

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException):
        """Handle HTTP exceptions with custom response."""
        return JSONResponse(
            status_code=exc.status_code,
            content=ErrorResponse(
                error=f"HTTP_{exc.status_code}",
                message=str(exc.detail),
            ).model_dump(exclude_none=True),
        )

    @app.get("/", tags=["info"])
    async def root():
        """Root endpoint listing available endpoints."""
        return {
            "message": f"{region.massif} Avalanche API",
            "status": "running",
            "version": API_VERSION,
            "docs": "/docs",
            "endpoints": {
                "health": "/api/health",
                "avalanche": avalanche_path,
                "warnings": warnings_path,
                "forecast": "/api/forecast/extended",
            },
        }

    @app.get("/api/health", response_model=HealthResponse, tags=["info"])
    async def health_check():
        """Health check with last fetch time per cached resource."""
        status = {
            key: fetched_at.isoformat() if fetched_at else None
            for key, fetched_at in cache.status().items()
        }
        return HealthResponse(
            status="ok",
            timestamp=cache.clock().isoformat(),
            cache=CacheStatus(**status),
        )

    # Sync endpoints: upstream requests block, FastAPI runs these in a threadpool
    @app.get(avalanche_path, response_model=Bulletin, tags=["avalanche"])
    def avalanche_bulletin():
        """Avalanche bulletin.

        Always 200. When live data is unavailable the bulletin is synthesised
        and flagged with provenance 'fallback', isMockData and an error note.
        """
        return avalanche.get()

    @app.get(warnings_path, response_model=WarningsResource, tags=["warnings"])
    def weather_warnings():
        """Weather warnings. Always 200; empty alerts when unavailable."""
        return warnings.get()

    @app.get(
        "/api/forecast/extended",
        response_model=ForecastResource,
        responses={
            500: {"model": ErrorResponse, "description": "Forecast unavailable"},
        },
        tags=["forecast"],
    )
    def extended_forecast(
        lat: Optional[float] = Query(default=None, ge=-90, le=90),
        lon: Optional[float] = Query(default=None, ge=-180, le=180),
        days: Optional[int] = Query(
            default=None,
            description=f"Forecast days (clamped to 1-{MAX_FORECAST_DAYS})",
        ),
    ):
        """Extended multi-day forecast with 3-hourly samples."""
        try:
            return forecast.get(lat=lat, lon=lon, days=days)
        except ForecastUnavailableError as e:
            return JSONResponse(
                status_code=500,
                content=ErrorResponse(
                    error="Failed to fetch extended forecast",
                    message=str(e),
                ).model_dump(exclude_none=True),
            )

    return app


# Default app instance for uvicorn
app = create_app()
