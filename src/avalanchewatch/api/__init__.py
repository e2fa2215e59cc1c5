"""HTTP API for avalanchewatch.

This module provides:

- create_app: Factory function to create FastAPI application
- Bulletin, WarningsResource, ForecastResource: Resource schemas
- HealthResponse, ErrorResponse: Service schemas

Note: FastAPI-dependent exports (create_app) are lazy-loaded to allow
importing schemas without FastAPI installed.
"""

# Schemas can be imported directly (only depend on pydantic)
from avalanchewatch.api.schemas import (
    Alert,
    AvalancheProblem,
    Bulletin,
    ElevationBand,
    ErrorResponse,
    ForecastDay,
    ForecastResource,
    HealthResponse,
    Provenance,
    WarningsResource,
)


# Lazy imports for FastAPI-dependent components
def __getattr__(name):
    """Lazy load FastAPI-dependent components."""
    if name == "create_app":
        from avalanchewatch.api.app import create_app
        return create_app
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    "create_app",
    "Alert",
    "AvalancheProblem",
    "Bulletin",
    "ElevationBand",
    "ErrorResponse",
    "ForecastDay",
    "ForecastResource",
    "HealthResponse",
    "Provenance",
    "WarningsResource",
]
