"""Acquisition pipelines turning upstream sources into API resources."""

from avalanchewatch.pipeline.avalanche import AvalanchePipeline, run_sources
from avalanchewatch.pipeline.fallback import build_fallback_bulletin, build_fallback_warnings
from avalanchewatch.pipeline.forecast import ForecastService
from avalanchewatch.pipeline.warnings import WarningsPipeline

__all__ = [
    "AvalanchePipeline",
    "ForecastService",
    "WarningsPipeline",
    "build_fallback_bulletin",
    "build_fallback_warnings",
    "run_sources",
]
