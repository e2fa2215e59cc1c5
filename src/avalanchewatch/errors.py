"""Error taxonomy for upstream data sources.

1. SourceUnavailableError - network error, timeout or non-2xx response
2. SourceParseError       - upstream answered but expected fields are missing
3. ForecastUnavailableError - the extended forecast could not be produced

The avalanche and warnings pipelines absorb all of these; only the extended
forecast surfaces its failure to clients.
"""

from typing import Optional


class SourceError(Exception):
    """Base class for upstream data source failures.

    Attributes:
        message: What went wrong
        source: URL of the upstream source, if known
    """

    def __init__(self, message: str, source: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.source = source

    def __str__(self) -> str:
        if self.source:
            return f"{self.message} ({self.source})"
        return self.message


class SourceUnavailableError(SourceError):
    """Upstream could not be reached or returned an error status."""


class SourceParseError(SourceError):
    """Upstream document lacks or mangles the expected fields."""


class ForecastUnavailableError(SourceError):
    """Extended forecast could not be fetched or reshaped."""
