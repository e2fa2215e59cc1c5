"""Base class for upstream data sources."""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Callable, Generic, Optional, TypeVar

from avalanchewatch.cache.freshness import utcnow
from avalanchewatch.config import Settings
from avalanchewatch.sources.http import fetch_document

# Type variable for the resource a source produces
ResultT = TypeVar("ResultT")


class BaseSource(ABC, Generic[ResultT]):
    """Abstract base class for all upstream sources.

    A source fetches one document and parses it into a resource.
    Subclasses implement ``url`` and ``parse``; ``run`` chains them.

    Attributes:
        settings: Service settings (region, timeout, user agent)
        clock: Callable returning the current UTC time for update stamps
    """

    #: Human-readable label recorded on produced resources
    label: str = ""

    def __init__(self, settings: Settings, clock: Optional[Callable[[], datetime]] = None):
        self.settings = settings
        self.clock = clock or utcnow

    @property
    @abstractmethod
    def url(self) -> str:
        """URL of the upstream document."""
        pass

    def query_params(self) -> Optional[dict[str, Any]]:
        """Query parameters sent with the request (none by default)."""
        return None

    def fetch(self) -> bytes:
        """Download the raw document.

        Raises:
            SourceUnavailableError: If the source cannot be reached
        """
        response = fetch_document(
            self.url,
            timeout=self.settings.request_timeout,
            user_agent=self.settings.user_agent,
            params=self.query_params(),
        )
        return response.content

    @abstractmethod
    def parse(self, document: bytes) -> ResultT:
        """Turn a raw document into a resource.

        Raises:
            SourceParseError: If expected fields are absent or malformed
        """
        pass

    def run(self) -> ResultT:
        """Fetch then parse."""
        return self.parse(self.fetch())
