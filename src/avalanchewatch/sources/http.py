"""HTTP access to upstream sources."""

import logging
from typing import Any, Optional

import requests

from avalanchewatch.config import REQUEST_TIMEOUT, USER_AGENT
from avalanchewatch.errors import SourceUnavailableError

logger = logging.getLogger(__name__)


def fetch_document(
    url: str,
    timeout: float = REQUEST_TIMEOUT,
    user_agent: str = USER_AGENT,
    params: Optional[dict[str, Any]] = None,
) -> requests.Response:
    """GET an upstream document.

    Args:
        url: Document URL
        timeout: Seconds before the request is abandoned
        user_agent: User-Agent header (some sources reject scripts)
        params: Optional query parameters

    Returns:
        Successful response

    Raises:
        SourceUnavailableError: On network error, timeout or non-2xx status
    """
    logger.debug(f"GET {url} (timeout={timeout}s)")
    try:
        response = requests.get(
            url,
            params=params,
            timeout=timeout,
            headers={"User-Agent": user_agent},
        )
        response.raise_for_status()
    except requests.Timeout:
        raise SourceUnavailableError(f"Timed out after {timeout}s", source=url) from None
    except requests.RequestException as e:
        raise SourceUnavailableError(f"Request failed: {e}", source=url) from e

    return response
