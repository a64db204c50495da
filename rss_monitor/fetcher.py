from __future__ import annotations

import logging
from typing import Optional

import requests

from .config import DEFAULT_USER_AGENT
from .exceptions import FetchError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10.0


def fetch_listing(
    url: str,
    *,
    timeout: float = DEFAULT_TIMEOUT,
    user_agent: str = DEFAULT_USER_AGENT,
    session: Optional[requests.Session] = None,
) -> str:
    """
    Fetch the raw markup of the listing page.

    Raises FetchError on timeouts, connection problems and non-2xx responses.
    """
    headers = {"User-Agent": user_agent}
    get = session.get if session is not None else requests.get
    try:
        response = get(url, headers=headers, timeout=timeout)
        response.raise_for_status()
    except requests.Timeout as e:
        raise FetchError(f"Timed out after {timeout}s fetching {url}") from e
    except requests.RequestException as e:
        raise FetchError(f"Failed to fetch listing: {url} ({e})") from e

    logger.debug("Fetched %s (%d chars)", url, len(response.text))
    return response.text
