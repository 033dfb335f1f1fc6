from __future__ import annotations

import logging
from typing import Any, Iterable

import requests

logger = logging.getLogger(__name__)

CRUMB_URL = "https://query1.finance.yahoo.com/v1/test/getcrumb"
COOKIE_URL = "https://fc.yahoo.com"


def fetch_crumb(session: requests.Session, timeout: int) -> str | None:
    """Primes Yahoo cookies on the session and returns the crumb, if Yahoo hands one out."""
    try:
        session.get(COOKIE_URL, timeout=timeout, allow_redirects=True)
        response = session.get(CRUMB_URL, timeout=timeout)
    except requests.RequestException as exc:
        logger.warning("Yahoo crumb request failed | error=%s", exc)
        return None
    if response.status_code != 200:
        logger.warning("Yahoo crumb unavailable | status=%s", response.status_code)
        return None
    crumb = response.text.strip()
    return crumb or None


def get_path(data: Any, path: Iterable[Any]) -> Any:
    current = data
    for part in path:
        if isinstance(part, int):
            if not isinstance(current, list) or part >= len(current):
                return None
            current = current[part]
        else:
            if not isinstance(current, dict):
                return None
            if part not in current:
                return None
            current = current[part]
    return current


def raw_value(value: Any) -> Any:
    """Unwraps Yahoo's {"raw": ..., "fmt": ...} number envelopes."""
    if isinstance(value, dict):
        if "raw" in value:
            return value.get("raw")
        if "fmt" in value:
            return value.get("fmt")
        return None
    return value
