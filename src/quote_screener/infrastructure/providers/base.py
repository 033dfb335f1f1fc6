from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import requests

from quote_screener.domain.errors import (
    MalformedResponseError,
    NetworkError,
    ProviderError,
    RateLimitError,
)
from quote_screener.domain.models import Quote

logger = logging.getLogger(__name__)

DEFAULT_HEADERS = {
    "User-Agent": "Mozilla/5.0",
    "Accept": "application/json,text/plain,*/*",
    "Accept-Language": "en-US,en;q=0.9",
}


class HttpJsonClient:
    """Single-attempt JSON GETs; failures surface as ProviderError subclasses."""

    artifact_prefix = "http"

    def __init__(
        self,
        timeout: int = 20,
        session: requests.Session | None = None,
        artifacts_dir: str | Path | None = None,
    ) -> None:
        self._timeout = timeout
        self._artifacts_dir = Path(artifacts_dir) if artifacts_dir else None
        self._session = session or requests.Session()
        self._session.headers.update(DEFAULT_HEADERS)

    def close(self) -> None:
        self._session.close()

    def _get_json(self, url: str, params: dict[str, Any]) -> Any:
        try:
            response = self._session.get(url, params=params, timeout=self._timeout)
        except requests.RequestException as exc:
            self._save_error_artifact(url, params, str(exc))
            raise NetworkError(f"Request to {url} failed: {exc}") from exc

        if response.status_code == 429:
            self._save_http_artifact(response, url, params)
            raise RateLimitError(f"HTTP 429 from {url}")
        if not 200 <= response.status_code < 300:
            self._save_http_artifact(response, url, params)
            raise MalformedResponseError(f"HTTP {response.status_code} from {url}")

        try:
            payload = response.json()
        except (json.JSONDecodeError, ValueError) as exc:
            self._save_http_artifact(response, url, params)
            raise MalformedResponseError(f"Invalid JSON from {url}") from exc
        if not payload:
            raise MalformedResponseError(f"Empty payload from {url}")
        return payload

    def _save_http_artifact(self, response: requests.Response, url: str, params: dict[str, Any]) -> None:
        status = response.status_code
        snippet = response.text[:1000] if response.text else ""
        payload = {
            "url": response.url or url,
            "params": _redact(params),
            "status": status,
            "headers": dict(response.headers),
            "body_snippet": snippet,
        }
        self._write_artifact(f"{self.artifact_prefix}_http_{status}", payload)

    def _save_error_artifact(self, url: str, params: dict[str, Any], error: str) -> None:
        payload = {"url": url, "params": _redact(params), "error": error}
        self._write_artifact(f"{self.artifact_prefix}_http_000", payload)

    def _write_artifact(self, tag: str, payload: dict[str, Any]) -> None:
        if self._artifacts_dir is None:
            return
        self._artifacts_dir.mkdir(parents=True, exist_ok=True)
        ts = datetime.now(timezone.utc).strftime("%Y%m%d_%H%M%S_%f")
        out = self._artifacts_dir / f"{tag}_{ts}.txt"
        out.write_text(json.dumps(payload, ensure_ascii=True, indent=2), encoding="utf-8")
        logger.debug("HTTP artifact saved | path=%s", out)


class QuoteAdapter(HttpJsonClient, ABC):
    provider_key: str = ""

    def fetch(self, symbol: str) -> Quote | None:
        """Returns a normalized quote, or None when the provider cannot deliver one."""
        try:
            quote = self._fetch(symbol)
        except ProviderError as exc:
            logger.warning(
                "Quote fetch failed | provider=%s | symbol=%s | cause=%s | error=%s",
                self.provider_key,
                symbol,
                type(exc).__name__,
                exc,
            )
            return None
        if quote.is_empty():
            logger.warning(
                "Quote fetch returned no usable fields | provider=%s | symbol=%s",
                self.provider_key,
                symbol,
            )
            return None
        return quote

    @abstractmethod
    def _fetch(self, symbol: str) -> Quote:
        raise NotImplementedError


def _redact(params: dict[str, Any]) -> dict[str, Any]:
    return {key: ("***" if key.lower() in {"apikey", "api_key", "crumb"} else value) for key, value in params.items()}
