from __future__ import annotations

import json
import logging
import time
from typing import Callable

from quote_screener.domain.models import CacheEntry, Quote
from quote_screener.infrastructure.storage.kv_store import KeyValueStore

logger = logging.getLogger(__name__)

CACHE_TTL_MS = 24 * 60 * 60 * 1000


def epoch_millis() -> int:
    return int(time.time() * 1000)


class QuoteCache:
    """
    Quotes keyed by provider and symbol, answered only while younger than the TTL.

    Expiry is checked on read; stale entries stay in the store until the next
    successful fetch overwrites them or the cache is cleared.
    """

    def __init__(
        self,
        store: KeyValueStore,
        ttl_ms: int = CACHE_TTL_MS,
        clock: Callable[[], int] = epoch_millis,
    ) -> None:
        self._store = store
        self._ttl_ms = ttl_ms
        self._clock = clock

    def get(self, provider_key: str, symbol: str) -> Quote | None:
        entry = self.entry(provider_key, symbol)
        if entry is None:
            return None
        age = self._clock() - entry.fetched_at_ms
        if age >= self._ttl_ms:
            logger.debug("Cache entry expired | key=%s | age_ms=%s", _key(provider_key, symbol), age)
            return None
        return entry.quote

    def put(self, provider_key: str, symbol: str, quote: Quote) -> None:
        payload = {"data": quote.to_dict(), "timestamp": self._clock()}
        self._store.set(_key(provider_key, symbol), json.dumps(payload))

    def clear(self) -> None:
        self._store.clear()

    def entry(self, provider_key: str, symbol: str) -> CacheEntry | None:
        key = _key(provider_key, symbol)
        raw = self._store.get(key)
        if raw is None:
            return None
        try:
            payload = json.loads(raw)
            quote = Quote.from_dict(payload["data"])
            fetched_at = int(payload["timestamp"])
        except (json.JSONDecodeError, AttributeError, KeyError, TypeError, ValueError) as exc:
            logger.warning("Cache entry undecodable; ignoring | key=%s | error=%s", key, exc)
            return None
        return CacheEntry(provider_key=provider_key, symbol=symbol, quote=quote, fetched_at_ms=fetched_at)


def _key(provider_key: str, symbol: str) -> str:
    return f"{provider_key}:{symbol}"
