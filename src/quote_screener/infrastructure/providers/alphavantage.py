from __future__ import annotations

from pathlib import Path
from typing import Any

import requests

from quote_screener.domain.errors import (
    ConfigurationError,
    MalformedResponseError,
    RateLimitError,
)
from quote_screener.domain.models import Quote
from quote_screener.infrastructure.providers.base import QuoteAdapter
from quote_screener.utils.numbers import to_float

ALPHAVANTAGE_URL = "https://www.alphavantage.co/query"
PROVIDER_KEY = "alphavantage"

# Alpha Vantage answers throttled calls with HTTP 200 and one of these keys.
RATE_LIMIT_MARKERS = ("Note", "Information")
ERROR_MARKER = "Error Message"
TIME_SERIES_KEY = "Time Series (Daily)"


class _AlphaVantageAdapter(QuoteAdapter):
    provider_key = PROVIDER_KEY
    artifact_prefix = "alphavantage"
    function = ""

    def __init__(
        self,
        api_key: str | None,
        timeout: int = 20,
        session: requests.Session | None = None,
        artifacts_dir: str | Path | None = None,
    ) -> None:
        super().__init__(timeout=timeout, session=session, artifacts_dir=artifacts_dir)
        self._api_key = (api_key or "").strip() or None

    def _query(self, symbol: str, **extra: str) -> dict[str, Any]:
        if not self._api_key:
            raise ConfigurationError("Alpha Vantage API key is not configured")
        params = {"function": self.function, "symbol": symbol, **extra, "apikey": self._api_key}
        payload = self._get_json(ALPHAVANTAGE_URL, params)
        if not isinstance(payload, dict):
            raise MalformedResponseError(f"Unexpected payload type {type(payload).__name__}")
        for marker in RATE_LIMIT_MARKERS:
            if marker in payload:
                raise RateLimitError(str(payload[marker]))
        if ERROR_MARKER in payload:
            raise MalformedResponseError(str(payload[ERROR_MARKER]))
        return payload


class AlphaVantageOverviewAdapter(_AlphaVantageAdapter):
    """Company overview for primary-market listings."""

    function = "OVERVIEW"

    def _fetch(self, symbol: str) -> Quote:
        payload = self._query(symbol, entitlement="delayed")
        return parse_overview(payload)


class AlphaVantageDailyAdapter(_AlphaVantageAdapter):
    """Latest daily bar for secondary-market listings."""

    function = "TIME_SERIES_DAILY"

    def _fetch(self, symbol: str) -> Quote:
        payload = self._query(symbol)
        return parse_daily_series(payload)


def parse_overview(payload: dict[str, Any]) -> Quote:
    if not payload.get("Symbol") and not any(key in payload for key in ("PERatio", "PEGRatio")):
        raise MalformedResponseError("Overview payload carries no company fields")
    return Quote(
        pe_ratio=to_float(payload.get("PERatio")),
        peg_ratio=to_float(payload.get("PEGRatio")),
        price_to_sales=to_float(payload.get("PriceToSalesRatioTTM")),
        dividend_yield=to_float(payload.get("DividendYield")),
        operating_margin=to_float(payload.get("OperatingMarginTTM")),
        debt_to_equity=_first_number(payload, "DebtToEquityRatio", "DebtToEquity"),
    )


def parse_daily_series(payload: dict[str, Any]) -> Quote:
    series = payload.get(TIME_SERIES_KEY)
    if not isinstance(series, dict) or not series:
        raise MalformedResponseError(f"Missing '{TIME_SERIES_KEY}' section")
    # ISO date keys sort chronologically; the provider does not promise an order.
    latest_day = max(series)
    bar = series[latest_day]
    if not isinstance(bar, dict):
        raise MalformedResponseError(f"Malformed bar for {latest_day}")
    return Quote(
        price=to_float(bar.get("4. close")),
        volume=to_float(bar.get("5. volume")),
        latest_trading_day=latest_day,
    )


def _first_number(payload: dict[str, Any], *keys: str) -> float | None:
    for key in keys:
        value = to_float(payload.get(key))
        if value is not None:
            return value
    return None
