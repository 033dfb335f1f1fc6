from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any

from quote_screener.domain.errors import MalformedResponseError, ProviderError
from quote_screener.domain.models import PricePoint
from quote_screener.infrastructure.providers.base import HttpJsonClient
from quote_screener.infrastructure.providers.yahoo_common import get_path
from quote_screener.utils.numbers import to_float

logger = logging.getLogger(__name__)

CHART_URL = "https://query1.finance.yahoo.com/v8/finance/chart/{symbol}"
HISTORY_POINTS = 30


class YahooChartHistoryClient(HttpJsonClient):
    """Trailing daily closes for charting; not governed by the report call quota."""

    artifact_prefix = "yahoo_chart"

    def fetch_history(self, symbol: str, points: int = HISTORY_POINTS) -> list[PricePoint]:
        params = {"range": "3mo", "interval": "1d"}
        try:
            payload = self._get_json(CHART_URL.format(symbol=symbol), params)
            series = parse_chart(payload)
        except ProviderError as exc:
            logger.warning(
                "History fetch failed | symbol=%s | cause=%s | error=%s",
                symbol,
                type(exc).__name__,
                exc,
            )
            return []
        logger.info("History fetched | symbol=%s | points=%s", symbol, min(points, len(series)))
        return series[-points:] if points > 0 else []


def parse_chart(payload: Any) -> list[PricePoint]:
    error = get_path(payload, ("chart", "error"))
    if error:
        description = error.get("description") if isinstance(error, dict) else error
        raise MalformedResponseError(f"Chart error: {description}")
    result = get_path(payload, ("chart", "result", 0))
    if not isinstance(result, dict):
        raise MalformedResponseError("Chart payload has no result")
    timestamps = result.get("timestamp") or []
    closes = get_path(result, ("indicators", "quote", 0, "close")) or []

    points: dict[str, float] = {}
    for ts, close in zip(timestamps, closes):
        value = to_float(close)
        if value is None or not isinstance(ts, (int, float)):
            continue
        day = datetime.fromtimestamp(ts, tz=timezone.utc).date().isoformat()
        points[day] = value
    return [PricePoint(date=day, close=points[day]) for day in sorted(points)]
