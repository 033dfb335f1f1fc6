from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import requests

from quote_screener.domain.errors import MalformedResponseError
from quote_screener.domain.models import Quote
from quote_screener.infrastructure.providers.base import QuoteAdapter
from quote_screener.infrastructure.providers.yahoo_common import fetch_crumb, get_path, raw_value
from quote_screener.utils.numbers import to_float

logger = logging.getLogger(__name__)

QUOTE_SUMMARY_URL = "https://query2.finance.yahoo.com/v10/finance/quoteSummary/{symbol}"
MODULES = ("financialData", "defaultKeyStatistics", "summaryDetail")
PROVIDER_KEY = "yahoo"


class YahooQuoteSummaryAdapter(QuoteAdapter):
    provider_key = PROVIDER_KEY
    artifact_prefix = "yahoo_summary"

    def __init__(
        self,
        timeout: int = 20,
        session: requests.Session | None = None,
        artifacts_dir: str | Path | None = None,
        use_crumb: bool = True,
    ) -> None:
        super().__init__(timeout=timeout, session=session, artifacts_dir=artifacts_dir)
        self._use_crumb = use_crumb
        self._crumb: str | None = None
        self._crumb_checked = False

    def _fetch(self, symbol: str) -> Quote:
        params = {"modules": ",".join(MODULES)}
        crumb = self._get_crumb()
        if crumb:
            params["crumb"] = crumb
        payload = self._get_json(QUOTE_SUMMARY_URL.format(symbol=symbol), params)
        return parse_quote_summary(payload)

    def _get_crumb(self) -> str | None:
        if not self._use_crumb:
            return None
        if not self._crumb_checked:
            self._crumb = fetch_crumb(self._session, self._timeout)
            self._crumb_checked = True
            if not self._crumb:
                logger.warning("Quote summary crumb not available; request may fail")
        return self._crumb


def parse_quote_summary(payload: Any) -> Quote:
    error = get_path(payload, ("quoteSummary", "error"))
    if error:
        description = error.get("description") if isinstance(error, dict) else error
        raise MalformedResponseError(f"Quote summary error: {description}")
    result = get_path(payload, ("quoteSummary", "result", 0))
    if not isinstance(result, dict):
        raise MalformedResponseError("Quote summary payload has no result")

    financial = _section(result, "financialData")
    stats = _section(result, "defaultKeyStatistics")
    summary = _section(result, "summaryDetail")

    peg = _number(stats, "pegRatio")
    if peg is None:
        peg = _number(stats, "trailingPegRatio")
    debt_to_equity = _number(financial, "debtToEquity")
    if debt_to_equity is not None:
        # Yahoo reports debt/equity as a percentage.
        debt_to_equity = debt_to_equity / 100

    return Quote(
        pe_ratio=_number(summary, "trailingPE"),
        peg_ratio=peg,
        price_to_sales=_number(summary, "priceToSalesTrailing12Months"),
        dividend_yield=_number(summary, "dividendYield"),
        operating_margin=_number(financial, "operatingMargins"),
        debt_to_equity=debt_to_equity,
        price=_number(financial, "currentPrice"),
        volume=_number(summary, "volume"),
    )


def _section(result: dict[str, Any], name: str) -> dict[str, Any]:
    section = result.get(name)
    return section if isinstance(section, dict) else {}


def _number(section: dict[str, Any], field: str) -> float | None:
    return to_float(raw_value(section.get(field)))
