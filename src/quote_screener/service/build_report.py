from __future__ import annotations

import logging
import time
from typing import Callable, Sequence

from quote_screener.domain.models import CallBudget, Quote, Report, ReportRow, Symbol
from quote_screener.domain.scoring import score
from quote_screener.infrastructure.providers.registry import AdapterRegistry
from quote_screener.infrastructure.storage.quote_cache import QuoteCache
from quote_screener.utils.numbers import format_count, format_percent, format_ratio, format_text

logger = logging.getLogger(__name__)

API_CALL_LIMIT = 25
PAUSE_SECONDS = 1.0


def build_report(
    symbols: Sequence[Symbol],
    registry: AdapterRegistry,
    cache: QuoteCache,
    budget: CallBudget | None = None,
    *,
    pause_seconds: float = PAUSE_SECONDS,
    sleep: Callable[[float], None] = time.sleep,
) -> Report:
    """
    Walks the symbols in order, answering each from the cache or one live call.

    Live calls stop once the budget is spent; later misses render as
    "Data Unavailable". A pause follows every live call that leaves budget,
    except after the final symbol.
    """
    budget = budget if budget is not None else CallBudget(limit=API_CALL_LIMIT)
    rows: list[ReportRow] = []

    logger.info(
        "Building report | symbols=%s | call_limit=%s | calls_made=%s",
        len(symbols),
        budget.limit,
        budget.calls_made,
    )

    last_index = len(symbols) - 1
    for index, symbol in enumerate(symbols):
        market = symbol.market
        adapter = registry.for_market(market)
        called = False

        quote = cache.get(adapter.provider_key, symbol.ticker)
        if quote is not None:
            source = "cache"
            logger.info("Using cached quote | symbol=%s | provider=%s", symbol.ticker, adapter.provider_key)
        elif not budget.exhausted:
            quote = adapter.fetch(symbol.ticker)
            budget.consume()
            called = True
            logger.info(
                "Provider call made | symbol=%s | provider=%s | calls=%s/%s",
                symbol.ticker,
                adapter.provider_key,
                budget.calls_made,
                budget.limit,
            )
            if quote is not None:
                cache.put(adapter.provider_key, symbol.ticker, quote)
                source = "live"
            else:
                source = "failed"
        else:
            source = "skipped"
            logger.info("Call limit reached; skipping fetch | symbol=%s", symbol.ticker)

        rows.append(to_row(symbol, quote, source))

        if called and not budget.exhausted and index < last_index:
            sleep(pause_seconds)

    logger.info(
        "Report built | rows=%s | calls_made=%s | cached=%s | skipped=%s",
        len(rows),
        budget.calls_made,
        sum(1 for row in rows if row.source == "cache"),
        sum(1 for row in rows if row.source == "skipped"),
    )
    return Report(rows=rows, budget=budget)


def to_row(symbol: Symbol, quote: Quote | None, source: str) -> ReportRow:
    data = quote or Quote()
    return ReportRow(
        symbol=symbol.ticker,
        name=symbol.name,
        market=symbol.market,
        pe_ratio=format_ratio(data.pe_ratio),
        peg_ratio=format_ratio(data.peg_ratio),
        price_to_sales=format_ratio(data.price_to_sales),
        dividend_yield=format_percent(data.dividend_yield),
        operating_margin=format_percent(data.operating_margin),
        debt_to_equity=format_ratio(data.debt_to_equity),
        price=format_ratio(data.price),
        volume=format_count(data.volume),
        latest_trading_day=format_text(data.latest_trading_day),
        recommendation=score(quote),
        source=source,
    )
