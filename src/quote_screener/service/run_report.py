import csv
import logging
from pathlib import Path

from quote_screener.config import Credentials, Settings
from quote_screener.domain.models import CallBudget, PricePoint, Report, ReportRow
from quote_screener.infrastructure.providers.registry import build_registry
from quote_screener.infrastructure.providers.yahoo_chart import HISTORY_POINTS, YahooChartHistoryClient
from quote_screener.infrastructure.storage.kv_store import JsonFileStore
from quote_screener.infrastructure.storage.quote_cache import QuoteCache
from quote_screener.infrastructure.watchlist import load_watchlist
from quote_screener.service.build_report import build_report

logger = logging.getLogger(__name__)

CSV_HEADERS = [
    "symbol",
    "name",
    "market",
    "pe_ratio",
    "peg_ratio",
    "price_to_sales",
    "dividend_yield",
    "operating_margin",
    "debt_to_equity",
    "price",
    "volume",
    "latest_trading_day",
    "recommendation",
]


def run_report(settings: Settings, credentials: Credentials) -> Report:
    logger.info(
        "Starting report | watchlist=%s | provider=%s | output=%s",
        settings.watchlist,
        settings.provider,
        settings.output,
    )
    if settings.provider == "alphavantage" and not credentials.alphavantage_api_key:
        logger.warning("Alpha Vantage API key is not set; uncached symbols will have no data")

    symbols = load_watchlist(settings.watchlist)
    cache = QuoteCache(JsonFileStore(settings.cache_path))
    registry = build_registry(
        settings.provider,
        credentials,
        timeout=settings.timeout,
        artifacts_dir=settings.artifacts_dir,
    )
    try:
        report = build_report(
            symbols,
            registry,
            cache,
            CallBudget(limit=settings.call_limit),
            pause_seconds=settings.pause_seconds,
        )
    finally:
        registry.close()

    output_path = Path(settings.output)
    write_csv(report.rows, output_path)
    logger.info("CSV written | path=%s | calls_made=%s", output_path, report.calls_made)
    return report


def run_history(symbol: str, points: int = HISTORY_POINTS, timeout: int = 20) -> list[PricePoint]:
    client = YahooChartHistoryClient(timeout=timeout)
    try:
        return client.fetch_history(symbol.strip().upper(), points=points)
    finally:
        client.close()


def clear_cache(cache_path: str) -> None:
    QuoteCache(JsonFileStore(cache_path)).clear()


def write_csv(rows: list[ReportRow], output_path: Path) -> None:
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with output_path.open("w", newline="", encoding="utf-8") as handle:
        writer = csv.DictWriter(handle, fieldnames=CSV_HEADERS)
        writer.writeheader()
        for row in rows:
            writer.writerow(
                {
                    "symbol": row.symbol,
                    "name": row.name,
                    "market": row.market.value,
                    "pe_ratio": row.pe_ratio,
                    "peg_ratio": row.peg_ratio,
                    "price_to_sales": row.price_to_sales,
                    "dividend_yield": row.dividend_yield,
                    "operating_margin": row.operating_margin,
                    "debt_to_equity": row.debt_to_equity,
                    "price": row.price,
                    "volume": row.volume,
                    "latest_trading_day": row.latest_trading_day,
                    "recommendation": row.recommendation.label,
                }
            )
