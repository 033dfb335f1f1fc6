from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from quote_screener.config import Credentials
from quote_screener.domain.models import Market
from quote_screener.infrastructure.providers.alphavantage import (
    AlphaVantageDailyAdapter,
    AlphaVantageOverviewAdapter,
)
from quote_screener.infrastructure.providers.base import QuoteAdapter
from quote_screener.infrastructure.providers.yahoo_summary import YahooQuoteSummaryAdapter

PROVIDERS = ("alphavantage", "yahoo")


@dataclass(frozen=True)
class AdapterRegistry:
    adapters: dict[Market, QuoteAdapter]

    def for_market(self, market: Market) -> QuoteAdapter:
        try:
            return self.adapters[market]
        except KeyError:
            raise LookupError(f"No adapter registered for market {market.value!r}") from None

    def close(self) -> None:
        for adapter in {id(a): a for a in self.adapters.values()}.values():
            adapter.close()


def build_registry(
    provider: str,
    credentials: Credentials,
    timeout: int = 20,
    artifacts_dir: str | Path | None = None,
) -> AdapterRegistry:
    mode = provider.strip().lower()
    if mode == "alphavantage":
        key = credentials.alphavantage_api_key
        return AdapterRegistry(
            adapters={
                Market.PRIMARY: AlphaVantageOverviewAdapter(key, timeout=timeout, artifacts_dir=artifacts_dir),
                Market.SECONDARY: AlphaVantageDailyAdapter(key, timeout=timeout, artifacts_dir=artifacts_dir),
            }
        )
    if mode == "yahoo":
        adapter = YahooQuoteSummaryAdapter(timeout=timeout, artifacts_dir=artifacts_dir)
        return AdapterRegistry(adapters={Market.PRIMARY: adapter, Market.SECONDARY: adapter})
    raise ValueError(f"Unsupported provider: {provider}")
