from __future__ import annotations

from dataclasses import asdict, dataclass, field, fields
from enum import Enum
from typing import Any

SECONDARY_SUFFIXES = (".TRT", ".TO")


class Market(str, Enum):
    PRIMARY = "primary"
    SECONDARY = "secondary"


def classify_market(ticker: str, secondary_suffixes: tuple[str, ...] = SECONDARY_SUFFIXES) -> Market:
    upper = ticker.strip().upper()
    if any(upper.endswith(suffix.upper()) for suffix in secondary_suffixes):
        return Market.SECONDARY
    return Market.PRIMARY


@dataclass(frozen=True, slots=True)
class Symbol:
    ticker: str
    name: str

    @property
    def market(self) -> Market:
        return classify_market(self.ticker)


@dataclass(frozen=True, slots=True)
class Quote:
    pe_ratio: float | None = None
    peg_ratio: float | None = None
    price_to_sales: float | None = None
    dividend_yield: float | None = None
    operating_margin: float | None = None
    debt_to_equity: float | None = None
    price: float | None = None
    volume: float | None = None
    latest_trading_day: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Quote:
        if not isinstance(data, dict):
            raise TypeError(f"Quote data must be a mapping, got {type(data).__name__}")
        known = {f.name for f in fields(cls)}
        return cls(**{key: value for key, value in data.items() if key in known})

    def is_empty(self) -> bool:
        return all(getattr(self, f.name) is None for f in fields(self))


@dataclass(frozen=True, slots=True)
class CacheEntry:
    provider_key: str
    symbol: str
    quote: Quote
    fetched_at_ms: int


class Recommendation(str, Enum):
    BUY = "Buy"
    HOLD = "Hold"
    SELL = "Sell"
    INSUFFICIENT_DATA = "Insufficient Data"
    DATA_UNAVAILABLE = "Data Unavailable"

    @property
    def label(self) -> str:
        return self.value


@dataclass(slots=True)
class CallBudget:
    limit: int = 25
    calls_made: int = 0

    @property
    def exhausted(self) -> bool:
        return self.calls_made >= self.limit

    def consume(self) -> None:
        self.calls_made += 1


@dataclass(frozen=True, slots=True)
class ReportRow:
    symbol: str
    name: str
    market: Market
    pe_ratio: str
    peg_ratio: str
    price_to_sales: str
    dividend_yield: str
    operating_margin: str
    debt_to_equity: str
    price: str
    volume: str
    latest_trading_day: str
    recommendation: Recommendation
    source: str


@dataclass(slots=True)
class Report:
    rows: list[ReportRow] = field(default_factory=list)
    budget: CallBudget = field(default_factory=CallBudget)

    @property
    def calls_made(self) -> int:
        return self.budget.calls_made


@dataclass(frozen=True, slots=True)
class PricePoint:
    date: str
    close: float
