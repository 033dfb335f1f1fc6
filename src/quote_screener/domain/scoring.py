from __future__ import annotations

from dataclasses import dataclass

from quote_screener.domain.models import Quote, Recommendation
from quote_screener.utils.numbers import to_float


@dataclass(frozen=True, slots=True)
class ScoreThresholds:
    max_peg: float = 1.0
    max_price_to_sales: float = 5.0
    min_dividend_yield_pct: float = 2.0
    min_operating_margin_pct: float = 15.0
    buy_ratio: float = 0.75
    hold_ratio: float = 0.5


DEFAULT_THRESHOLDS = ScoreThresholds()


def score(quote: Quote | None, thresholds: ScoreThresholds = DEFAULT_THRESHOLDS) -> Recommendation:
    """
    Derives a recommendation from whichever ratios the quote carries.

    Each condition only counts when its field is numeric; the verdict is the
    share of counted conditions that pass.
    """
    if quote is None:
        return Recommendation.DATA_UNAVAILABLE

    peg = to_float(quote.peg_ratio)
    price_to_sales = to_float(quote.price_to_sales)
    dividend_yield = to_float(quote.dividend_yield)
    operating_margin = to_float(quote.operating_margin)

    checks: list[bool] = []
    if peg is not None:
        checks.append(peg < thresholds.max_peg)
    if price_to_sales is not None:
        checks.append(price_to_sales < thresholds.max_price_to_sales)
    if dividend_yield is not None:
        checks.append(dividend_yield * 100 > thresholds.min_dividend_yield_pct)
    if operating_margin is not None:
        checks.append(operating_margin * 100 > thresholds.min_operating_margin_pct)

    if not checks:
        return Recommendation.INSUFFICIENT_DATA

    ratio = sum(checks) / len(checks)
    if ratio >= thresholds.buy_ratio:
        return Recommendation.BUY
    if ratio >= thresholds.hold_ratio:
        return Recommendation.HOLD
    return Recommendation.SELL
