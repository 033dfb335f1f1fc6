import itertools

from quote_screener.domain.models import Quote, Recommendation
from quote_screener.domain.scoring import score


def test_all_conditions_passing_is_buy() -> None:
    quote = Quote(peg_ratio=0.8, price_to_sales=3, dividend_yield=0.03, operating_margin=0.2)
    assert score(quote) is Recommendation.BUY


def test_single_failing_condition_is_sell() -> None:
    assert score(Quote(peg_ratio=1.5)) is Recommendation.SELL


def test_absent_quote_is_data_unavailable() -> None:
    assert score(None) is Recommendation.DATA_UNAVAILABLE


def test_quote_without_scored_fields_is_insufficient() -> None:
    quote = Quote(pe_ratio=12.0, price=100.0, volume=1_000, latest_trading_day="2024-03-15")
    assert score(quote) is Recommendation.INSUFFICIENT_DATA


def test_peg_of_exactly_one_does_not_pass() -> None:
    assert score(Quote(peg_ratio=1.0)) is Recommendation.SELL


def test_dividend_yield_of_exactly_two_percent_does_not_pass() -> None:
    assert score(Quote(dividend_yield=0.02)) is Recommendation.SELL


def test_half_of_present_conditions_is_hold() -> None:
    quote = Quote(peg_ratio=0.5, price_to_sales=9.0)
    assert score(quote) is Recommendation.HOLD


def test_three_of_four_is_buy() -> None:
    quote = Quote(peg_ratio=0.5, price_to_sales=2.0, dividend_yield=0.01, operating_margin=0.3)
    assert score(quote) is Recommendation.BUY


def test_nan_fields_are_skipped() -> None:
    quote = Quote(peg_ratio=float("nan"), price_to_sales=2.0)
    assert score(quote) is Recommendation.BUY


def test_string_values_from_cache_are_read_as_numbers() -> None:
    quote = Quote(peg_ratio="0.8", price_to_sales="None")  # type: ignore[arg-type]
    assert score(quote) is Recommendation.BUY


def test_score_is_total_over_present_and_absent_fields() -> None:
    options = [None, 0.0, 0.5, 10.0, float("nan")]
    for peg, ps, dy, om in itertools.product(options, repeat=4):
        quote = Quote(peg_ratio=peg, price_to_sales=ps, dividend_yield=dy, operating_margin=om)
        assert score(quote) in set(Recommendation) - {Recommendation.DATA_UNAVAILABLE}
