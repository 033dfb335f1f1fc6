import pytest

from quote_screener.domain.errors import WatchlistError
from quote_screener.domain.models import Market, Symbol, classify_market
from quote_screener.infrastructure.watchlist import load_watchlist


def test_classify_market_by_suffix() -> None:
    assert classify_market("AAPL") is Market.PRIMARY
    assert classify_market("RY.TRT") is Market.SECONDARY
    assert classify_market("td.to") is Market.SECONDARY
    assert Symbol(ticker="ENB.TRT", name="Enbridge").market is Market.SECONDARY


def test_load_watchlist_puts_primary_listings_first(tmp_path) -> None:
    path = tmp_path / "watchlist.txt"
    path.write_text(
        "# comment\n"
        "RY.TRT,Royal Bank of Canada\n"
        "AAPL,Apple Inc.\n"
        "\n"
        "TD.TRT,Toronto-Dominion Bank\n"
        "BRK.B,\"Berkshire Hathaway, Class B\"\n"
        "msft\n",
        encoding="utf-8",
    )

    symbols = load_watchlist(path)

    assert [s.ticker for s in symbols] == ["AAPL", "BRK.B", "MSFT", "RY.TRT", "TD.TRT"]
    assert symbols[1].name == "Berkshire Hathaway, Class B"
    assert symbols[2].name == "MSFT"


def test_load_watchlist_missing_file(tmp_path) -> None:
    with pytest.raises(WatchlistError):
        load_watchlist(tmp_path / "nope.txt")


def test_load_watchlist_rejects_duplicates(tmp_path) -> None:
    path = tmp_path / "watchlist.txt"
    path.write_text("AAPL,Apple\naapl,Apple again\n", encoding="utf-8")
    with pytest.raises(WatchlistError):
        load_watchlist(path)
