from __future__ import annotations

import csv
from pathlib import Path

from quote_screener.domain.errors import WatchlistError
from quote_screener.domain.models import Market, Symbol


def load_watchlist(path: str | Path) -> list[Symbol]:
    """
    Reads "TICKER,Display Name" lines; blank lines and '#' comments are skipped.
    Primary-market listings come first, then secondary ones, each in file order.
    """
    p = Path(path)
    if not p.exists():
        raise WatchlistError(f"watchlist not found: {path}")

    symbols: list[Symbol] = []
    seen: set[str] = set()
    with p.open(newline="", encoding="utf-8") as handle:
        for lineno, row in enumerate(csv.reader(handle), start=1):
            if not row or not row[0].strip() or row[0].lstrip().startswith("#"):
                continue
            ticker = row[0].strip().upper()
            name = ",".join(row[1:]).strip() or ticker
            if ticker in seen:
                raise WatchlistError(f"duplicate ticker {ticker!r} on line {lineno} of {path}")
            seen.add(ticker)
            symbols.append(Symbol(ticker=ticker, name=name))

    primary = [s for s in symbols if s.market is Market.PRIMARY]
    secondary = [s for s in symbols if s.market is Market.SECONDARY]
    return primary + secondary
