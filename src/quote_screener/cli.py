import argparse
import sys

from rich.console import Console
from rich.table import Table

from quote_screener.config import Credentials, Settings
from quote_screener.domain.models import Market, PricePoint, Report
from quote_screener.infrastructure.providers.registry import PROVIDERS
from quote_screener.logging_conf import setup_logging
from quote_screener.service.run_report import clear_cache, run_history, run_report

DEFAULT_CACHE_PATH = ".cache/quotes.json"


def _print_report(report: Report, console: Console) -> None:
    primary = Table(title="Primary market")
    for column in ("Name", "Symbol", "P/E", "PEG", "P/S", "Div Yield", "Op Margin", "D/E", "Rec"):
        primary.add_column(column)
    secondary = Table(title="Secondary market")
    for column in ("Name", "Symbol", "Latest Trading Day", "Close Price", "Volume", "Rec"):
        secondary.add_column(column)

    for row in report.rows:
        if row.market is Market.PRIMARY:
            primary.add_row(
                row.name,
                row.symbol,
                row.pe_ratio,
                row.peg_ratio,
                row.price_to_sales,
                row.dividend_yield,
                row.operating_margin,
                row.debt_to_equity,
                row.recommendation.label,
            )
        else:
            secondary.add_row(
                row.name,
                row.symbol,
                row.latest_trading_day,
                row.price,
                row.volume,
                row.recommendation.label,
            )

    if primary.row_count:
        console.print(primary)
    if secondary.row_count:
        console.print(secondary)
    console.print(f"API calls made: {report.calls_made}")


def _print_history(symbol: str, points: list[PricePoint], console: Console) -> None:
    if not points:
        console.print(f"[yellow]No price history available for {symbol}.[/yellow]")
        return
    table = Table(title=f"{symbol} closing prices")
    table.add_column("Date")
    table.add_column("Close", justify="right")
    for point in points:
        table.add_row(point.date, f"{point.close:.2f}")
    console.print(table)


def cmd_report(args: argparse.Namespace) -> None:
    settings = Settings(
        watchlist=args.watchlist,
        output=args.output,
        provider=args.provider,
        cache_path=args.cache_path,
        call_limit=args.call_limit,
        pause_seconds=args.pause,
        artifacts_dir=args.artifacts_dir,
    )
    report = run_report(settings, Credentials.from_env())
    console = Console()
    _print_report(report, console)
    console.print(f"Report saved: {settings.output}")


def cmd_history(args: argparse.Namespace) -> None:
    points = run_history(args.symbol, points=args.points)
    _print_history(args.symbol.upper(), points, Console())


def cmd_clear_cache(args: argparse.Namespace) -> None:
    clear_cache(args.cache_path)
    Console().print(f"Cache cleared: {args.cache_path}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="quote-screener",
        description="Fetches fundamentals for a watchlist, caches them for 24h and scores each listing.",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity.",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    report = sub.add_parser(
        "report",
        help="Build the fundamentals report for a watchlist.",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    report.add_argument("--watchlist", required=True, help="File with one 'TICKER,Name' per line.")
    report.add_argument("--output", default="report.csv", help="CSV file to write.")
    report.add_argument(
        "--provider",
        default="alphavantage",
        choices=list(PROVIDERS),
        help="Quote provider used for live calls.",
    )
    report.add_argument("--cache-path", default=DEFAULT_CACHE_PATH, help="JSON file backing the quote cache.")
    report.add_argument("--call-limit", type=int, default=25, help="Maximum live provider calls per run.")
    report.add_argument("--pause", type=float, default=1.0, help="Seconds to wait after each live call.")
    report.add_argument(
        "--artifacts-dir",
        default=None,
        help="Directory for HTTP failure dumps (disabled when omitted).",
    )
    report.set_defaults(func=cmd_report)

    history = sub.add_parser("history", help="Show the trailing daily closes for one symbol.")
    history.add_argument("symbol", help="Ticker, e.g. AAPL.")
    history.add_argument("--points", type=int, default=30, help="Number of trailing daily points.")
    history.set_defaults(func=cmd_history)

    clear = sub.add_parser("clear-cache", help="Delete every cached quote.")
    clear.add_argument("--cache-path", default=DEFAULT_CACHE_PATH, help="JSON file backing the quote cache.")
    clear.set_defaults(func=cmd_clear_cache)

    return parser


def main() -> None:
    parser = build_parser()
    args = parser.parse_args()

    setup_logging(args.log_level)

    try:
        args.func(args)
    except Exception as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
