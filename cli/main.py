"""Holdings ledger CLI.

Provides commands for:
- buy: Buy a stock or mutual fund (creates the holding on first purchase)
- sell: Sell units of a holding
- update: Update prices (one symbol, a CSV of quotes, or interactively)
- gain: Show total and per-holding gain
- search: Filter holdings by symbol, name keywords and price range
- list: Show all holdings
"""
from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import List, Optional, Tuple

from common.config_loader import DEFAULT_CONFIG_PATH, load_settings
from engine.price_source import CsvPriceSource, PromptPriceSource
from policy.fee_policy import FeePolicy
from portfolio.errors import PortfolioError
from portfolio.portfolio import Portfolio
from reporting.summary import gain_lines, holdings_frame
from storage.codec import load_portfolio, save_portfolio


def open_portfolio(args) -> Tuple[Portfolio, Path]:
    """Load the holdings file named by --file, or the configured default."""
    cfg = load_settings(args.config)
    fees = FeePolicy(cfg.fees).schedule()
    path = Path(args.file or cfg.data_path)
    return load_portfolio(path, fees), path


def cmd_buy(args) -> int:
    """Handle buy command."""
    portfolio, path = open_portfolio(args)
    snap = portfolio.buy(args.type, args.symbol, args.name, args.quantity, args.price)
    save_portfolio(portfolio, path)

    if snap.kind.value != args.type:
        print(f"Note: {snap.symbol} is held as {snap.kind.value}; its existing fee rules were applied.")
    print(f"Bought {args.quantity} {snap.symbol} at ${args.price:,.2f}")
    print(f"  {snap}")
    return 0


def cmd_sell(args) -> int:
    """Handle sell command."""
    portfolio, path = open_portfolio(args)
    proceeds = portfolio.sell(args.symbol, args.quantity, args.price)
    save_portfolio(portfolio, path)

    print(f"Sold {args.quantity} {args.symbol} at ${args.price:,.2f}")
    print(f"  Proceeds: ${proceeds:,.2f}")
    return 0


def cmd_update(args) -> int:
    """Handle update command: single symbol, CSV quotes, or interactive prompts."""
    portfolio, path = open_portfolio(args)

    if args.symbol:
        if args.price is None:
            print("Error: --price is required with --symbol")
            return 1
        snap = portfolio.update_price(args.symbol, args.price)
        print(f"Updated investment:\n  {snap}")
    else:
        if not len(portfolio):
            print("No investments to update.")
            return 0
        source = CsvPriceSource(args.prices) if args.prices else PromptPriceSource()
        portfolio.update_all_prices(source)
        print(f"Updated prices for {len(portfolio)} holdings")

    save_portfolio(portfolio, path)
    return 0


def cmd_gain(args) -> int:
    """Handle gain command."""
    portfolio, _ = open_portfolio(args)

    print(f"Total gain: ${portfolio.total_gain():,.2f}")
    print("=" * 50)
    for line in gain_lines(portfolio):
        print("  " + line)
    return 0


def cmd_search(args) -> int:
    """Handle search command."""
    portfolio, _ = open_portfolio(args)

    results = list(portfolio.search(args.symbol, args.keywords, args.range))
    if not results:
        print("No matching investments.")
        return 0
    for line in results:
        print(line)
    return 0


def cmd_list(args) -> int:
    """Handle list command."""
    portfolio, _ = open_portfolio(args)

    if not len(portfolio):
        print("Portfolio is empty.")
        return 0
    print(holdings_frame(portfolio).to_string(index=False))
    return 0


def main(argv: Optional[List[str]] = None):
    """Main entry point."""
    p = argparse.ArgumentParser(
        prog="cli.main",
        description="Holdings ledger CLI: stocks and mutual funds with fee-aware cost basis",
    )
    sub = p.add_subparsers(dest="cmd", required=True)

    # Common arguments for all commands
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--config", default=DEFAULT_CONFIG_PATH, help="Settings file")
    common.add_argument("--file", default=None, help="Holdings file (default: storage.path from settings)")
    common.add_argument("--verbose", action="store_true", help="Log debug output")

    # Buy command
    buy = sub.add_parser("buy", parents=[common], help="Buy a stock or mutual fund")
    buy.add_argument("--type", choices=["stock", "mutualfund"], default="stock", help="Investment type")
    buy.add_argument("--symbol", required=True, help="Symbol (uppercase letters and digits)")
    buy.add_argument("--name", required=True, help="Display name")
    buy.add_argument("--quantity", type=int, required=True, help="Units to buy")
    buy.add_argument("--price", type=float, required=True, help="Price per unit")
    buy.set_defaults(func=cmd_buy)

    # Sell command
    sell = sub.add_parser("sell", parents=[common], help="Sell units of a holding")
    sell.add_argument("--symbol", required=True, help="Symbol to sell")
    sell.add_argument("--quantity", type=int, required=True, help="Units to sell")
    sell.add_argument("--price", type=float, required=True, help="Price per unit")
    sell.set_defaults(func=cmd_sell)

    # Update command
    upd = sub.add_parser("update", parents=[common], help="Update prices")
    upd.add_argument("--symbol", default=None, help="Update a single holding")
    upd.add_argument("--price", type=float, default=None, help="New price for --symbol")
    upd.add_argument("--prices", default=None, help="CSV with symbol,price columns")
    upd.set_defaults(func=cmd_update)

    # Gain command
    gain = sub.add_parser("gain", parents=[common], help="Show total and per-holding gain")
    gain.set_defaults(func=cmd_gain)

    # Search command
    search = sub.add_parser("search", parents=[common], help="Search holdings")
    search.add_argument("--symbol", default="", help="Exact symbol (case-insensitive)")
    search.add_argument("--keywords", default="", help="Words that must all appear in the name")
    search.add_argument("--range", default="", help="Price range: P, P-, -P or P1-P2")
    search.set_defaults(func=cmd_search)

    # List command
    lst = sub.add_parser("list", parents=[common], help="List holdings")
    lst.set_defaults(func=cmd_list)

    args = p.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        code = args.func(args)
    except PortfolioError as e:
        print(f"Error: {e}")
        code = 1
    raise SystemExit(code)


if __name__ == "__main__":
    main()
