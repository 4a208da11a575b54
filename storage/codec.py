"""Flat text persistence for a holding collection.

Each holding is written as six ``key = "value"`` lines in a fixed order,
followed by a blank line:

    type = "stock"
    symbol = "IBM"
    name = "International Business Machines"
    quantity = "100"
    price = "50.0"
    bookValue = "5009.99"

Loading stops at the first bad line. Records committed before it stay in
the collection; the error carries that partial collection.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, Iterable, Tuple

from portfolio.errors import PersistenceError, PortfolioError
from portfolio.holding import DEFAULT_FEES, FeeSchedule, Holding, HoldingKind, HoldingSnapshot
from portfolio.portfolio import Portfolio

logger = logging.getLogger(__name__)

FIELD_ORDER: Tuple[str, ...] = ("type", "symbol", "name", "quantity", "price", "bookValue")


def format_record(snap: HoldingSnapshot) -> str:
    values = (
        snap.kind.value,
        snap.symbol,
        snap.name,
        str(snap.quantity),
        repr(float(snap.price)),
        repr(float(snap.book_value)),
    )
    lines = [f'{key} = "{value}"' for key, value in zip(FIELD_ORDER, values)]
    return "\n".join(lines) + "\n\n"


def dumps(portfolio: Portfolio) -> str:
    return "".join(format_record(s) for s in portfolio.holdings())


def save_portfolio(portfolio: Portfolio, path: str | Path) -> None:
    """Overwrite ``path`` with every holding in collection order."""
    p = Path(path)
    try:
        p.parent.mkdir(parents=True, exist_ok=True)
        with p.open("w", encoding="utf-8") as f:
            f.write(dumps(portfolio))
    except OSError as e:
        raise PersistenceError(f"Error writing to file {p}: {e}") from e
    logger.info("Saved %d holdings to %s", len(portfolio), p)


def parse_line(line: str) -> Tuple[str, str]:
    """Split ``key = "value"`` into its key and unquoted value."""
    key, sep, value = line.partition("=")
    if not sep:
        raise ValueError(f"expected key = \"value\", got {line!r}")
    value = value.strip()
    if len(value) >= 2 and value.startswith('"') and value.endswith('"'):
        value = value[1:-1]
    return key.strip(), value


def _build(record: Dict[str, str], fees: FeeSchedule) -> Holding:
    return Holding.restore(
        kind=HoldingKind.from_label(record["type"]),
        symbol=record["symbol"],
        name=record["name"],
        quantity=int(record["quantity"]),
        price=float(record["price"]),
        book_value=float(record["bookValue"]),
        fees=fees,
    )


def load_lines(portfolio: Portfolio, lines: Iterable[str]) -> int:
    """Append every record in ``lines`` to ``portfolio``.

    Returns the number of records committed. Raises ``PersistenceError`` at
    the first line that is malformed, out of order, or fails validation;
    records committed before it remain in ``portfolio``.
    """
    record: Dict[str, str] = {}
    committed = 0
    line_number = 0

    for line_number, raw in enumerate(lines, start=1):
        line = raw.strip()
        if not line:
            continue
        try:
            key, value = parse_line(line)
        except ValueError as e:
            raise PersistenceError(str(e), line_number, portfolio) from e

        expected = FIELD_ORDER[len(record)]
        if key != expected:
            raise PersistenceError(f"expected {expected!r}, got {key!r}", line_number, portfolio)
        record[key] = value

        if key == FIELD_ORDER[-1]:
            try:
                portfolio.append(_build(record, portfolio.fees))
            except (ValueError, PortfolioError) as e:
                raise PersistenceError(str(e), line_number, portfolio) from e
            committed += 1
            record = {}

    if record:
        logger.warning("Discarded incomplete record at end of input (line %d)", line_number)
    return committed


def load_into(portfolio: Portfolio, path: str | Path) -> int:
    """Load the file at ``path`` into ``portfolio``.

    A missing file loads nothing and is not an error.
    """
    p = Path(path)
    if not p.exists():
        logger.info("File not found: %s. Starting with an empty portfolio.", p)
        return 0
    try:
        with p.open("r", encoding="utf-8") as f:
            count = load_lines(portfolio, f)
    except (OSError, UnicodeDecodeError) as e:
        raise PersistenceError(f"Error reading from file {p}: {e}", partial=portfolio) from e
    logger.info("Loaded %d holdings from %s", count, p)
    return count


def load_portfolio(path: str | Path, fees: FeeSchedule = DEFAULT_FEES) -> Portfolio:
    portfolio = Portfolio(fees=fees)
    load_into(portfolio, path)
    return portfolio


def loads(text: str, fees: FeeSchedule = DEFAULT_FEES) -> Portfolio:
    portfolio = Portfolio(fees=fees)
    load_lines(portfolio, text.splitlines())
    return portfolio
