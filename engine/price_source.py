"""Price sources for the batch price update.

A price source is any callable taking a ``HoldingSnapshot`` and returning the
new price for it. ``Portfolio.update_all_prices`` calls it once per holding,
in collection order.
"""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Dict, Mapping, Optional, TextIO

import pandas as pd

from portfolio.errors import PersistenceError
from portfolio.holding import HoldingSnapshot

logger = logging.getLogger(__name__)


def _normalize(quotes: Mapping[str, float]) -> Dict[str, float]:
    return {str(k).strip().upper(): float(v) for k, v in quotes.items()}


class StaticPriceSource:
    """Quotes from an in-memory mapping. Unquoted symbols keep their price."""

    def __init__(self, quotes: Mapping[str, float]) -> None:
        self.quotes = _normalize(quotes)

    def __call__(self, snap: HoldingSnapshot) -> float:
        price = self.quotes.get(snap.symbol.upper())
        if price is None:
            logger.info("No quote for %s; keeping %.2f", snap.symbol, snap.price)
            return snap.price
        return price


class CsvPriceSource(StaticPriceSource):
    """Quotes read from a CSV file with ``symbol`` and ``price`` columns."""

    def __init__(self, path: str | Path) -> None:
        try:
            df = pd.read_csv(path, dtype={"symbol": str})
        except (OSError, pd.errors.ParserError, pd.errors.EmptyDataError) as e:
            raise PersistenceError(f"Cannot read prices from {path}: {e}") from e
        missing = {"symbol", "price"} - set(df.columns)
        if missing:
            raise PersistenceError(f"Price CSV must contain columns {sorted(missing)}")
        df = df.assign(price=pd.to_numeric(df["price"], errors="coerce")).dropna(subset=["symbol", "price"])
        super().__init__(dict(zip(df["symbol"], df["price"])))


@dataclass
class PromptPriceSource:
    """Asks for each price interactively until a positive number is entered."""

    read: Callable[[str], str] = input
    out: Optional[TextIO] = None

    def _say(self, msg: str) -> None:
        print(msg, file=self.out)

    def __call__(self, snap: HoldingSnapshot) -> float:
        prompt = f"Enter new price for {snap.kind.display_name} {snap.symbol} (current {snap.price:.2f}): "
        while True:
            text = self.read(prompt).strip()
            try:
                price = float(text)
            except ValueError:
                self._say("Invalid price format. Please enter a valid number.")
                continue
            if math.isfinite(price) and price > 0:
                return price
            self._say("Price must be greater than 0. Please enter a valid price.")
