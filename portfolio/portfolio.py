"""Holding collection.

Owns the ordered list of holdings and the keyword index over their names.
Every structural change goes through this class so the index never drifts
from the list. Callers only ever receive ``HoldingSnapshot`` copies; no live
``Holding`` leaves the collection.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, Dict, Iterator, List, Optional, Tuple, Union

from portfolio.errors import NotFoundError, ValidationError
from portfolio.holding import (
    DEFAULT_FEES,
    FeeSchedule,
    Holding,
    HoldingKind,
    HoldingSnapshot,
    validate_name,
    validate_price,
    validate_quantity,
    validate_symbol,
)
from portfolio.keyword_index import KeywordIndex, tokenize
from portfolio.price_range import PriceRange

logger = logging.getLogger(__name__)

PriceSource = Callable[[HoldingSnapshot], float]


@dataclass(eq=False)
class Portfolio:
    fees: FeeSchedule = DEFAULT_FEES
    _holdings: List[Holding] = field(default_factory=list, init=False, repr=False)
    _index: KeywordIndex = field(default_factory=KeywordIndex, init=False, repr=False)

    def __len__(self) -> int:
        return len(self._holdings)

    def _position(self, symbol: str) -> Optional[int]:
        wanted = symbol.upper()
        for i, h in enumerate(self._holdings):
            if h.symbol.upper() == wanted:
                return i
        return None

    def _require(self, symbol: str) -> Tuple[int, Holding]:
        pos = self._position(symbol)
        if pos is None:
            raise NotFoundError(symbol)
        return pos, self._holdings[pos]

    def append(self, holding: Holding) -> HoldingSnapshot:
        """Add a fully built holding at the end and index its name."""
        if self._position(holding.symbol) is not None:
            raise ValidationError(f"Duplicate symbol {holding.symbol}")
        self._holdings.append(holding)
        self._index.index(holding.name, len(self._holdings) - 1)
        logger.debug("Added %s at position %d", holding.symbol, len(self._holdings) - 1)
        return holding.snapshot()

    def buy(
        self,
        kind: Union[str, HoldingKind],
        symbol: str,
        name: str,
        quantity: int,
        price: float,
    ) -> HoldingSnapshot:
        """Buy units of ``symbol``, creating the holding on first purchase.

        When the symbol is already held, ``kind`` and ``name`` are ignored and
        the stored holding's own variant and name apply, including its fee
        rules. This quirk is intentional; the returned snapshot shows the
        kind that was actually used.
        """
        symbol = validate_symbol(symbol)
        name = validate_name(name)
        quantity = validate_quantity(quantity)
        price = validate_price(price)
        kind = HoldingKind.from_label(kind)

        pos = self._position(symbol)
        if pos is None:
            return self.append(Holding.create(kind, symbol, name, quantity, price, self.fees))

        existing = self._holdings[pos]
        if existing.kind is not kind:
            logger.warning(
                "Buy of %s requested as %s; keeping stored kind %s",
                symbol, kind.value, existing.kind.value,
            )
        existing.buy(quantity, price)
        return existing.snapshot()

    def sell(self, symbol: str, quantity: int, price: float) -> float:
        """Sell units of ``symbol`` and return the proceeds.

        A holding sold down to zero is removed and the keyword index is
        renumbered.
        """
        symbol = validate_symbol(symbol)
        quantity = validate_quantity(quantity)
        price = validate_price(price)

        pos, holding = self._require(symbol)
        proceeds = holding.sell(quantity, price)
        if holding.quantity == 0:
            del self._holdings[pos]
            self._index.remove_at(pos)
            logger.debug("Removed %s from position %d", holding.symbol, pos)
        return proceeds

    def update_price(self, symbol: str, new_price: float) -> HoldingSnapshot:
        _, holding = self._require(symbol)
        holding.update_price(new_price)
        logger.debug("Updated %s price to %s", holding.symbol, holding.price)
        return holding.snapshot()

    def update_all_prices(self, price_source: PriceSource) -> None:
        """Ask ``price_source`` for each holding's new price, in order.

        One blocking call per holding. A rejected price stops the pass;
        holdings already updated keep their new price.
        """
        for holding in self._holdings:
            holding.update_price(price_source(holding.snapshot()))
            logger.debug("Updated %s price to %s", holding.symbol, holding.price)

    def total_gain(self) -> float:
        return sum(h.gain() for h in self._holdings)

    def gains(self) -> List[Tuple[HoldingSnapshot, float]]:
        return [(h.snapshot(), h.gain()) for h in self._holdings]

    def get(self, symbol: str) -> HoldingSnapshot:
        _, holding = self._require(symbol)
        return holding.snapshot()

    def holdings(self) -> List[HoldingSnapshot]:
        return [h.snapshot() for h in self._holdings]

    def keyword_buckets(self) -> Dict[str, List[int]]:
        return self._index.buckets()

    def find(
        self,
        symbol: Optional[str] = "",
        keywords: Optional[str] = "",
        price_range: Optional[str] = "",
    ) -> Iterator[HoldingSnapshot]:
        """Yield holdings matching all three filters, in collection order.

        Blank filters match everything. Every keyword must appear in the
        name; an unknown keyword yields nothing. A malformed price range
        yields nothing. Matches are fixed when iteration starts, so the
        caller may buy or sell while looping.
        """
        wanted = (symbol or "").strip().upper()
        tokens = tokenize(keywords)
        price_filter = PriceRange.parse(price_range)

        if tokens:
            positions = sorted(self._index.query(tokens))
        else:
            positions = list(range(len(self._holdings)))
        matched = [self._holdings[pos] for pos in positions]

        for holding in matched:
            if holding.quantity == 0:
                continue  # sold out while iterating
            if wanted and holding.symbol.upper() != wanted:
                continue
            if not price_filter.matches(holding.price):
                continue
            yield holding.snapshot()

    def search(
        self,
        symbol: Optional[str] = "",
        keywords: Optional[str] = "",
        price_range: Optional[str] = "",
    ) -> Iterator[str]:
        """Display strings for ``find`` results."""
        for snap in self.find(symbol, keywords, price_range):
            yield str(snap)
