"""Holding value model.

A holding is one tracked instrument: an equity (stock) or fund units
(mutual fund). Both share the same cost-basis arithmetic and differ only in
the fees applied on buy and sell, which come from a ``FeeSchedule``.
"""
from __future__ import annotations

import math
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Union

from portfolio.errors import InsufficientQuantityError, ValidationError

SYMBOL_PATTERN = re.compile(r"^[A-Z0-9]+$")


class HoldingKind(Enum):
    """Instrument variant."""

    STOCK = "stock"
    MUTUAL_FUND = "mutualfund"

    @classmethod
    def from_label(cls, label: Union[str, "HoldingKind"]) -> "HoldingKind":
        """Case-insensitive "stock" is a stock; anything else is a mutual fund."""
        if isinstance(label, HoldingKind):
            return label
        if str(label).strip().lower() == "stock":
            return cls.STOCK
        return cls.MUTUAL_FUND

    @property
    def display_name(self) -> str:
        return "Stock" if self is HoldingKind.STOCK else "Mutual Fund"


@dataclass(frozen=True)
class FeeSchedule:
    commission: float = 9.99  # stock, every buy and sell
    redemption_fee: float = 45.00  # mutual fund, sells only

    def buy_fee(self, kind: HoldingKind) -> float:
        return self.commission if kind is HoldingKind.STOCK else 0.0

    def sell_fee(self, kind: HoldingKind) -> float:
        return self.commission if kind is HoldingKind.STOCK else self.redemption_fee


DEFAULT_FEES = FeeSchedule()


def validate_symbol(symbol: str) -> str:
    if not isinstance(symbol, str) or not SYMBOL_PATTERN.match(symbol):
        raise ValidationError("Invalid symbol. Symbols must be alphanumeric and uppercase.")
    return symbol


def validate_name(name: str) -> str:
    if not isinstance(name, str) or not name.strip():
        raise ValidationError("Invalid name. Name cannot be empty.")
    name = name.strip()
    if len(name.splitlines()) > 1:
        raise ValidationError("Invalid name. Name cannot contain line breaks.")
    return name


def validate_quantity(quantity: int) -> int:
    if isinstance(quantity, bool) or not isinstance(quantity, int):
        raise ValidationError(f"Quantity must be a whole number, got {quantity!r}")
    if quantity <= 0:
        raise ValidationError("Quantity must be greater than zero.")
    return quantity


def validate_price(price: float) -> float:
    if isinstance(price, bool) or not isinstance(price, (int, float)):
        raise ValidationError(f"Price must be a number, got {price!r}")
    price = float(price)
    if not math.isfinite(price) or price <= 0:
        raise ValidationError("Price must be greater than zero.")
    return price


@dataclass(frozen=True)
class HoldingSnapshot:
    """Read-only view of a holding at one point in time.

    Compares equal on ``(symbol, name)`` like ``Holding`` itself.
    """

    symbol: str
    name: str
    kind: HoldingKind = field(compare=False)
    quantity: int = field(compare=False)
    price: float = field(compare=False)
    book_value: float = field(compare=False)

    @property
    def market_value(self) -> float:
        return self.quantity * self.price

    @property
    def gain(self) -> float:
        return self.market_value - self.book_value

    def __str__(self) -> str:
        return (
            f"{self.kind.display_name} [Symbol: {self.symbol}, Name: {self.name}, "
            f"Quantity: {self.quantity}, Price: {self.price:.2f}, Book Value: {self.book_value:.2f}]"
        )


class Holding:
    """One instrument with quantity, current price and cost basis.

    Use ``Holding.create`` for a first purchase and ``Holding.restore`` to
    rebuild persisted state. Symbol and name never change after creation.
    """

    def __init__(
        self,
        kind: HoldingKind,
        symbol: str,
        name: str,
        quantity: int,
        price: float,
        book_value: float,
        fees: FeeSchedule = DEFAULT_FEES,
    ) -> None:
        self._kind = kind
        self._symbol = validate_symbol(symbol)
        self._name = validate_name(name)
        self._quantity = validate_quantity(quantity)
        self._price = validate_price(price)
        self._book_value = float(book_value)
        self._fees = fees

    @classmethod
    def create(
        cls,
        kind: Union[str, HoldingKind],
        symbol: str,
        name: str,
        quantity: int,
        price: float,
        fees: FeeSchedule = DEFAULT_FEES,
    ) -> "Holding":
        kind = HoldingKind.from_label(kind)
        quantity = validate_quantity(quantity)
        price = validate_price(price)
        book_value = cls.initial_book_value(kind, quantity, price, fees)
        return cls(kind, symbol, name, quantity, price, book_value, fees)

    @classmethod
    def restore(
        cls,
        kind: Union[str, HoldingKind],
        symbol: str,
        name: str,
        quantity: int,
        price: float,
        book_value: float,
        fees: FeeSchedule = DEFAULT_FEES,
    ) -> "Holding":
        if isinstance(book_value, bool) or not isinstance(book_value, (int, float)) or not math.isfinite(book_value):
            raise ValidationError(f"Book value must be a finite number, got {book_value!r}")
        return cls(HoldingKind.from_label(kind), symbol, name, quantity, price, book_value, fees)

    @staticmethod
    def initial_book_value(kind: HoldingKind, quantity: int, price: float, fees: FeeSchedule = DEFAULT_FEES) -> float:
        return quantity * price + fees.buy_fee(kind)

    @property
    def kind(self) -> HoldingKind:
        return self._kind

    @property
    def symbol(self) -> str:
        return self._symbol

    @property
    def name(self) -> str:
        return self._name

    @property
    def quantity(self) -> int:
        return self._quantity

    @property
    def price(self) -> float:
        return self._price

    @property
    def book_value(self) -> float:
        return self._book_value

    def buy(self, additional_quantity: int, price: float) -> None:
        additional_quantity = validate_quantity(additional_quantity)
        price = validate_price(price)
        self._quantity += additional_quantity
        self._book_value += additional_quantity * price + self._fees.buy_fee(self._kind)

    def sell(self, quantity_to_sell: int, price: float) -> float:
        """Sell units and return the proceeds net of the sell fee.

        Book value drops by the average cost per unit held before the sale,
        times the units sold. Proceeds can be negative when the fee exceeds
        the sale value.
        """
        quantity_to_sell = validate_quantity(quantity_to_sell)
        price = validate_price(price)
        if quantity_to_sell > self._quantity:
            raise InsufficientQuantityError(self._symbol, quantity_to_sell, self._quantity)

        proceeds = quantity_to_sell * price - self._fees.sell_fee(self._kind)
        average_cost = self._book_value / self._quantity
        self._book_value -= average_cost * quantity_to_sell
        self._quantity -= quantity_to_sell
        return proceeds

    def update_price(self, new_price: float) -> None:
        self._price = validate_price(new_price)

    def gain(self) -> float:
        return self._quantity * self._price - self._book_value

    def snapshot(self) -> HoldingSnapshot:
        return HoldingSnapshot(
            symbol=self._symbol,
            name=self._name,
            kind=self._kind,
            quantity=self._quantity,
            price=self._price,
            book_value=self._book_value,
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Holding):
            return NotImplemented
        return (self._symbol, self._name) == (other._symbol, other._name)

    def __hash__(self) -> int:
        return hash((self._symbol, self._name))

    def __repr__(self) -> str:
        return (
            f"Holding(kind={self._kind.value!r}, symbol={self._symbol!r}, name={self._name!r}, "
            f"quantity={self._quantity}, price={self._price}, book_value={self._book_value})"
        )

    def __str__(self) -> str:
        return str(self.snapshot())
