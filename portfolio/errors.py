"""Errors raised by holding and collection operations."""
from __future__ import annotations

from typing import Any, Optional


class PortfolioError(Exception):
    """Base class for every error raised by the holdings ledger."""

    pass


class ValidationError(PortfolioError, ValueError):
    """Bad symbol, name, quantity or price. Raised before any state changes."""

    pass


class InsufficientQuantityError(PortfolioError):
    """Sell request exceeds the quantity held."""

    def __init__(self, symbol: str, requested: int, held: int) -> None:
        super().__init__(f"Insufficient quantity to sell {symbol}: requested {requested}, held {held}")
        self.symbol = symbol
        self.requested = requested
        self.held = held


class NotFoundError(PortfolioError, LookupError):
    """No holding matches the given symbol."""

    def __init__(self, symbol: str) -> None:
        super().__init__(f"Investment with symbol {symbol} not found")
        self.symbol = symbol


class PersistenceError(PortfolioError):
    """Reading or writing the holdings file failed.

    ``partial`` carries the collection as it stood when a load was aborted,
    holding every record committed before the failing line.
    """

    def __init__(self, message: str, line_number: Optional[int] = None, partial: Any = None) -> None:
        if line_number is not None:
            message = f"line {line_number}: {message}"
        super().__init__(message)
        self.line_number = line_number
        self.partial = partial
