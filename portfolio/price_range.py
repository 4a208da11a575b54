"""Price-range expressions used to filter holdings by current price.

    ""        any price
    "P"       price == P
    "P-"      price >= P
    "-P"      price <= P
    "P1-P2"   P1 <= price <= P2

Numbers are digits with an optional one or two digit fraction. Any other
expression matches nothing; it is never an error.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional

_NUMBER = r"\d+(?:\.\d{1,2})?"

EXACT = re.compile(rf"^({_NUMBER})$")
AT_LEAST = re.compile(rf"^({_NUMBER})-$")
AT_MOST = re.compile(rf"^-({_NUMBER})$")
BETWEEN = re.compile(rf"^({_NUMBER})-({_NUMBER})$")


@dataclass(frozen=True)
class PriceRange:
    low: Optional[float] = None
    high: Optional[float] = None
    valid: bool = True

    @classmethod
    def parse(cls, expr: Optional[str]) -> "PriceRange":
        if expr is None or not expr.strip():
            return cls()
        expr = expr.strip()

        m = EXACT.match(expr)
        if m:
            p = float(m.group(1))
            return cls(low=p, high=p)
        m = AT_LEAST.match(expr)
        if m:
            return cls(low=float(m.group(1)))
        m = AT_MOST.match(expr)
        if m:
            return cls(high=float(m.group(1)))
        m = BETWEEN.match(expr)
        if m:
            return cls(low=float(m.group(1)), high=float(m.group(2)))
        return cls(valid=False)

    @property
    def unbounded(self) -> bool:
        return self.valid and self.low is None and self.high is None

    def matches(self, price: float) -> bool:
        if not self.valid:
            return False
        if self.low is not None and price < self.low:
            return False
        if self.high is not None and price > self.high:
            return False
        return True


def matches_price_range(price: float, expr: Optional[str]) -> bool:
    return PriceRange.parse(expr).matches(price)
