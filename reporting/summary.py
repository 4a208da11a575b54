from __future__ import annotations
from typing import Dict, Any, List
import pandas as pd
from portfolio.portfolio import Portfolio

FRAME_COLUMNS = ["kind", "symbol", "name", "quantity", "price", "book_value", "market_value", "gain"]

def portfolio_summary(portfolio: Portfolio) -> Dict[str, Any]:
    return {
        "total_gain": portfolio.total_gain(),
        "holdings_count": len(portfolio),
        "holdings": [
            {"symbol": s.symbol, "name": s.name, "kind": s.kind.value, "gain": g}
            for s, g in portfolio.gains()
        ],
    }

def gain_lines(portfolio: Portfolio) -> List[str]:
    return [f"{s.name} ({s.symbol}): ${g:.2f}" for s, g in portfolio.gains()]

def holdings_frame(portfolio: Portfolio) -> pd.DataFrame:
    rows = [
        {
            "kind": s.kind.value,
            "symbol": s.symbol,
            "name": s.name,
            "quantity": s.quantity,
            "price": s.price,
            "book_value": s.book_value,
            "market_value": s.market_value,
            "gain": s.gain,
        }
        for s in portfolio.holdings()
    ]
    return pd.DataFrame(rows, columns=FRAME_COLUMNS)
