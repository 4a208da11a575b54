from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict
from portfolio.errors import ValidationError
from portfolio.holding import DEFAULT_FEES, FeeSchedule

@dataclass(frozen=True)
class FeePolicy:
    raw: Dict[str, Any]

    @property
    def commission(self) -> float:
        return float(self.raw.get("commission", DEFAULT_FEES.commission))

    @property
    def redemption_fee(self) -> float:
        return float(self.raw.get("redemption_fee", DEFAULT_FEES.redemption_fee))

    def schedule(self) -> FeeSchedule:
        if self.commission < 0 or self.redemption_fee < 0:
            raise ValidationError(
                f"Fees must not be negative, got commission={self.commission} redemption_fee={self.redemption_fee}"
            )
        return FeeSchedule(commission=self.commission, redemption_fee=self.redemption_fee)
