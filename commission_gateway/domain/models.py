"""Domain models - pure Python dataclasses representing business entities"""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Optional

DEFAULT_REASON_TEMPLATE = "Monto %s aplica tasa del %s"


@dataclass(frozen=True)
class ThresholdRule:
    """Commission bracket over the half-open interval [min_amount, max_amount)"""

    min_amount: Optional[Decimal]
    max_amount: Optional[Decimal]
    rate: Decimal
    reason_template: str = DEFAULT_REASON_TEMPLATE

    def matches(self, amount: Decimal) -> bool:
        if self.min_amount is not None and amount < self.min_amount:
            return False
        if self.max_amount is not None and amount >= self.max_amount:
            return False
        return True

    def describe(self) -> str:
        low = "-inf" if self.min_amount is None else str(self.min_amount)
        high = "+inf" if self.max_amount is None else str(self.max_amount)
        return f"[{low}, {high}) @ {self.rate}"


@dataclass(frozen=True)
class CommissionResult:
    """Output of rule evaluation for a single amount"""

    rate: Decimal
    commission: Decimal
    reason: str


@dataclass(frozen=True)
class TransactionRecord:
    """Persisted transaction; id is None until the store assigns one"""

    id: Optional[int]
    amount: Decimal
    commission: Decimal
    executed_at: datetime


@dataclass(frozen=True)
class TransactionView:
    """Outward view of a transaction, enriched with the applied rate and reason"""

    id: int
    amount: Decimal
    commission: Decimal
    commission_rate: Decimal
    reason: str
    executed_at: datetime
