"""Transaction registration pipeline - composes the commission engine with persistence"""

from datetime import datetime
from decimal import Decimal
from typing import AsyncIterator, Callable, Protocol, Sequence

from commission_gateway.domain.commission import evaluate
from commission_gateway.domain.exceptions import InvalidAmountError
from commission_gateway.domain.models import (
    CommissionResult,
    ThresholdRule,
    TransactionRecord,
    TransactionView,
)

Clock = Callable[[], datetime]


class TransactionStore(Protocol):
    """The two persistence operations the pipeline depends on"""

    async def save(self, record: TransactionRecord) -> TransactionRecord: ...

    def find_all(self) -> AsyncIterator[TransactionRecord]: ...


def assemble(record: TransactionRecord, rate: Decimal, reason: str) -> TransactionView:
    """Build the outward view from a persisted record plus the rate and reason that explain it"""
    return TransactionView(
        id=record.id,
        amount=record.amount,
        commission=record.commission,
        commission_rate=rate,
        reason=reason,
        executed_at=record.executed_at,
    )


class TransactionService:
    """Registers transactions and reads them back with their commission explanation"""

    def __init__(
        self,
        store: TransactionStore,
        rules: Sequence[ThresholdRule],
        clock: Clock = datetime.now,
    ):
        self.store = store
        self.rules = rules
        self.clock = clock

    def evaluate(self, amount: Decimal) -> CommissionResult:
        return evaluate(self.rules, amount)

    async def register(self, amount: Decimal) -> TransactionView:
        """
        Register a transaction.

        Flow:
        1. Evaluate the commission rule for the amount
        2. Capture the server time
        3. Persist the record (the store assigns the id)
        4. Return the persisted record enriched with rate and reason

        Errors from evaluation or storage propagate unchanged.
        """
        if amount is None or amount <= 0:
            raise InvalidAmountError(amount)

        result = self.evaluate(amount)
        record = TransactionRecord(
            id=None,
            amount=amount,
            commission=result.commission,
            executed_at=self.clock(),
        )
        saved = await self.store.save(record)
        return assemble(saved, result.rate, result.reason)

    async def list_all(self) -> AsyncIterator[TransactionView]:
        """
        Yield every stored transaction.

        Rate and reason are recomputed from the stored amount; the stored
        commission is returned untouched.
        """
        async for record in self.store.find_all():
            result = self.evaluate(record.amount)
            yield assemble(record, result.rate, result.reason)
