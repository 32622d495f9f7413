"""Data access layer for transaction records"""

from typing import AsyncIterator

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from commission_gateway.domain.exceptions import StorageError
from commission_gateway.domain.models import TransactionRecord
from commission_gateway.infrastructure.database.models import TransactionRow
from commission_gateway.infrastructure.observability.metrics import storage_failures_counter


def _to_record(row: TransactionRow) -> TransactionRecord:
    return TransactionRecord(
        id=row.id,
        amount=row.amount,
        commission=row.commission,
        executed_at=row.executed_at,
    )


class TransactionRepository:
    """Repository for transaction records"""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def save(self, record: TransactionRecord) -> TransactionRecord:
        """
        Insert a record and return it with the server-assigned id.

        Raises:
            StorageError: If the insert or commit fails, in which case nothing
                is written, or if the committed row cannot be read back
        """
        row = TransactionRow(
            amount=record.amount,
            commission=record.commission,
            executed_at=record.executed_at,
        )
        try:
            self.db.add(row)
            await self.db.commit()
        except SQLAlchemyError as e:
            storage_failures_counter.labels(operation="save").inc()
            await self.db.rollback()
            raise StorageError(f"Could not save transaction: {e}") from e

        try:
            await self.db.refresh(row)  # Read back stored values
        except SQLAlchemyError as e:
            storage_failures_counter.labels(operation="refresh").inc()
            raise StorageError(f"Transaction {row.id} was saved but could not be read back: {e}") from e

        return _to_record(row)

    async def find_all(self) -> AsyncIterator[TransactionRecord]:
        """Yield every stored record in insertion (id) order"""
        try:
            rows = (await self.db.scalars(select(TransactionRow).order_by(TransactionRow.id))).all()
        except SQLAlchemyError as e:
            storage_failures_counter.labels(operation="find_all").inc()
            raise StorageError(f"Could not read transactions: {e}") from e

        for row in rows:
            yield _to_record(row)
