"""SQLAlchemy ORM models for the transactions table"""

from decimal import Decimal

from sqlalchemy import Column, DateTime, Integer, Numeric, String
from sqlalchemy.orm import declarative_base
from sqlalchemy.types import TypeDecorator

Base = declarative_base()


class ExactDecimal(TypeDecorator):
    """
    Decimal column that keeps the scale it was written with.

    Unscaled NUMERIC where the backend has one. SQLite stores NUMERIC as a
    float, so there the value travels as its decimal string instead.
    """

    impl = Numeric
    cache_ok = True

    def load_dialect_impl(self, dialect):
        if dialect.name == "sqlite":
            return dialect.type_descriptor(String())
        return dialect.type_descriptor(Numeric(asdecimal=True))

    def process_bind_param(self, value, dialect):
        if value is None or dialect.name != "sqlite":
            return value
        return str(value)

    def process_result_value(self, value, dialect):
        if value is None or dialect.name != "sqlite":
            return value
        return Decimal(value)


class TransactionRow(Base):
    """Registered transaction with its computed commission"""

    __tablename__ = "transactions"

    id = Column(Integer, primary_key=True, autoincrement=True)
    amount = Column(ExactDecimal(), nullable=False)
    commission = Column(ExactDecimal(), nullable=False)
    executed_at = Column(DateTime(timezone=False), nullable=False)
