"""Dependency injection for FastAPI endpoints"""

from datetime import datetime
from typing import Tuple

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from commission_gateway.domain.models import ThresholdRule
from commission_gateway.domain.transactions import Clock, TransactionService
from commission_gateway.infrastructure.database.repositories import TransactionRepository
from commission_gateway.infrastructure.database.session import get_db


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_rules(request: Request) -> Tuple[ThresholdRule, ...]:
    """Rule list loaded once by create_app"""
    return request.app.state.commission_rules


def get_clock() -> Clock:
    """Server clock; overridden in tests"""
    return datetime.now


def get_transaction_service(
    db: AsyncSession = Depends(get_db),
    rules: Tuple[ThresholdRule, ...] = Depends(get_rules),
    clock: Clock = Depends(get_clock),
) -> TransactionService:
    """Provide the registration pipeline bound to this request's session"""
    return TransactionService(TransactionRepository(db), rules, clock)
