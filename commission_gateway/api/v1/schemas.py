"""Pydantic schemas for API request/response validation"""

from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator
from pydantic_core import PydanticCustomError

from commission_gateway.domain.rules import MAX_LEGAL_AMOUNT, MIN_LEGAL_AMOUNT

AMOUNT_REQUIRED = "El monto es requerido"
AMOUNT_NOT_POSITIVE = "El monto debe ser mayor a cero"
AMOUNT_NOT_A_NUMBER = "El monto debe ser un numero valido"
AMOUNT_TOO_LARGE = "El monto excede el maximo permitido"

EXECUTED_AT_FORMAT = "%Y-%m-%dT%H:%M:%S"


class TransactionRequest(BaseModel):
    """Request body for POST /api/transactions"""

    amount: Optional[Decimal] = Field(
        default=None,
        validate_default=True,
        description="Transaction amount, at least 0.01, kept at the scale it was sent with",
        examples=["15000.50"],
    )

    @field_validator("amount", mode="before")
    @classmethod
    def parse_amount(cls, value):
        if value is None:
            raise PydanticCustomError("amount_required", AMOUNT_REQUIRED)
        if isinstance(value, bool):
            raise PydanticCustomError("amount_not_a_number", AMOUNT_NOT_A_NUMBER)
        try:
            amount = Decimal(str(value).strip())
        except InvalidOperation:
            raise PydanticCustomError("amount_not_a_number", AMOUNT_NOT_A_NUMBER) from None
        if not amount.is_finite():
            raise PydanticCustomError("amount_not_a_number", AMOUNT_NOT_A_NUMBER)
        return amount

    @field_validator("amount")
    @classmethod
    def check_amount(cls, value: Decimal) -> Decimal:
        if value < MIN_LEGAL_AMOUNT:
            raise PydanticCustomError("amount_not_positive", AMOUNT_NOT_POSITIVE)
        if value >= MAX_LEGAL_AMOUNT:
            raise PydanticCustomError("amount_too_large", AMOUNT_TOO_LARGE)
        if value.as_tuple().exponent > 0:
            # 1E+3 -> 1000, no exponent notation on the wire
            return value.quantize(Decimal(1))
        return value


class TransactionResponse(BaseModel):
    """Response for POST and GET /api/transactions"""

    model_config = ConfigDict(from_attributes=True)

    id: int
    amount: Decimal
    commission: Decimal
    commission_rate: Decimal = Field(serialization_alias="commissionRate")
    reason: str
    executed_at: datetime = Field(serialization_alias="executedAt")

    @field_serializer("executed_at")
    def serialize_executed_at(self, value: datetime) -> str:
        # Zoneless on the wire
        return value.strftime(EXECUTED_AT_FORMAT)


class ErrorResponse(BaseModel):
    """Error body produced by the error boundary"""

    message: str
    errors: Dict[str, str] = Field(default_factory=dict)
