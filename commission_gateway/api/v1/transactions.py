"""POST/GET /api/transactions - register transactions and read back the history"""

import time
from typing import List

from fastapi import APIRouter, Depends, Request

from commission_gateway.api.dependencies import get_request_id, get_transaction_service
from commission_gateway.api.responses import DecimalJSONResponse
from commission_gateway.api.v1.schemas import ErrorResponse, TransactionRequest, TransactionResponse
from commission_gateway.domain.transactions import TransactionService
from commission_gateway.infrastructure.observability.logging import log_transaction
from commission_gateway.infrastructure.observability.metrics import record_transaction

router = APIRouter()


def _to_json(view) -> dict:
    return TransactionResponse.model_validate(view).model_dump(by_alias=True)


@router.post(
    "/transactions",
    status_code=201,
    response_model=TransactionResponse,
    response_class=DecimalJSONResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def register_transaction(
    request_body: TransactionRequest,
    request: Request,
    service: TransactionService = Depends(get_transaction_service),
):
    """
    Register a transaction and charge its commission.

    Flow:
    1. Pick the first commission bracket covering the amount
    2. Compute commission (half-up, two decimals) and the reason text
    3. Persist amount, commission and server timestamp
    4. Return the stored transaction with rate and reason
    """
    start_time = time.perf_counter()

    view = await service.register(request_body.amount)

    duration_ms = (time.perf_counter() - start_time) * 1000
    record_transaction(view.amount, view.commission_rate, view.commission)
    log_transaction(
        get_request_id(request),
        view.id,
        view.amount,
        view.commission_rate,
        view.commission,
        duration_ms,
    )

    return DecimalJSONResponse(status_code=201, content=_to_json(view))


@router.get(
    "/transactions",
    response_model=List[TransactionResponse],
    response_class=DecimalJSONResponse,
    responses={500: {"model": ErrorResponse}},
)
async def list_transactions(service: TransactionService = Depends(get_transaction_service)):
    """
    Retrieve every registered transaction.

    Rate and reason are recomputed from the current rules; commission is the stored value.
    """
    items = [_to_json(view) async for view in service.list_all()]
    return DecimalJSONResponse(content=items)
