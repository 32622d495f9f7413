"""Error boundary: maps validation, domain and unexpected failures to HTTP responses"""

import logging
from typing import Dict

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError

from commission_gateway.api.dependencies import get_request_id
from commission_gateway.api.responses import DecimalJSONResponse
from commission_gateway.api.v1.schemas import AMOUNT_NOT_POSITIVE, ErrorResponse
from commission_gateway.domain.exceptions import InvalidAmountError, NoMatchingRuleError, StorageError
from commission_gateway.infrastructure.observability.metrics import rule_evaluation_failures_counter

INVALID_REQUEST = "Solicitud invalida"
INTERNAL_ERROR = "Se presento un error interno"
STORAGE_FAILURE = "Error al acceder al almacenamiento"
BODY_REQUIRED = "El cuerpo de la solicitud es requerido"
BODY_NOT_JSON = "El cuerpo de la solicitud no es un JSON valido"

logger = logging.getLogger(__name__)


def _error_response(status_code: int, message: str, errors: Dict[str, str] | None = None) -> DecimalJSONResponse:
    body = ErrorResponse(message=message, errors=errors or {})
    return DecimalJSONResponse(status_code=status_code, content=body.model_dump())


def field_errors(exc: RequestValidationError) -> Dict[str, str]:
    """Collapse pydantic errors into {field: message}; later errors on a field win"""
    errors: Dict[str, str] = {}
    for error in exc.errors():
        error_type = error.get("type")
        if error_type == "json_invalid":
            errors["body"] = BODY_NOT_JSON
            continue

        path = [str(part) for part in error.get("loc", ()) if part != "body"]
        field = ".".join(path) or "body"
        if field == "body" and error_type == "missing":
            errors[field] = BODY_REQUIRED
        else:
            errors[field] = error.get("msg", "")
    return errors


async def handle_validation_error(request: Request, exc: RequestValidationError) -> DecimalJSONResponse:
    errors = field_errors(exc)
    logger.info("Rejected request", extra={"request_id": get_request_id(request), "errors": errors})
    return _error_response(400, INVALID_REQUEST, errors)


async def handle_invalid_amount(request: Request, exc: InvalidAmountError) -> DecimalJSONResponse:
    return _error_response(400, INVALID_REQUEST, {"amount": AMOUNT_NOT_POSITIVE})


async def handle_no_matching_rule(request: Request, exc: NoMatchingRuleError) -> DecimalJSONResponse:
    rule_evaluation_failures_counter.inc()
    logger.error(
        "No commission rule matched",
        extra={
            "request_id": get_request_id(request),
            "amount": str(exc.amount),
            "rules": exc.rules_signature,
        },
    )
    return _error_response(500, INTERNAL_ERROR)


async def handle_storage_error(request: Request, exc: StorageError) -> DecimalJSONResponse:
    logger.error(f"Storage error: {exc}", extra={"request_id": get_request_id(request)})
    return _error_response(500, STORAGE_FAILURE, {"error": str(exc)})


async def handle_unexpected_error(request: Request, exc: Exception) -> DecimalJSONResponse:
    logger.exception(f"Unexpected error: {exc}", extra={"request_id": get_request_id(request)})
    return _error_response(500, INTERNAL_ERROR, {"error": str(exc)})


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(RequestValidationError, handle_validation_error)
    app.add_exception_handler(InvalidAmountError, handle_invalid_amount)
    app.add_exception_handler(NoMatchingRuleError, handle_no_matching_rule)
    app.add_exception_handler(StorageError, handle_storage_error)
    app.add_exception_handler(Exception, handle_unexpected_error)
