"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Dict

from pythonjsonlogger.json import JsonFormatter

from commission_gateway.config import settings


class CustomJsonFormatter(JsonFormatter):
    """Custom JSON formatter with timestamp and service metadata"""

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["service"] = settings.service_name


def setup_logging(level: str = "INFO") -> None:
    """Configure structured JSON logging"""
    logger = logging.getLogger()
    logger.setLevel(level)

    # Remove existing handlers
    logger.handlers.clear()

    # JSON handler for stdout
    handler = logging.StreamHandler(sys.stdout)
    formatter = CustomJsonFormatter(
        "%(timestamp)s %(level)s %(name)s %(message)s"
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)


def log_transaction(
    request_id: str,
    transaction_id: int,
    amount: Decimal,
    rate: Decimal,
    commission: Decimal,
    duration_ms: float,
) -> None:
    """Log structured registration outcome for analysis"""
    logging.info(
        "Transaction registered",
        extra={
            "request_id": request_id,
            "transaction_id": transaction_id,
            "step": "transaction_registered",
            "amount": str(amount),
            "commission_rate": str(rate),
            "commission": str(commission),
            "duration_ms": duration_ms,
        },
    )


def log_rules_loaded(rules_signature: str, rule_count: int) -> None:
    logging.info(
        "Commission rules loaded",
        extra={"step": "rules_loaded", "rule_count": rule_count, "rules": rules_signature},
    )
