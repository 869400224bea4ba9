"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Any, Dict
from pythonjsonlogger import jsonlogger

from payment_calendar.config import settings


class CustomJsonFormatter(jsonlogger.JsonFormatter):
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


def log_payment_event(
    request_id: str,
    owner_id: str,
    kind: str,
    item_id: int,
    action: str,
    payment_date: date,
    amount: Decimal | None = None,
) -> None:
    """Log a payment being recorded or undone"""
    logging.info(
        "Payment %s",
        action,
        extra={
            "request_id": request_id,
            "owner_id": owner_id,
            "kind": kind,
            "item_id": item_id,
            "step": f"payment_{action}",
            "payment_date": payment_date.isoformat(),
            "amount": str(amount) if amount is not None else None,
        },
    )
