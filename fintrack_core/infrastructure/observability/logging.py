"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict
from pythonjsonlogger import jsonlogger
from fintrack_core.config import settings


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """JSON formatter stamping UTC time, level and service name on each record"""

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["service"] = settings.service_name


def setup_logging(level: str = "INFO") -> None:
    """Replace root handlers with a single stdout JSON handler"""
    logger = logging.getLogger()
    logger.setLevel(level)
    logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(CustomJsonFormatter("%(timestamp)s %(level)s %(name)s %(message)s"))
    logger.addHandler(handler)


def log_transaction_created(
    request_id: str,
    tenant_id: str,
    transaction_id: str,
    installment_count: int,
    is_recurring: bool,
    duration_ms: float,
) -> None:
    """Log one record per created transaction or installment group"""
    logging.info(
        "Transaction created",
        extra={
            "request_id": request_id,
            "tenant_id": tenant_id,
            "transaction_id": transaction_id,
            "step": "transaction_created",
            "installment_count": installment_count,
            "is_recurring": is_recurring,
            "duration_ms": duration_ms,
        },
    )


def log_catalog_change(request_id: str, tenant_id: str, entity: str, entity_id: str, action: str) -> None:
    logging.info(
        f"{entity.capitalize()} {action}",
        extra={
            "request_id": request_id,
            "tenant_id": tenant_id,
            "step": f"{entity}_{action}",
            "entity": entity,
            "entity_id": entity_id,
        },
    )


def log_rejection(request_id: str, tenant_id: str, entity: str, reason: str, detail: str) -> None:
    logging.warning(
        f"{entity.capitalize()} rejected",
        extra={
            "request_id": request_id,
            "tenant_id": tenant_id,
            "step": f"{entity}_rejected",
            "entity": entity,
            "reason": reason,
            "detail": detail,
        },
    )
