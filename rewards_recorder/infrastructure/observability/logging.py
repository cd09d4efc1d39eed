"""Structured JSON logging"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict
from pythonjsonlogger import jsonlogger

from rewards_recorder.config import settings


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

    handler = logging.StreamHandler(sys.stdout)
    formatter = CustomJsonFormatter(
        "%(timestamp)s %(level)s %(name)s %(message)s"
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)


def log_award_change(request_id: str, action: str, award_ids: list[str]) -> None:
    """Log a create / update / toggle / delete of one or more awards"""
    logging.info(
        "Awards changed",
        extra={
            "request_id": request_id,
            "step": f"award_{action}",
            "award_ids": award_ids,
            "award_count": len(award_ids),
        },
    )


def log_import(request_id: str, accepted: int, rejected: int, replaced: bool) -> None:
    """Log the outcome of an import preview or confirmed replace"""
    logging.info(
        "Import processed",
        extra={
            "request_id": request_id,
            "step": "import_replace" if replaced else "import_preview",
            "accepted": accepted,
            "rejected": rejected,
        },
    )
