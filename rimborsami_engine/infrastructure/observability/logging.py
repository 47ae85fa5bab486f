"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict

from pythonjsonlogger import jsonlogger

from rimborsami_engine.config import settings


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


def log_match_outcome(
    request_id: str,
    categories_applied: int,
    matched_count: int,
    estimated_total: int,
    duration_ms: float,
) -> None:
    """Log structured matching outcome for analysis"""
    logging.info(
        "Opportunity matching completed",
        extra={
            "request_id": request_id,
            "step": "match_complete",
            "categories_applied": categories_applied,
            "matched_count": matched_count,
            "estimated_total": estimated_total,
            "duration_ms": duration_ms,
        },
    )


def log_risk_assessment(
    request_id: str,
    document_category: str,
    score: int,
    level: str,
    anomaly_count: int,
    duration_ms: float,
) -> None:
    """Log structured document assessment outcome"""
    logging.info(
        "Document assessment completed",
        extra={
            "request_id": request_id,
            "step": "assessment_complete",
            "document_category": document_category,
            "risk_score": score,
            "risk_level": level,
            "anomaly_count": anomaly_count,
            "duration_ms": duration_ms,
        },
    )
