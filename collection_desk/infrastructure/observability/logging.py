"""Structured JSON logging for search and recommendation runs"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from pythonjsonlogger import jsonlogger

from collection_desk.config import settings


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


def log_search(
    mode: str,
    query_terms: int,
    record_count: int,
    total_results: int,
    duration_ms: float,
) -> None:
    """Log structured search outcome (query text is not logged)"""
    logging.getLogger("collection_desk.search").info(
        "Search completed",
        extra={
            "step": "search_complete",
            "mode": mode,
            "query_terms": query_terms,
            "record_count": record_count,
            "total_results": total_results,
            "duration_ms": duration_ms,
        },
    )


def log_recommendations(
    record_count: int,
    recommendation_count: int,
    time_filtered: bool,
    duration_ms: float,
    top_customer_id: Optional[str] = None,
) -> None:
    """Log structured recommendation run outcome"""
    logging.getLogger("collection_desk.recommendations").info(
        "Recommendations generated",
        extra={
            "step": "recommendations_complete",
            "record_count": record_count,
            "recommendation_count": recommendation_count,
            "time_filtered": time_filtered,
            "top_customer_id": top_customer_id,
            "duration_ms": duration_ms,
        },
    )
