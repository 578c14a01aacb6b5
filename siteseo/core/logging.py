"""Structured logging configuration.

All logs go to stdout. Uses JSON format for structured logging in
production and a plain text format for local development.

ERROR LOGGING REQUIREMENTS:
- Phase transitions of the optimization pipeline at INFO level
- Rejected input (empty page list, duplicate ids) at WARNING level
- Invalid schema records at WARNING level with schema type and page id
- Orphan repair results at INFO level
- Slow phases (>1s) at WARNING level
"""

import logging
import sys
from datetime import UTC, datetime
from typing import Any

from pythonjsonlogger import jsonlogger

from siteseo.core.config import get_settings

SLOW_PHASE_THRESHOLD_MS = 1000


class CustomJsonFormatter(jsonlogger.JsonFormatter):  # type: ignore[name-defined]
    """Custom JSON formatter with additional fields."""

    def add_fields(
        self,
        log_record: dict[str, Any],
        record: logging.LogRecord,
        message_dict: dict[str, Any],
    ) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.now(UTC).isoformat()
        log_record["level"] = record.levelname
        log_record["logger"] = record.name
        if record.exc_info:
            log_record["exception"] = self.formatException(record.exc_info)


def setup_logging() -> None:
    """Configure application logging.

    Outputs to stdout only. Uses JSON format in production, text format
    in development.
    """
    settings = get_settings()

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, settings.log_level.upper()))

    # Clear existing handlers
    root_logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)

    formatter: logging.Formatter
    if settings.log_format == "json":
        formatter = CustomJsonFormatter("%(timestamp)s %(level)s %(name)s %(message)s")
    else:
        formatter = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        )

    handler.setFormatter(formatter)
    root_logger.addHandler(handler)

    # Set log levels for noisy libraries
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """Get a logger with the given name."""
    return logging.getLogger(name)


class PipelineLogger:
    """Logger for optimization pipeline phases with required error logging."""

    def __init__(self) -> None:
        self.logger = get_logger("pipeline")

    def phase_start(self, phase: str, total_pages: int) -> None:
        """Log a phase transition."""
        self.logger.info(
            f"Phase started: {phase}",
            extra={"phase": phase, "total_pages": total_pages},
        )

    def phase_complete(self, phase: str, duration_ms: float) -> None:
        """Log phase completion, warning when it was slow."""
        if duration_ms > SLOW_PHASE_THRESHOLD_MS:
            self.logger.warning(
                f"Slow phase: {phase}",
                extra={
                    "phase": phase,
                    "duration_ms": round(duration_ms, 2),
                    "threshold_ms": SLOW_PHASE_THRESHOLD_MS,
                },
            )
        else:
            self.logger.debug(
                f"Phase complete: {phase}",
                extra={"phase": phase, "duration_ms": round(duration_ms, 2)},
            )

    def input_rejected(self, field_name: str, value: Any, reason: str) -> None:
        """Log a fatal input error before any phase runs."""
        self.logger.warning(
            "Optimization input rejected",
            extra={
                "field": field_name,
                "rejected_value": str(value)[:200],
                "reason": reason,
            },
        )

    def schema_invalid(
        self, schema_type: str, page_id: str | None, errors: list[str]
    ) -> None:
        """Log an invalid schema record (kept in the output)."""
        self.logger.warning(
            "Invalid schema record",
            extra={
                "schema_type": schema_type,
                "page_id": page_id,
                "errors": errors,
            },
        )

    def orphans_repaired(
        self, pass_number: int, orphan_count: int, repaired_count: int
    ) -> None:
        """Log the result of one orphan repair pass."""
        self.logger.info(
            "Orphan repair pass complete",
            extra={
                "pass_number": pass_number,
                "orphan_count": orphan_count,
                "repaired_count": repaired_count,
            },
        )


pipeline_logger = PipelineLogger()
