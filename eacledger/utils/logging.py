"""Structured logging for the document upload saga."""

import logging
from typing import Any

logger = logging.getLogger(__name__)


class StructuredSagaLogger:
    """Structured logger for attachment saga steps."""

    def log_step(
        self,
        doc_id: str,
        path: str,
        step: str,
        outcome: str,
        error_reason: str | None = None,
    ) -> None:
        """Log one saga step (upload, insert, compensate) with structured data."""
        log_data: dict[str, Any] = {
            "doc_id": doc_id,
            "path": path,
            "step": step,
            "outcome": outcome,
        }

        if error_reason:
            log_data["error_reason"] = error_reason

        log_msg = f"Document saga: {step} - {outcome}"

        if outcome == "success":
            logger.info(log_msg, extra={"structured": log_data})
        else:
            logger.warning(log_msg, extra={"structured": log_data})
