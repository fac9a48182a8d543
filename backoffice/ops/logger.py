from __future__ import annotations
import logging
from typing import Any, Dict

from backoffice.core.config import settings


class StructuredLogger:
    def __init__(self, name: str = "backoffice.service"):
        self.logger = logging.getLogger(name)
        self.logger.setLevel(getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))

    def log_request(
        self,
        method: str,
        path: str,
        status_code: int,
        duration_ms: float,
        request_id: str | None = None,
        extra: Dict[str, Any] | None = None,
    ) -> None:
        """Logs an API request with structured fields."""
        log_data = {
            "type": "api_request",
            "method": method,
            "path": path,
            "status_code": status_code,
            "duration_ms": round(duration_ms, 2),
            "request_id": request_id,
        }
        if extra:
            log_data.update(extra)
        self.logger.info(f"Structured log: {log_data}")

    def log_error(
        self,
        message: str,
        error: Exception | None = None,
        request_id: str | None = None,
        extra: Dict[str, Any] | None = None,
    ) -> None:
        """Logs an error with its exception type if available."""
        log_data = {
            "type": "api_error",
            "message": message,
            "request_id": request_id,
            "error_type": type(error).__name__ if error else None,
        }
        if extra:
            log_data.update(extra)
        self.logger.error(f"Structured error: {log_data}")

    def log_parse_failure(self, value: Any, field: str | None = None) -> None:
        """Logs an effective date that none of the parsers accepted."""
        log_data = {
            "type": "date_parse_failure",
            "field": field,
            "value": repr(value),
        }
        self.logger.warning(f"Structured warning: {log_data}")


service_logger = StructuredLogger()
