import sys
from typing import Optional
from .base import BaseLogger


class PlainLogger(BaseLogger):
    """Logger that outputs plain text, suitable for CI/file output."""

    def __init__(self, log_level: str = "INFO"):
        super().__init__(log_level)
        self.logger.configure(
            handlers=[{
                "sink": sys.stdout,
                "format": "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {message}",
                "colorize": False,
                "level": log_level
            }]
        )

    def log_request(
        self,
        method: str,
        path: str,
        status: int,
        duration_ms: float,
        trace_id: Optional[str] = None,
        span_id: Optional[str] = None
    ):
        message = f"{method} {path} {status} {duration_ms:.1f}ms"
        if trace_id:
            message += f" trace_id={trace_id} span_id={span_id}"
        self.logger.info(message)

    def log_error(self, message: str):
        self.logger.error(message)

    def log_warning(self, message: str):
        self.logger.warning(message)

    def log_info(self, message: str):
        self.logger.info(message)

    def log_debug(self, message: str):
        self.logger.debug(message)
