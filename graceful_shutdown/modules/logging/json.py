import sys
from typing import Optional
from .base import BaseLogger


class JsonLogger(BaseLogger):
    """Logger that outputs JSON for log collectors.

    Records go through an enqueued sink, so they are buffered until
    flush() drains them.
    """

    def __init__(self, log_level: str = "INFO"):
        super().__init__(log_level)
        self.logger.configure(
            handlers=[{
                "sink": sys.stdout,
                "serialize": True,  # JSON output
                "enqueue": True,
                "format": "{time} | {level} | {message}",
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
        fields = {
            "type": "request",
            "method": method,
            "path": path,
            "status": status,
            "duration_ms": duration_ms
        }
        if trace_id:
            fields["trace_id"] = trace_id
            fields["span_id"] = span_id
        self.logger.bind(**fields).info(f"{method} {path} {status}")

    def log_error(self, message: str):
        self.logger.bind(type="error").error(message)

    def log_warning(self, message: str):
        self.logger.bind(type="warning").warning(message)

    def log_info(self, message: str):
        self.logger.bind(type="info").info(message)

    def log_debug(self, message: str):
        self.logger.bind(type="debug").debug(message)
