from typing import List, Optional
from graceful_shutdown.modules.logging.base import BaseLogger


class _TestLogger(BaseLogger):
    """Test logger that captures all logs."""
    def __init__(self):
        self.logs: List[str] = []
        self.flushed = False

    def log_info(self, message: str) -> None:
        self.logs.append(f"INFO: {message}")

    def log_error(self, message: str) -> None:
        self.logs.append(f"ERROR: {message}")

    def log_warning(self, message: str) -> None:
        self.logs.append(f"WARNING: {message}")

    def log_debug(self, message: str) -> None:
        self.logs.append(f"DEBUG: {message}")

    def log_request(
        self,
        method: str,
        path: str,
        status: int,
        duration_ms: float,
        trace_id: Optional[str] = None,
        span_id: Optional[str] = None
    ) -> None:
        self.logs.append(f"REQUEST: {method} {path} {status}")

    async def flush(self, deadline) -> None:
        self.flushed = True

    def get_logs(self) -> List[str]:
        """Get all captured logs."""
        return self.logs


def create_test_logger() -> _TestLogger:
    """Create a test logger instance."""
    return _TestLogger()
