import asyncio
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Optional
from loguru import logger

if TYPE_CHECKING:
    from ..shutdown.deadline import Deadline


class BaseLogger(ABC):
    """Abstract base class for loggers."""

    def __init__(self, log_level: str = "INFO"):
        self.logger = logger
        self.log_level = log_level

    @abstractmethod
    def log_request(
        self,
        method: str,
        path: str,
        status: int,
        duration_ms: float,
        trace_id: Optional[str] = None,
        span_id: Optional[str] = None
    ):
        """Log a served HTTP request."""
        pass

    @abstractmethod
    def log_error(self, message: str):
        """Log an error message."""
        pass

    @abstractmethod
    def log_warning(self, message: str):
        """Log a warning message."""
        pass

    @abstractmethod
    def log_info(self, message: str):
        """Log an info message."""
        pass

    @abstractmethod
    def log_debug(self, message: str):
        """Log a debug message."""
        pass

    async def flush(self, deadline: "Deadline") -> None:
        """Wait for buffered log records to reach their sinks.

        Args:
            deadline: Point in time by which the flush must be done

        Raises:
            TimeoutError: If the sinks did not drain before the deadline
        """
        # complete() blocks until enqueued records are written
        completer = await asyncio.wait_for(
            asyncio.to_thread(self.logger.complete),
            timeout=deadline.remaining()
        )
        await completer
