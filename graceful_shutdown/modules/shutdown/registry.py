"""Ordered registry of resource cleanup callbacks."""

import time
from dataclasses import dataclass
from typing import Awaitable, Callable, List, Optional

from ..logging import BaseLogger
from .deadline import Deadline
from .errors import CleanupError, CleanupTimeoutError

CleanupFunc = Callable[[Deadline], Awaitable[None]]


@dataclass
class CleanupCallback:
    """A named cleanup step contributed by a subsystem."""
    name: str
    cleanup: CleanupFunc


class ResourceRegistry:
    """Runs cleanup callbacks once, in registration order.

    Subsystems register at construction time. Register the resources other
    cleanups report through (such as the logger) last, so they are still
    usable while the earlier ones run.
    """

    def __init__(self, logger: BaseLogger):
        """
        Initialize the registry.

        Args:
            logger: Logger instance for reporting cleanup progress
        """
        self.logger = logger
        self._callbacks: List[CleanupCallback] = []
        self._is_shut_down = False

    @property
    def names(self) -> List[str]:
        return [callback.name for callback in self._callbacks]

    @property
    def is_shut_down(self) -> bool:
        return self._is_shut_down

    def register(self, name: str, cleanup: CleanupFunc) -> None:
        """Register a cleanup callback.

        Args:
            name: Name used in logs and errors
            cleanup: Coroutine function taking the shared Deadline; it
                signals failure by raising
        """
        if self._is_shut_down:
            raise RuntimeError(f"Cannot register cleanup '{name}' after shutdown started")
        if name in self.names:
            raise ValueError(f"Cleanup '{name}' is already registered")

        self._callbacks.append(CleanupCallback(name, cleanup))

    async def shutdown(self, deadline: Deadline) -> Optional[ExceptionGroup]:
        """
        Run every registered callback in order.

        Each callback gets the same deadline. Callbacks are not cancelled
        when they overrun it; they are trusted to honor the deadline, and an
        overrun is reported as the failure of the callback that was running
        when the deadline passed.

        Args:
            deadline: Absolute deadline shared by all callbacks

        Returns:
            None if every callback succeeded, otherwise an ExceptionGroup
            with one CleanupError per failed callback. Only the first call
            does any work; later calls return None.
        """
        if self._is_shut_down:
            return None

        self._is_shut_down = True
        callbacks, self._callbacks = self._callbacks, []

        errors: List[CleanupError] = []
        for callback in callbacks:
            self.logger.log_info(f"Running cleanup: {callback.name}")
            # A callback started after the deadline is not blamed for the overrun
            started_late = deadline.expired
            try:
                await callback.cleanup(deadline)
            except Exception as e:
                error = CleanupError(callback.name, e)
                error.__cause__ = e
                errors.append(error)
                self.logger.log_error(str(error))
                continue

            overrun = time.monotonic() - deadline.when
            if overrun > 0 and not started_late:
                error = CleanupTimeoutError(callback.name, overrun)
                errors.append(error)
                self.logger.log_warning(str(error))

        if errors:
            return ExceptionGroup("resource cleanup failed", errors)
        return None
