"""Shutdown coordinator sequencing readiness, listener drain and resource cleanup."""

import asyncio
import time
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Protocol

from ..config import ShutdownBudget
from ..logging import BaseLogger
from .deadline import Deadline
from .readiness import ReadinessFlag
from .registry import ResourceRegistry
from .signals import SignalListener


class DrainableListener(Protocol):
    """What the coordinator needs from the network listener."""

    async def stop_accepting(self) -> None: ...

    async def drain(self, deadline: Deadline) -> Optional[Exception]: ...

    def cancel_in_flight(self) -> None: ...

    async def close(self) -> None: ...


class ShutdownState(Enum):
    RUNNING = "running"
    DRAINING = "draining"
    TERMINATING = "terminating"
    EXITED = "exited"


@dataclass(frozen=True)
class ShutdownOutcome:
    """Result of the one shutdown a process performs.

    Attributes:
        state: Final state, always EXITED
        reason: Name of the signal that started shutdown, or "programmatic"
        drain_error: Why the listener did not drain in time, if it did not
        cleanup_error: Group of failed cleanup callbacks, if any failed
        hard_kill_applied: Whether the hard-kill period was slept
        duration_seconds: Time from trigger to EXITED
    """
    state: ShutdownState
    reason: str
    drain_error: Optional[Exception]
    cleanup_error: Optional[ExceptionGroup]
    hard_kill_applied: bool
    duration_seconds: float

    @property
    def errors(self) -> List[Exception]:
        """Drain and cleanup errors joined into one list."""
        errors: List[Exception] = []
        if self.drain_error is not None:
            errors.append(self.drain_error)
        if self.cleanup_error is not None:
            errors.extend(self.cleanup_error.exceptions)
        return errors

    @property
    def is_clean(self) -> bool:
        return not self.errors


class ShutdownCoordinator:
    """Runs the graceful shutdown sequence exactly once.

    RUNNING -> DRAINING: disarm signals, flip readiness, wait for load
    balancers to notice. DRAINING -> TERMINATING: stop accepting, drain
    in-flight requests, clean up resources. TERMINATING -> EXITED: give
    requests that outlived the drain the hard-kill period, then cut them.
    """

    def __init__(
        self,
        signals: SignalListener,
        readiness: ReadinessFlag,
        listener: DrainableListener,
        registry: ResourceRegistry,
        logger: BaseLogger,
        budget: Optional[ShutdownBudget] = None
    ):
        """
        Initialize the shutdown coordinator.

        Args:
            signals: Armed signal listener whose event starts shutdown
            readiness: Readiness flag read by the health endpoint
            listener: Network listener to stop and drain
            registry: Cleanup callbacks for shared resources
            logger: Logger instance for logging shutdown events
            budget: Durations of the shutdown phases
        """
        self.signals = signals
        self.readiness = readiness
        self.listener = listener
        self.registry = registry
        self.logger = logger
        self.budget = budget or ShutdownBudget()
        self._state = ShutdownState.RUNNING
        self._outcome: Optional[ShutdownOutcome] = None
        self._done = asyncio.Event()

    @property
    def state(self) -> ShutdownState:
        return self._state

    @property
    def outcome(self) -> Optional[ShutdownOutcome]:
        return self._outcome

    async def run(self) -> ShutdownOutcome:
        """Wait for a termination signal, then shut down."""
        sig = await self.signals.wait()
        return await self.shutdown(sig.name if sig is not None else None)

    async def shutdown(self, reason: Optional[str] = None) -> ShutdownOutcome:
        """
        Execute the shutdown sequence.

        Sub-step failures are recorded in the outcome and never raised.
        Calling this again, concurrently or later, returns the first
        call's outcome without repeating any step.

        Args:
            reason: What triggered the shutdown, for logs and the outcome

        Returns:
            The terminal ShutdownOutcome

        Raises:
            RuntimeError: In a waiting caller, if the first call was cancelled
                before it completed
        """
        if self._state is not ShutdownState.RUNNING:
            await self._done.wait()
            if self._outcome is None:
                raise RuntimeError("Shutdown was interrupted before it completed")
            return self._outcome

        try:
            return await self._shutdown(reason or "programmatic")
        finally:
            self._done.set()

    async def _shutdown(self, reason: str) -> ShutdownOutcome:
        started = time.monotonic()
        budget = self.budget

        self._state = ShutdownState.DRAINING
        self.signals.disarm()
        self.readiness.mark_shutting_down()
        self.logger.log_info(
            f"Shutting down ({reason}), waiting {budget.readiness_drain_delay:.1f}s "
            "for readiness to propagate"
        )
        await asyncio.sleep(budget.readiness_drain_delay)

        self._state = ShutdownState.TERMINATING
        # The drain ends early enough to leave cleanup its share of the grace period
        cleanup_deadline = Deadline.after(budget.grace_period)
        drain_deadline = Deadline(cleanup_deadline.when - budget.grace_period * budget.cleanup_share)
        self.logger.log_info(
            f"Readiness propagated, waiting up to {budget.drain_period:.1f}s for ongoing requests"
        )
        drain_error = await self._drain_listener(drain_deadline)
        self.listener.cancel_in_flight()
        cleanup_error = await self.registry.shutdown(cleanup_deadline)

        hard_kill_applied = False
        if drain_error is not None:
            self.logger.log_error(
                f"Failed to wait for ongoing requests to finish: {drain_error}. "
                f"Waiting {budget.hard_kill_period:.1f}s before forced cancellation"
            )
            await asyncio.sleep(budget.hard_kill_period)
            hard_kill_applied = True

        try:
            await self.listener.close()
        except Exception as e:
            self.logger.log_warning(f"Error closing listener: {str(e)}")

        self._state = ShutdownState.EXITED
        self._outcome = ShutdownOutcome(
            state=self._state,
            reason=reason,
            drain_error=drain_error,
            cleanup_error=cleanup_error,
            hard_kill_applied=hard_kill_applied,
            duration_seconds=time.monotonic() - started
        )
        self._report(self._outcome)
        return self._outcome

    async def _drain_listener(self, deadline: Deadline) -> Optional[Exception]:
        try:
            await self.listener.stop_accepting()
            return await self.listener.drain(deadline)
        except Exception as e:
            return e

    def _report(self, outcome: ShutdownOutcome) -> None:
        if outcome.is_clean:
            self.logger.log_info(f"Server shut down gracefully in {outcome.duration_seconds:.2f}s")
            return

        for error in outcome.errors:
            self.logger.log_error(f"Shutdown error: {error}")
        self.logger.log_warning(
            f"Server shut down with {len(outcome.errors)} error(s) in {outcome.duration_seconds:.2f}s"
        )
