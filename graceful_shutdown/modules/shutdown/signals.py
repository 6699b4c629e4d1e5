"""Termination signal listener for the running event loop."""

import asyncio
from asyncio import AbstractEventLoop
import signal
from typing import List, Optional, Union

from ..logging import BaseLogger

SignalType = Union[signal.Signals, int]


class SignalListener:
    """Turns the first termination signal into a single-fire event.

    While armed, the OS default action for the registered signals is
    suppressed. disarm() hands the signals back to SIG_DFL, so pressing
    Ctrl+C (or sending SIGTERM) a second time kills the process on the
    spot without running any cleanup.
    """

    DEFAULT_SIGNALS = (signal.SIGINT, signal.SIGTERM)

    def __init__(self, logger: BaseLogger):
        """
        Initialize the signal listener.

        Args:
            logger: Logger instance for reporting received signals
        """
        self.logger = logger
        self._event = asyncio.Event()
        self._loop: Optional[AbstractEventLoop] = None
        self._signals: List[signal.Signals] = []
        self._disarmed = False
        self.received: Optional[signal.Signals] = None

    @property
    def is_armed(self) -> bool:
        return self._loop is not None

    @property
    def is_triggered(self) -> bool:
        return self._event.is_set()

    def arm(self, *signals: SignalType) -> asyncio.Event:
        """
        Register handlers on the running event loop.

        Args:
            signals: Signals to listen for, SIGINT and SIGTERM by default

        Returns:
            The event that is set when the first signal arrives
        """
        if self._loop is not None or self._disarmed:
            raise RuntimeError("Signal listener can only be armed once")

        loop = asyncio.get_running_loop()
        for sig in (signals or self.DEFAULT_SIGNALS):
            sig = signal.Signals(sig)
            try:
                loop.add_signal_handler(sig, self._handle_signal, sig)
            except NotImplementedError:
                # No loop signal handlers on Windows
                self.logger.log_warning(f"Signal handling not supported on this platform for {sig.name}")
                continue
            self._signals.append(sig)
            self.logger.log_debug(f"Listening for {sig.name}")

        self._loop = loop
        return self._event

    def disarm(self) -> None:
        """Stop listening and restore the OS default action for every armed signal."""
        if self._loop is None:
            return

        for sig in self._signals:
            self._loop.remove_signal_handler(sig)
            signal.signal(sig, signal.SIG_DFL)

        self.logger.log_debug("Signal handlers removed, a repeated signal will terminate immediately")
        self._signals = []
        self._loop = None
        self._disarmed = True

    def trigger(self, sig: Optional[SignalType] = None) -> None:
        """Fire the event without a real signal, e.g. from application code."""
        if self._event.is_set():
            return
        self.received = signal.Signals(sig) if sig is not None else None
        self._event.set()

    async def wait(self) -> Optional[signal.Signals]:
        """Block until the event fires and return the signal that fired it."""
        await self._event.wait()
        return self.received

    def _handle_signal(self, sig: signal.Signals) -> None:
        if self._event.is_set():
            self.logger.log_warning(f"Received {sig.name} while shutdown is already pending, ignoring")
            return

        self.logger.log_info(f"Received {sig.name} signal, initiating graceful shutdown...")
        self.received = sig
        self._event.set()
