"""Listener drain control for the aiohttp server."""

import asyncio
from typing import Optional
from aiohttp import web

from ..logging import BaseLogger
from ..shutdown.deadline import Deadline
from ..shutdown.errors import DrainTimeoutError

# Set when requests still running should give up early
IN_FLIGHT_CANCELLED = web.AppKey("in_flight_cancelled", asyncio.Event)

# How long close() lets surviving handlers run before cancelling them
CLOSE_TIMEOUT = 0.1


class ListenerDrainController:
    """Wraps the network listener of an aiohttp application.

    Installs an outermost middleware counting in-flight requests, so the
    drain can tell when the last accepted request has been answered.
    """

    def __init__(self, app: web.Application, logger: BaseLogger):
        """
        Attach the controller to an application that has not started yet.

        Args:
            app: Application whose requests are tracked
            logger: Logger instance for drain progress
        """
        self.app = app
        self.logger = logger
        self._runner: Optional[web.AppRunner] = None
        self._in_flight = 0
        self._idle = asyncio.Event()
        self._idle.set()
        self._draining = False
        self._closed = False
        self._cancelled = asyncio.Event()
        self.port: Optional[int] = None

        app.middlewares.insert(0, self._track_in_flight)
        app[IN_FLIGHT_CANCELLED] = self._cancelled

    @property
    def in_flight(self) -> int:
        return self._in_flight

    @property
    def is_draining(self) -> bool:
        return self._draining

    async def listen(self, host: str, port: int) -> None:
        """Start accepting connections.

        Args:
            host: Interface to bind
            port: Port to bind, 0 picks a free one
        """
        runner = web.AppRunner(self.app, shutdown_timeout=CLOSE_TIMEOUT, access_log=None)
        await runner.setup()
        self._runner = runner
        site = web.TCPSite(runner, host, port)
        await site.start()
        self.port = runner.addresses[0][1]
        self.logger.log_info(f"Server listening on {host}:{self.port}")

    async def stop_accepting(self) -> None:
        """Close the listening sockets; accepted connections keep being served."""
        self._draining = True
        if self._runner is None:
            return
        for site in list(self._runner.sites):
            await site.stop()
        self.logger.log_info("Stopped accepting new connections")

    async def drain(self, deadline: Deadline) -> Optional[DrainTimeoutError]:
        """
        Wait for in-flight requests to complete.

        Args:
            deadline: When to stop waiting

        Returns:
            None once no request is in flight, or a DrainTimeoutError if the
            deadline passed first; the remaining requests are still running.
        """
        self._draining = True
        # Let connections accepted just before the sockets closed reach a handler
        await asyncio.sleep(0)
        if not self._idle.is_set():
            try:
                await asyncio.wait_for(self._idle.wait(), timeout=deadline.remaining())
            except asyncio.TimeoutError:
                return DrainTimeoutError(self._in_flight)

        self.logger.log_info("All in-flight requests completed")
        return None

    def cancel_in_flight(self) -> None:
        """Tell handlers still running that they should stop early."""
        if self._in_flight:
            self.logger.log_warning(f"Cancelling {self._in_flight} in-flight request(s)")
        self._cancelled.set()

    async def close(self) -> None:
        """Close every remaining connection and release the runner."""
        if self._closed or self._runner is None:
            return
        self._closed = True
        await self._runner.cleanup()

    @web.middleware
    async def _track_in_flight(self, request: web.Request, handler):
        self._in_flight += 1
        self._idle.clear()
        try:
            response = await handler(request)
            if self._draining:
                # No keep-alive once the listener is going away
                response.force_close()
            return response
        finally:
            self._in_flight -= 1
            if self._in_flight == 0:
                self._idle.set()
