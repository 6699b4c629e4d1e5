import asyncio
from typing import List, Optional
from aiohttp import web

from ..logging import BaseLogger
from ..shutdown.readiness import ReadinessFlag
from .drain import IN_FLIGHT_CANCELLED, ListenerDrainController
from .errors import APIError, create_error_middleware

READINESS = web.AppKey("readiness", ReadinessFlag)


class APIServer:
    """HTTP surface of the service: a readiness probe and a slow demo route."""

    # How long the demo route takes to answer
    HELLO_DELAY: float = 2.0

    def __init__(
        self,
        readiness: ReadinessFlag,
        logger: BaseLogger,
        middlewares: Optional[List] = None,
        hello_delay: Optional[float] = None
    ):
        """
        Initialize the API server.

        Args:
            readiness: Flag answered by the readiness probe
            logger: Logger instance
            middlewares: Extra middlewares run outside the error handling,
                such as request telemetry
            hello_delay: Override of HELLO_DELAY
        """
        self.readiness = readiness
        self.logger = logger
        self.hello_delay = self.HELLO_DELAY if hello_delay is None else hello_delay
        self.app = web.Application(
            middlewares=[*(middlewares or []), create_error_middleware(logger)]
        )
        self.app[READINESS] = readiness
        self.app.router.add_get("/healthz", self.handle_readiness)
        self.app.router.add_get("/", self.handle_hello_world)
        self.listener = ListenerDrainController(self.app, logger)

    async def start(self, host: str, port: int) -> ListenerDrainController:
        """Start serving and return the controller of the listener."""
        await self.listener.listen(host, port)
        return self.listener

    async def handle_readiness(self, request: web.Request) -> web.Response:
        if request.app[READINESS].is_shutting_down:
            raise APIError(503, "the server is shutting down")
        return web.json_response({"message": "ok"})

    async def handle_hello_world(self, request: web.Request) -> web.Response:
        cancelled = request.app[IN_FLIGHT_CANCELLED]
        try:
            await asyncio.wait_for(cancelled.wait(), timeout=self.hello_delay)
        except asyncio.TimeoutError:
            return web.Response(text="Hello, World!")
        raise APIError(503, "request canceled")
