import asyncio
import sys
from typing import Optional

from ...config import ServiceConfig
from ...logging import BaseLogger
from ...server import APIServer
from ...shutdown import (
    Deadline,
    ReadinessFlag,
    ResourceRegistry,
    ShutdownCoordinator,
    ShutdownOutcome,
    SignalListener,
)
from ...telemetry import TelemetryProvider


class ServeCommand:
    """Command class for running the service until it is told to stop."""

    def __init__(
        self,
        logger: BaseLogger,
        config: ServiceConfig,
        telemetry: Optional[TelemetryProvider] = None,
        hello_delay: Optional[float] = None
    ):
        """
        Initialize the serve command.

        Args:
            logger: Logger instance
            config: Validated service configuration
            telemetry: Telemetry provider, built from config when omitted
            hello_delay: Override of the demo route delay
        """
        self.logger = logger
        self.config = config
        self.telemetry = telemetry
        self.hello_delay = hello_delay
        self.server: Optional[APIServer] = None
        self.coordinator: Optional[ShutdownCoordinator] = None
        self.started = asyncio.Event()

    async def serve(self) -> ShutdownOutcome:
        """Serve until a termination signal, then shut down gracefully."""
        signals = SignalListener(self.logger)
        signals.arm()
        readiness = ReadinessFlag()
        registry = ResourceRegistry(self.logger)

        telemetry = self.telemetry or TelemetryProvider(self.config, self.logger)
        telemetry.setup()
        telemetry.register_cleanups(registry)
        # Last, so the other cleanups can still report through it
        registry.register("logger", self.logger.flush)

        self.server = APIServer(
            readiness,
            self.logger,
            middlewares=[telemetry.create_middleware()],
            hello_delay=self.hello_delay
        )
        try:
            listener = await self.server.start(self.config.host, self.config.port)
        except Exception:
            signals.disarm()
            await self.server.listener.close()
            await registry.shutdown(Deadline.after(self.config.shutdown.grace_period))
            raise

        self.coordinator = ShutdownCoordinator(
            signals,
            readiness,
            listener,
            registry,
            self.logger,
            self.config.shutdown
        )
        self.started.set()
        return await self.coordinator.run()

    def run(self) -> ShutdownOutcome:
        """Run the service on a fresh event loop."""
        if self.config.env:
            self.logger.log_info(f"Starting {self.config.service_name} ({self.config.env})")
        try:
            return asyncio.run(self.serve())
        except OSError as err:
            self.logger.log_error(f"Server failed to start: {str(err)}")
            sys.exit(1)
