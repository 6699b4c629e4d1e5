import asyncio
from typing import Callable, Optional
from prometheus_client import CollectorRegistry, Counter, Gauge, Histogram, push_to_gateway

from ..logging import BaseLogger
from ..shutdown.deadline import Deadline


class PrometheusMetrics:
    """Request metrics pushed to a Prometheus push gateway."""

    def __init__(
        self,
        push_gateway: str,
        job_name: str,
        logger: BaseLogger,
        push_interval: float = 30.0,
        push: Callable[..., None] = push_to_gateway
    ):
        """Initialize the metrics.

        Args:
            push_gateway: Address of the Prometheus push gateway
            job_name: Name of the job for the metrics
            logger: Logger instance for push failures
            push_interval: Seconds between periodic pushes
            push: Function performing the push, push_to_gateway by default
        """
        self.push_gateway = push_gateway
        self.job_name = job_name
        self.logger = logger
        self.push_interval = push_interval
        self._push = push
        self._push_task: Optional[asyncio.Task] = None
        self.registry = CollectorRegistry()

        self.request_total = Counter(
            'http_server_requests_total',
            'Total number of served requests',
            ['method', 'route', 'status_code'],
            registry=self.registry
        )
        self.request_duration = Histogram(
            'http_server_request_duration_seconds',
            'Duration of served requests in seconds',
            ['method', 'route'],
            registry=self.registry
        )
        self.in_flight = Gauge(
            'http_server_requests_in_flight',
            'Number of requests currently being served',
            registry=self.registry
        )

    def record_request(self, method: str, route: str, status_code: int, duration: float) -> None:
        """Record one served request."""
        self.request_total.labels(
            method=method,
            route=route,
            status_code=str(status_code)
        ).inc()
        self.request_duration.labels(method=method, route=route).observe(duration)

    def start(self) -> None:
        """Start pushing periodically in the background."""
        if self._push_task is None:
            self._push_task = asyncio.create_task(self._push_loop())

    async def push(self, timeout: float = 30.0) -> None:
        """Push all collected metrics to the gateway."""
        await asyncio.to_thread(
            self._push,
            self.push_gateway,
            job=self.job_name,
            registry=self.registry,
            timeout=timeout
        )

    async def shutdown(self, deadline: Deadline) -> None:
        """Stop the periodic push and flush the final values.

        Raises:
            TimeoutError: If the final push did not finish before the deadline
            OSError: If the push gateway could not be reached
        """
        if self._push_task is not None:
            self._push_task.cancel()
            try:
                await self._push_task
            except asyncio.CancelledError:
                pass
            self._push_task = None

        remaining = deadline.remaining()
        await asyncio.wait_for(self.push(timeout=remaining), timeout=remaining)

    async def _push_loop(self) -> None:
        while True:
            await asyncio.sleep(self.push_interval)
            try:
                await self.push()
            except Exception as e:
                # Keep pushing on the next tick
                self.logger.log_warning(f"Failed to push metrics to Prometheus gateway: {e}")
