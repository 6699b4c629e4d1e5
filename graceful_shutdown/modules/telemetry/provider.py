"""
OpenTelemetry tracing and Prometheus metrics for the service.

The provider owns the exporters and contributes their cleanup callbacks
to the resource registry, so buffered spans and the last metric values are
flushed while the shutdown budget still allows it.
"""

import asyncio
import time
from typing import Optional, Tuple

from aiohttp import web
from opentelemetry import propagate, trace
from opentelemetry.baggage.propagation import W3CBaggagePropagator
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.propagators.composite import CompositePropagator
from opentelemetry.sdk.resources import SERVICE_NAME, SERVICE_VERSION, Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, SpanExporter
from opentelemetry.sdk.trace.sampling import ParentBased, TraceIdRatioBased
from opentelemetry.trace import SpanKind
from opentelemetry.trace.propagation.tracecontext import TraceContextTextMapPropagator

from ..config import ServiceConfig
from ..logging import BaseLogger
from ..shutdown.deadline import Deadline
from ..shutdown.registry import ResourceRegistry
from .metrics import PrometheusMetrics


class TelemetryProvider:
    """Tracer provider, propagator and request metrics of the service."""

    def __init__(
        self,
        config: ServiceConfig,
        logger: BaseLogger,
        span_exporter: Optional[SpanExporter] = None,
        metrics: Optional[PrometheusMetrics] = None
    ):
        """
        Initialize telemetry from the service configuration.

        Args:
            config: Service configuration with the exporter endpoints
            logger: Logger instance
            span_exporter: Exporter for finished spans, OTLP over gRPC by default
            metrics: Request metrics, pushed to config.metrics_endpoint by default
        """
        self.config = config
        self.logger = logger

        resource = Resource.create({
            SERVICE_NAME: config.service_name,
            SERVICE_VERSION: config.service_version,
            "environment": config.env or "",
        })
        exporter = span_exporter or OTLPSpanExporter(endpoint=config.tracing_endpoint, insecure=True)
        self.tracer_provider = TracerProvider(
            resource=resource,
            sampler=ParentBased(TraceIdRatioBased(config.trace_sample_ratio)),
        )
        self.tracer_provider.add_span_processor(BatchSpanProcessor(exporter))
        self.tracer = self.tracer_provider.get_tracer(__name__)
        self.propagator = CompositePropagator([
            TraceContextTextMapPropagator(),
            W3CBaggagePropagator(),
        ])
        self.metrics = metrics or PrometheusMetrics(
            config.metrics_endpoint,
            config.service_name,
            logger,
            push_interval=config.metrics_push_interval
        )

    def setup(self) -> None:
        """Install tracing globally for the process and start pushing metrics."""
        propagate.set_global_textmap(self.propagator)
        trace.set_tracer_provider(self.tracer_provider)
        self.metrics.start()

    def register_cleanups(self, registry: ResourceRegistry) -> None:
        """Contribute the exporter cleanups, traces first."""
        registry.register("traces", self.shutdown_traces)
        registry.register("metrics", self.metrics.shutdown)

    async def shutdown_traces(self, deadline: Deadline) -> None:
        """Export buffered spans and stop the tracer provider.

        Raises:
            TimeoutError: If the spans could not be flushed before the deadline
        """
        timeout_millis = int(deadline.remaining() * 1000)
        flushed = await asyncio.to_thread(self.tracer_provider.force_flush, timeout_millis)
        if not flushed:
            raise TimeoutError("span exporter did not flush before the deadline")
        await asyncio.to_thread(self.tracer_provider.shutdown)

    def create_middleware(self):
        """Create a middleware wrapping each request in a server span."""

        @web.middleware
        async def telemetry_middleware(request: web.Request, handler):
            route = _route_name(request)
            context = self.propagator.extract(carrier=request.headers)
            started = time.monotonic()
            status = 500
            self.metrics.in_flight.inc()
            with self.tracer.start_as_current_span(
                f"{request.method} {route}",
                context=context,
                kind=SpanKind.SERVER,
                attributes={
                    "http.request.method": request.method,
                    "url.path": request.path,
                    "http.route": route,
                }
            ) as span:
                try:
                    response = await handler(request)
                    status = response.status
                    return response
                except web.HTTPException as e:
                    status = e.status
                    raise
                finally:
                    duration = time.monotonic() - started
                    span.set_attribute("http.response.status_code", status)
                    self.metrics.in_flight.dec()
                    self.metrics.record_request(request.method, route, status, duration)
                    trace_id, span_id = _span_ids(span)
                    self.logger.log_request(
                        request.method, request.path, status, duration * 1000, trace_id, span_id
                    )

        return telemetry_middleware


def _route_name(request: web.Request) -> str:
    resource = request.match_info.route.resource
    if resource is None:
        return "unmatched"
    return resource.canonical


def _span_ids(span: trace.Span) -> Tuple[Optional[str], Optional[str]]:
    context = span.get_span_context()
    if not context.is_valid or not context.trace_flags.sampled:
        return None, None
    return trace.format_trace_id(context.trace_id), trace.format_span_id(context.span_id)
