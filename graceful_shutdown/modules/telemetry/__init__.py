"""Telemetry module wiring tracing and metrics exporters."""

from .metrics import PrometheusMetrics
from .provider import TelemetryProvider

__all__ = ['PrometheusMetrics', 'TelemetryProvider']
