import asyncio
import socket
import pytest
from unittest.mock import Mock, patch
from click.testing import CliRunner

from graceful_shutdown.main import cli
from graceful_shutdown.modules.config import ServiceConfig
from graceful_shutdown.modules.service import ServeCommand
from graceful_shutdown.modules.telemetry import PrometheusMetrics, TelemetryProvider
from opentelemetry.sdk.trace.export.in_memory_span_exporter import InMemorySpanExporter
from tests.utils.test_logger import create_test_logger

SERVE_ARGS = [
    "--output", "plain",
    "serve",
    "--port", "8080",
    "--tracing-endpoint", "collector:4317",
    "--metrics-endpoint", "pushgateway:9091",
]


def test_serve_builds_config_from_options():
    runner = CliRunner()
    with patch("graceful_shutdown.modules.service.commands.ServeCommand") as command_class:
        result = runner.invoke(cli, SERVE_ARGS + ["--grace-period", "10"])

    assert result.exit_code == 0, result.output
    config = command_class.call_args.kwargs["config"]
    assert config.port == 8080
    assert config.tracing_endpoint == "collector:4317"
    assert config.shutdown.grace_period == 10.0
    command_class.return_value.run.assert_called_once_with()


def test_serve_reads_environment():
    runner = CliRunner()
    env = {
        "GSD_PORT": "9000",
        "GSD_ENV": "production",
        "GSD_TRACING_ENDPOINT": "collector:4317",
        "GSD_METRICS_ENDPOINT": "pushgateway:9091",
    }
    with patch("graceful_shutdown.modules.service.commands.ServeCommand") as command_class:
        result = runner.invoke(cli, ["--output", "plain", "serve"], env=env)

    assert result.exit_code == 0, result.output
    config = command_class.call_args.kwargs["config"]
    assert config.port == 9000
    assert config.env == "production"


def test_serve_rejects_budget_over_grace_period():
    runner = CliRunner()
    with patch("graceful_shutdown.modules.service.commands.ServeCommand") as command_class:
        result = runner.invoke(cli, SERVE_ARGS + ["--grace-period", "40"])

    assert result.exit_code == 1
    command_class.assert_not_called()


def test_serve_requires_endpoints():
    runner = CliRunner()
    result = runner.invoke(cli, ["--output", "plain", "serve", "--port", "8080"], env={})
    assert result.exit_code == 2
    assert "--tracing-endpoint" in result.output


@pytest.mark.asyncio
async def test_start_failure_releases_resources(restore_signals):
    logger = create_test_logger()
    with socket.socket() as taken:
        taken.bind(("127.0.0.1", 0))
        taken.listen()
        port = taken.getsockname()[1]

        config = ServiceConfig(
            host="127.0.0.1",
            port=port,
            tracing_endpoint="collector:4317",
            metrics_endpoint="pushgateway:9091"
        )
        push = Mock()
        metrics = PrometheusMetrics(config.metrics_endpoint, config.service_name, logger, push=push)
        telemetry = TelemetryProvider(config, logger, span_exporter=InMemorySpanExporter(), metrics=metrics)
        command = ServeCommand(logger, config, telemetry=telemetry)

        with pytest.raises(OSError):
            await asyncio.wait_for(command.serve(), timeout=5)

    assert not command.started.is_set()
    assert logger.flushed
    push.assert_called_once()
