from typing import Optional
import click

from ..config import ConfigurationError, load_config
from .command.serve import ServeCommand


def create_serve_command() -> click.Command:
    """Create the serve command."""

    @click.command(name="serve")
    @click.option("--port", type=int, required=True, envvar="GSD_PORT", help="Port to listen on")
    @click.option("--host", default="0.0.0.0", envvar="GSD_HOST", help="Interface to bind")
    @click.option("--env", default=None, envvar="GSD_ENV", help="Deployment environment tag")
    @click.option("--tracing-endpoint", required=True, envvar="GSD_TRACING_ENDPOINT",
                  help="OTLP gRPC endpoint receiving traces")
    @click.option("--metrics-endpoint", required=True, envvar="GSD_METRICS_ENDPOINT",
                  help="Prometheus push gateway receiving metrics")
    @click.option("--readiness-drain-delay", type=float, default=5.0, envvar="GSD_READINESS_DRAIN_DELAY",
                  help="Seconds between failing readiness and closing the listener")
    @click.option("--grace-period", type=float, default=15.0, envvar="GSD_GRACE_PERIOD",
                  help="Seconds allowed for in-flight requests and resource cleanup")
    @click.option("--hard-kill-period", type=float, default=3.0, envvar="GSD_HARD_KILL_PERIOD",
                  help="Seconds granted to requests that outlive the grace period")
    @click.option("--termination-grace-period", type=float, default=30.0,
                  envvar="GSD_TERMINATION_GRACE_PERIOD",
                  help="Seconds the host waits before killing the process")
    @click.option("--cleanup-share", type=float, default=0.2, envvar="GSD_CLEANUP_SHARE",
                  help="Fraction of the grace period reserved for resource cleanup")
    @click.pass_context
    def serve(
        ctx,
        port: int,
        host: str,
        env: Optional[str],
        tracing_endpoint: str,
        metrics_endpoint: str,
        readiness_drain_delay: float,
        grace_period: float,
        hard_kill_period: float,
        termination_grace_period: float,
        cleanup_share: float
    ):
        """Serve HTTP until SIGINT/SIGTERM, then shut down gracefully.

        A second signal during shutdown terminates the process immediately.
        """
        try:
            config = load_config({
                "port": port,
                "host": host,
                "env": env,
                "tracing_endpoint": tracing_endpoint,
                "metrics_endpoint": metrics_endpoint,
                "shutdown": {
                    "readiness_drain_delay": readiness_drain_delay,
                    "grace_period": grace_period,
                    "hard_kill_period": hard_kill_period,
                    "termination_grace_period": termination_grace_period,
                    "cleanup_share": cleanup_share,
                },
            })
        except ConfigurationError as err:
            ctx.obj.logger.log_error(str(err))
            ctx.exit(1)

        command = ServeCommand(logger=ctx.obj.logger, config=config)
        command.run()

    return serve
