import click
from typing import Optional
from .base import BaseLogger
import sys


class ColorfulLogger(BaseLogger):
    """Logger that outputs colorful text for terminal usage."""

    def __init__(self, log_level: str = "INFO"):
        super().__init__(log_level)
        self.logger.configure(
            handlers=[{
                "sink": sys.stdout,
                "colorize": True,
                "format": "<cyan>{time:YYYY-MM-DD HH:mm:ss.SSS}</cyan> | "
                         "<level>{level: <8}</level> | "
                         "<white>{message}</white>",
                "level": log_level
            }]
        )

    def log_request(
        self,
        method: str,
        path: str,
        status: int,
        duration_ms: float,
        trace_id: Optional[str] = None,
        span_id: Optional[str] = None
    ):
        if status >= 500:
            color = "red"
        elif status >= 400:
            color = "yellow"
        elif status >= 300:
            color = "blue"
        elif status >= 200:
            color = "green"
        else:
            color = "white"

        line = click.style(f"{method} {path} ", fg="white")
        line += click.style(str(status), fg=color, bold=True)
        line += click.style(f" {duration_ms:.1f}ms", fg="white")
        if trace_id:
            line += click.style(f" trace={trace_id} span={span_id}", fg="cyan")
        self.logger.info(line)

    def log_error(self, message: str):
        self.logger.error(click.style(message, fg="red", bold=True))

    def log_warning(self, message: str):
        self.logger.warning(click.style(message, fg="yellow", bold=True))

    def log_info(self, message: str):
        self.logger.info(click.style(message, fg="white"))

    def log_debug(self, message: str):
        self.logger.debug(click.style(message, fg="blue"))
