"""Service module running the HTTP server under the shutdown coordinator."""

from .command.serve import ServeCommand
from .commands import create_serve_command

__all__ = ['ServeCommand', 'create_serve_command']
