"""Shutdown coordination module for draining the service and releasing its resources."""

from .coordinator import DrainableListener, ShutdownCoordinator, ShutdownOutcome, ShutdownState
from .deadline import Deadline
from .errors import CleanupError, CleanupTimeoutError, DrainTimeoutError
from .readiness import ReadinessFlag
from .registry import CleanupCallback, ResourceRegistry
from .signals import SignalListener

__all__ = [
    'CleanupCallback',
    'CleanupError',
    'CleanupTimeoutError',
    'Deadline',
    'DrainTimeoutError',
    'DrainableListener',
    'ReadinessFlag',
    'ResourceRegistry',
    'ShutdownCoordinator',
    'ShutdownOutcome',
    'ShutdownState',
    'SignalListener',
]
