"""HTTP server module with readiness reporting and drain control."""

from .api import APIServer, READINESS
from .drain import CLOSE_TIMEOUT, IN_FLIGHT_CANCELLED, ListenerDrainController
from .errors import APIError, create_error_middleware

__all__ = [
    'APIError',
    'APIServer',
    'CLOSE_TIMEOUT',
    'IN_FLIGHT_CANCELLED',
    'ListenerDrainController',
    'READINESS',
    'create_error_middleware',
]
