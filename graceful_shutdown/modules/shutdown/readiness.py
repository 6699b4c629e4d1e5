"""Readiness flag shared by the health endpoint and the shutdown coordinator."""


class ReadinessFlag:
    """One-way flag telling health checks that the service is going away.

    Starts ready (not shutting down). Reads are plain attribute loads, so
    any number of health-check requests can poll it without locking.
    """

    def __init__(self):
        self._shutting_down = False

    @property
    def is_shutting_down(self) -> bool:
        """Check if the service has started shutting down."""
        return self._shutting_down

    def mark_shutting_down(self) -> bool:
        """Flip the flag to shutting down.

        Returns:
            True if this call performed the transition, False if the flag
            was already set.
        """
        if self._shutting_down:
            return False
        self._shutting_down = True
        return True
