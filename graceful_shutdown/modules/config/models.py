from typing import Optional
from pydantic import BaseModel, ConfigDict, Field, model_validator


class ConfigurationError(Exception):
    pass

class ShutdownBudget(BaseModel):
    """Wall-clock budget available after a termination signal, in seconds.

    The three periods run one after another. A share of the host's
    termination grace period (safety_margin) is left unused so the process
    finishes before the host kills it.
    """
    model_config = ConfigDict(frozen=True)

    readiness_drain_delay: float = Field(default=5.0, ge=0)  # time for health checks to notice
    grace_period: float = Field(default=15.0, ge=0)  # listener drain and resource cleanup
    hard_kill_period: float = Field(default=3.0, ge=0)  # only spent when the drain timed out
    termination_grace_period: float = Field(default=30.0, gt=0)  # granted by the host
    safety_margin: float = Field(default=0.15, ge=0.15, lt=1.0)
    cleanup_share: float = Field(default=0.2, ge=0, lt=1.0)  # end of grace_period the drain cannot use

    @property
    def total(self) -> float:
        return self.readiness_drain_delay + self.grace_period + self.hard_kill_period

    @property
    def drain_period(self) -> float:
        """Part of the grace period available to the listener drain."""
        return self.grace_period * (1 - self.cleanup_share)

    @model_validator(mode='after')
    def validate_total(self) -> 'ShutdownBudget':
        """Validate that the budget leaves the safety margin untouched."""
        usable = self.termination_grace_period * (1 - self.safety_margin)
        if self.total > usable:
            raise ValueError(
                f"shutdown budget of {self.total:.1f}s exceeds the {usable:.1f}s usable out of "
                f"a {self.termination_grace_period:.1f}s termination grace period"
            )
        return self

class ServiceConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    env: Optional[str] = None  # deployment environment tag
    port: int = Field(ge=0, le=65535)  # 0 binds any free port
    host: str = "0.0.0.0"
    tracing_endpoint: str
    metrics_endpoint: str
    service_name: str = "graceful-shutdown"
    service_version: str = "1.0.0"
    trace_sample_ratio: float = Field(default=0.1, ge=0, le=1)
    metrics_push_interval: float = Field(default=30.0, gt=0)
    shutdown: ShutdownBudget = ShutdownBudget()

    @model_validator(mode='after')
    def validate_endpoints(self) -> 'ServiceConfig':
        if not self.tracing_endpoint.strip():
            raise ValueError("tracing_endpoint must not be empty")
        if not self.metrics_endpoint.strip():
            raise ValueError("metrics_endpoint must not be empty")
        return self
