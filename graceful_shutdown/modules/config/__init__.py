"""Service configuration models."""

from typing import Any, Dict
from pydantic import ValidationError

from .models import ConfigurationError, ServiceConfig, ShutdownBudget


def load_config(values: Dict[str, Any]) -> ServiceConfig:
    """Validate raw option values into a ServiceConfig.

    Args:
        values: Flat mapping of config fields; shutdown budget fields go in
            a nested "shutdown" mapping

    Raises:
        ConfigurationError: If any value is missing or invalid
    """
    try:
        return ServiceConfig.model_validate(values)
    except ValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(part) for part in error['loc']) or 'config'}: {error['msg']}"
            for error in e.errors()
        )
        raise ConfigurationError(f"Invalid configuration: {problems}") from e

__all__ = ['ConfigurationError', 'ServiceConfig', 'ShutdownBudget', 'load_config']
