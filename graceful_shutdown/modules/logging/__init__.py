from typing import Dict, Type
from .base import BaseLogger
from .colorful import ColorfulLogger
from .plain import PlainLogger
from .json import JsonLogger

OUTPUT_TYPES: Dict[str, Type[BaseLogger]] = {
    "colorful": ColorfulLogger,
    "plain": PlainLogger,
    "json": JsonLogger,
}


def create_logger(output_type: str, log_level: str = "INFO") -> BaseLogger:
    """Create the logger for an output type.

    Args:
        output_type: One of OUTPUT_TYPES, case-insensitive
        log_level: Minimum level written by the sink

    Raises:
        ValueError: If the output type is unknown
    """
    logger_class = OUTPUT_TYPES.get(output_type.lower())
    if logger_class is None:
        raise ValueError(
            f"Unknown output type '{output_type}', expected one of: {', '.join(OUTPUT_TYPES)}"
        )
    return logger_class(log_level)

__all__ = ['BaseLogger', 'ColorfulLogger', 'PlainLogger', 'JsonLogger', 'OUTPUT_TYPES', 'create_logger']
