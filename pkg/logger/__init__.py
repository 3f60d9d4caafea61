"""
Logger package.
"""
from .logger import (
    setup_logging,
    get_logger,
    set_correlation_id,
    get_correlation_id,
    StructuredLogger,
)

__all__ = [
    "setup_logging",
    "get_logger",
    "set_correlation_id",
    "get_correlation_id",
    "StructuredLogger",
]
