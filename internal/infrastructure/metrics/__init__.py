"""
Metrics infrastructure for the product DAO.

Provides Prometheus metrics for monitoring.
"""

from .prometheus import (
    DB_CONNECTIONS_ACTIVE,
    DB_QUERY_DURATION,
    DB_QUERY_ERRORS,
)

__all__ = [
    "DB_CONNECTIONS_ACTIVE",
    "DB_QUERY_DURATION",
    "DB_QUERY_ERRORS",
]
