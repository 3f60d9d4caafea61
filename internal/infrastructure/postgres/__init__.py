"""
PostgreSQL infrastructure package.
"""
from .repository import (
    PRODUCTS_TABLE_DDL,
    ConnectionProvider,
    ProductRepository,
    create_pool,
    create_pool_from_settings,
)

__all__ = [
    "PRODUCTS_TABLE_DDL",
    "ConnectionProvider",
    "ProductRepository",
    "create_pool",
    "create_pool_from_settings",
]
