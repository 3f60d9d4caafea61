"""
Domain package for the product DAO.

Contains the Product entity and domain errors.
"""
from .product import Product
from .errors import (
    DomainError,
    DomainValidationError,
    DaoOperationError,
)

__all__ = [
    "Product",
    "DomainError",
    "DomainValidationError",
    "DaoOperationError",
]
