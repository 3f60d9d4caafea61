"""
Domain-specific exceptions.

Custom exceptions for domain validation and data access failures.
"""


class DomainError(Exception):
    """Base exception for domain errors."""

    def __init__(self, message: str) -> None:
        """
        Initialize domain error.

        Args:
            message: Error message describing the issue.
        """
        self.message = message
        super().__init__(self.message)


class DomainValidationError(DomainError):
    """Exception raised when domain validation fails."""
    pass


class DaoOperationError(DomainError):
    """
    Exception raised when a product data access operation fails.

    Covers storage failures, missing generated keys, missing rows and
    invalid identifiers alike; the message tells them apart.
    """
    pass
