"""
Domain model for Product.

The entity persisted by the product repository.
"""
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from .errors import DomainValidationError


@dataclass
class Product:
    """
    Product entity.

    Attributes:
        name: Product name.
        producer: Producer name.
        price: Exact decimal price.
        expiration_date: Expiration date (no time component).
        creation_time: Optional creation timestamp.
        id: Storage-generated identifier, unset until the first save.
    """
    name: str
    producer: str
    price: Decimal
    expiration_date: date
    creation_time: Optional[datetime] = None
    id: Optional[int] = None

    def __post_init__(self) -> None:
        """Normalize field types and validate invariants."""
        self.price = self._to_decimal(self.price)
        # datetime is a subclass of date, keep only the calendar part
        if isinstance(self.expiration_date, datetime):
            self.expiration_date = self.expiration_date.date()

    def __setattr__(self, name: str, value: object) -> None:
        """
        Guard the identifier: it may only go from unset to a positive value.

        Raises:
            DomainValidationError: On a non-positive id or a change of an
                already set id.
        """
        if name == "id":
            current = getattr(self, "id", None)
            if current is not None and value != current:
                raise DomainValidationError(
                    f"Product already has id = {current}, cannot reassign to {value}"
                )
            if value is not None and value <= 0:
                raise DomainValidationError("id must be positive")
        super().__setattr__(name, value)

    @staticmethod
    def _to_decimal(value: object) -> Decimal:
        """
        Convert a price value to Decimal.

        Raises:
            DomainValidationError: If the value is a float or not numeric.
        """
        if isinstance(value, Decimal):
            return value
        if isinstance(value, float):
            raise DomainValidationError("price must be a Decimal, not float")
        if isinstance(value, (int, str)) and not isinstance(value, bool):
            try:
                return Decimal(value)
            except ArithmeticError as e:
                raise DomainValidationError(f"Invalid price: {value!r}") from e
        raise DomainValidationError(f"Invalid price: {value!r}")

    def assign_id(self, product_id: int) -> None:
        """
        Set the storage-generated identifier.

        The identifier can be set only once; assigning the same value
        again is a no-op.

        Args:
            product_id: Identifier returned by storage.

        Raises:
            DomainValidationError: If the id is not positive or is already set
                to a different value.
        """
        if product_id is None or product_id <= 0:
            raise DomainValidationError(f"Invalid generated id: {product_id}")
        if self.id is not None and self.id != product_id:
            raise DomainValidationError(
                f"Product already has id = {self.id}, cannot reassign to {product_id}"
            )
        self.id = product_id

    def to_dict(self) -> dict:
        """
        Convert to dictionary representation.

        Returns:
            Dictionary with all product data.
        """
        return {
            "id": self.id,
            "name": self.name,
            "producer": self.producer,
            "price": str(self.price),
            "expiration_date": self.expiration_date.isoformat(),
            "creation_time": self.creation_time.isoformat() if self.creation_time else None,
        }
