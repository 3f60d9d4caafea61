"""
Unit tests for domain entities.
"""
import pytest
from datetime import date, datetime
from decimal import Decimal

from internal.domain.product import Product
from internal.domain.errors import DomainError, DomainValidationError, DaoOperationError


class TestProduct:
    """Tests for Product entity."""

    def test_create_valid_product(self, product_data):
        """Test creating a valid product."""
        product = Product(**product_data)

        assert product.name == "Milk"
        assert product.producer == "Acme"
        assert product.price == Decimal("1.99")
        assert product.expiration_date == date(2024, 1, 1)
        assert product.creation_time is None
        assert product.id is None

    def test_float_price_raises_error(self, product_data):
        """Test that a float price is rejected."""
        product_data["price"] = 1.99

        with pytest.raises(DomainValidationError) as exc_info:
            Product(**product_data)

        assert "not float" in str(exc_info.value)

    def test_string_and_int_prices_are_coerced(self, product_data):
        """Test that str and int prices become Decimal."""
        product_data["price"] = "3.10"
        assert Product(**product_data).price == Decimal("3.10")

        product_data["price"] = 5
        assert Product(**product_data).price == Decimal(5)

    def test_invalid_price_string_raises_error(self, product_data):
        """Test that a non-numeric price string is rejected."""
        product_data["price"] = "cheap"

        with pytest.raises(DomainValidationError):
            Product(**product_data)

    def test_expiration_datetime_is_narrowed_to_date(self, product_data):
        """Test that a datetime expiration keeps only the date."""
        product_data["expiration_date"] = datetime(2024, 1, 1, 23, 59)

        product = Product(**product_data)

        assert product.expiration_date == date(2024, 1, 1)
        assert not isinstance(product.expiration_date, datetime)

    def test_non_positive_id_raises_error(self, product_data):
        """Test that constructing with a non-positive id fails."""
        with pytest.raises(DomainValidationError):
            Product(id=0, **product_data)

    def test_assign_id(self, product):
        """Test assigning the generated id."""
        product.assign_id(42)

        assert product.id == 42

    def test_assign_same_id_twice_is_noop(self, product):
        """Test that re-assigning the same id is accepted."""
        product.assign_id(42)
        product.assign_id(42)

        assert product.id == 42

    def test_reassign_different_id_raises_error(self, product):
        """Test that the id cannot change once set."""
        product.assign_id(42)

        with pytest.raises(DomainValidationError) as exc_info:
            product.assign_id(43)

        assert "already has id = 42" in str(exc_info.value)
        assert product.id == 42

    def test_direct_id_reassignment_raises_error(self, product):
        """Test that a saved id cannot be overwritten by attribute assignment."""
        product.assign_id(5)

        with pytest.raises(DomainValidationError):
            product.id = 99
        with pytest.raises(DomainValidationError):
            product.id = -3
        with pytest.raises(DomainValidationError):
            product.id = None

        assert product.id == 5

    def test_direct_non_positive_id_on_unsaved_product_raises_error(self, product):
        """Test that an unsaved product rejects a non-positive id."""
        with pytest.raises(DomainValidationError):
            product.id = -3

        assert product.id is None

    def test_other_fields_remain_mutable_after_save(self, product):
        """Test that only the id is frozen once set."""
        product.assign_id(5)

        product.name = "Skimmed Milk"
        product.price = Decimal("2.49")

        assert product.name == "Skimmed Milk"
        assert product.id == 5

    def test_assign_invalid_id_raises_error(self, product):
        """Test that a non-positive generated id is rejected."""
        with pytest.raises(DomainValidationError):
            product.assign_id(0)

        assert product.id is None

    def test_equality_compares_all_fields(self, product_data):
        """Test that products with the same fields are equal."""
        assert Product(**product_data) == Product(**product_data)
        assert Product(**product_data) != Product(id=1, **product_data)

    def test_to_dict(self, product_data):
        """Test converting product to dictionary."""
        product = Product(creation_time=datetime(2023, 12, 1, 8, 0), **product_data)

        result = product.to_dict()

        assert result["name"] == "Milk"
        assert result["price"] == "1.99"
        assert result["expiration_date"] == "2024-01-01"
        assert result["creation_time"] == "2023-12-01T08:00:00"
        assert result["id"] is None

    def test_to_dict_without_creation_time(self, product):
        """Test that a missing creation time serializes as None."""
        assert product.to_dict()["creation_time"] is None


class TestErrors:
    """Tests for domain errors."""

    def test_dao_operation_error_is_domain_error(self):
        """Test the error hierarchy."""
        error = DaoOperationError("Product with id = 1 does not exist")

        assert isinstance(error, DomainError)
        assert error.message == "Product with id = 1 does not exist"
        assert str(error) == "Product with id = 1 does not exist"
