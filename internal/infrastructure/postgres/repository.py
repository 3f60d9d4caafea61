"""
PostgreSQL Product Repository.

Implements CRUD persistence for the Product entity with asyncpg.
Every operation acquires its own connection from the provider, runs a
single statement and releases the connection on every exit path.
"""

from contextlib import asynccontextmanager
from typing import Any, AsyncContextManager, AsyncIterator, Optional, Protocol

import asyncpg
from asyncpg import Pool

from config.settings import Settings, settings as default_settings
from internal.domain.errors import DaoOperationError, DomainValidationError
from internal.domain.product import Product
from internal.infrastructure.metrics.prometheus import (
    DB_CONNECTIONS_ACTIVE,
    DB_QUERY_DURATION,
    DB_QUERY_ERRORS,
)
from pkg.logger.logger import get_logger

logger = get_logger(__name__)


PRODUCTS_TABLE_DDL = """
CREATE TABLE IF NOT EXISTS products (
    id              BIGSERIAL PRIMARY KEY,
    name            VARCHAR(255) NOT NULL,
    producer        VARCHAR(255) NOT NULL,
    price           NUMERIC NOT NULL,
    expiration_date DATE NOT NULL,
    creation_time   TIMESTAMP
)
"""

# Errors raised by the driver or the pool for connectivity and execution failures
_STORAGE_ERRORS = (asyncpg.PostgresError, asyncpg.InterfaceError, OSError)


class ConnectionProvider(Protocol):
    """Protocol for anything that hands out connections (asyncpg.Pool)."""

    def acquire(self) -> AsyncContextManager[Any]:
        """Acquire a connection, released when the context exits."""
        ...


class ProductRepository:
    """
    PostgreSQL implementation of the Product Repository.

    Holds no state besides the connection provider, so one instance can
    be shared by concurrent tasks.
    """

    def __init__(self, provider: ConnectionProvider) -> None:
        """
        Initialize the repository.

        Args:
            provider: Connection provider, usually an asyncpg pool.
        """
        self._provider = provider

    async def save(self, product: Product) -> Product:
        """
        Insert a new product and assign its generated id.

        Args:
            product: The product to save. Must not have an id yet.

        Returns:
            The same product instance, now carrying its id.

        Raises:
            DaoOperationError: If the product already has an id, no key was
                generated, or the statement failed.
        """
        if product.id is not None:
            raise DaoOperationError(
                f"Cannot save product that already has id = {product.id}"
            )

        try:
            async with self._connection("save") as conn:
                # creation_time is bound as NULL when absent
                product_id = await conn.fetchval(
                    """
                    INSERT INTO products (
                        name, producer, price, expiration_date, creation_time
                    ) VALUES ($1, $2, $3, $4, $5)
                    RETURNING id
                    """,
                    product.name,
                    product.producer,
                    product.price,
                    product.expiration_date,
                    product.creation_time,
                )
        except _STORAGE_ERRORS as e:
            self._log_failure("save", e)
            raise DaoOperationError(f"Error saving product: {product.to_dict()}") from e

        if product_id is None:
            raise DaoOperationError(f"Error saving product: {product.to_dict()}")

        try:
            product.assign_id(product_id)
        except DomainValidationError as e:
            # another save of the same instance finished first
            logger.error(
                "Generated id rejected by product",
                product_id=product_id,
                error=str(e),
            )
            raise DaoOperationError(f"Error saving product: {product.to_dict()}") from e

        logger.info("Product saved", product_id=product_id)
        return product

    async def find_all(self) -> list[Product]:
        """
        Get all products.

        Returns:
            List of products ordered by id; empty if the table is empty.
        """
        try:
            async with self._connection("find_all") as conn:
                rows = await conn.fetch(
                    """
                    SELECT id, name, producer, price, expiration_date, creation_time
                    FROM products
                    ORDER BY id
                    """
                )
        except _STORAGE_ERRORS as e:
            self._log_failure("find_all", e)
            raise DaoOperationError(f"Unable to find all the products: {e}") from e

        return [self._row_to_entity(row) for row in rows]

    async def find_by_id(self, product_id: int) -> Product:
        """
        Get a product by id.

        Args:
            product_id: The id of the product.

        Returns:
            The matching product.

        Raises:
            DaoOperationError: If no row matches or the query failed.
        """
        try:
            async with self._connection("find_by_id") as conn:
                row = await conn.fetchrow(
                    """
                    SELECT id, name, producer, price, expiration_date, creation_time
                    FROM products
                    WHERE id = $1
                    """,
                    product_id,
                )
        except _STORAGE_ERRORS as e:
            self._log_failure("find_by_id", e)
            raise DaoOperationError(f"Product with id = {product_id} does not exist") from e

        if row is None:
            raise DaoOperationError(f"Product with id = {product_id} does not exist")

        return self._row_to_entity(row)

    async def update(self, product: Product) -> None:
        """
        Update an existing product.

        The affected row count is not checked: updating an id that is not
        stored completes without error.

        Args:
            product: The product to update. Must carry a positive id.

        Raises:
            DaoOperationError: If the id is invalid or the statement failed.
        """
        self._validate_id(product.id)

        try:
            async with self._connection("update") as conn:
                # An absent creation_time leaves the stored value untouched
                await conn.execute(
                    """
                    UPDATE products
                    SET name = $1,
                        producer = $2,
                        price = $3,
                        expiration_date = $4,
                        creation_time = COALESCE($5, creation_time)
                    WHERE id = $6
                    """,
                    product.name,
                    product.producer,
                    product.price,
                    product.expiration_date,
                    product.creation_time,
                    product.id,
                )
        except _STORAGE_ERRORS as e:
            self._log_failure("update", e)
            raise DaoOperationError(f"Product with id = {product.id} does not exist") from e

        logger.info("Product updated", product_id=product.id)

    async def remove(self, product: Product) -> None:
        """
        Delete a product by its id.

        Args:
            product: The product to delete. Must carry a positive id.

        Raises:
            DaoOperationError: If the id is invalid or the statement failed.
        """
        self._validate_id(product.id)

        try:
            async with self._connection("remove") as conn:
                await conn.execute(
                    "DELETE FROM products WHERE id = $1",
                    product.id,
                )
        except _STORAGE_ERRORS as e:
            self._log_failure("remove", e)
            raise DaoOperationError(f"Product with id = {product.id} does not exist") from e

        logger.info("Product removed", product_id=product.id)

    @asynccontextmanager
    async def _connection(self, operation: str) -> AsyncIterator[Any]:
        """
        Acquire a connection for a single statement.

        Args:
            operation: Operation name used as the metrics label.

        Yields:
            A live connection, released when the block exits.
        """
        logger.debug("Acquiring connection", operation=operation)
        with DB_QUERY_DURATION.labels(operation=operation).time():
            async with self._provider.acquire() as conn:
                DB_CONNECTIONS_ACTIVE.inc()
                try:
                    yield conn
                finally:
                    DB_CONNECTIONS_ACTIVE.dec()

    @staticmethod
    def _validate_id(product_id: Optional[int]) -> None:
        """
        Check that an id can address a stored row.

        Raises:
            DaoOperationError: If the id is missing or not positive.
        """
        if product_id is None:
            raise DaoOperationError("Cannot find a product without ID")
        if product_id <= 0:
            raise DaoOperationError(f"Product with id = {product_id} does not exist")

    @staticmethod
    def _log_failure(operation: str, error: Exception) -> None:
        DB_QUERY_ERRORS.labels(operation=operation).inc()
        logger.error(
            "Product statement failed",
            operation=operation,
            error=str(error),
            error_type=type(error).__name__,
        )

    def _row_to_entity(self, row: asyncpg.Record) -> Product:
        """
        Convert a database row to a Product entity.

        Args:
            row: Database row.

        Returns:
            Product entity.
        """
        # A NULL creation_time maps to None, mirroring the optional write path
        return Product(
            id=row["id"],
            name=row["name"],
            producer=row["producer"],
            price=row["price"],
            expiration_date=row["expiration_date"],
            creation_time=row["creation_time"],
        )


async def create_pool(dsn: str, min_size: int = 1, max_size: int = 10) -> Pool:
    """
    Create an asyncpg connection pool.

    Args:
        dsn: Database connection string.
        min_size: Minimum pool size.
        max_size: Maximum pool size.

    Returns:
        asyncpg connection pool.
    """
    return await asyncpg.create_pool(
        dsn=dsn,
        min_size=min_size,
        max_size=max_size,
    )


async def create_pool_from_settings(settings: Optional[Settings] = None) -> Pool:
    """
    Create an asyncpg connection pool from application settings.

    Args:
        settings: Settings exposing DATABASE_URL and pool sizes; the
            global settings instance when omitted.

    Returns:
        asyncpg connection pool.
    """
    settings = settings or default_settings
    logger.info(
        "Creating database pool",
        min_size=settings.DB_POOL_MIN_SIZE,
        max_size=settings.DB_POOL_MAX_SIZE,
    )
    return await create_pool(
        settings.DATABASE_URL,
        min_size=settings.DB_POOL_MIN_SIZE,
        max_size=settings.DB_POOL_MAX_SIZE,
    )
