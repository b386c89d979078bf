"""Base repository for database operations."""

from collections.abc import Sequence
from typing import Any, Generic, TypeVar

from sqlalchemy import func, select
from sqlalchemy.engine import Result
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql import Executable
from sqlmodel import SQLModel

from charity_cms.errors.database import RecordNotFoundError, translate_store_error


ModelT = TypeVar("ModelT", bound=SQLModel)


class BaseRepository(Generic[ModelT]):
    """
    Base repository implementing common CRUD operations.

    Every statement goes through `_execute` so driver errors surface as
    application errors (`DuplicateEntryError`, `DatabaseConnectionError`,
    ...) and never as raw SQLAlchemy exceptions.

    Attributes:
        model: The SQLModel database model type.
        id_field: The name of the primary key field (default: "id").
    """

    model: type[ModelT]
    id_field: str = "id"

    def __init__(self, session: AsyncSession) -> None:
        """
        Initialize repository with database session.

        Args:
            session: Async database session
        """
        self.session = session

    async def _execute(self, statement: Executable, **kwargs: Any) -> Result[Any]:
        try:
            return await self.session.execute(statement, **kwargs)
        except (SQLAlchemyError, OSError) as e:
            raise translate_store_error(e) from e

    async def get_by_id(self, record_id: int) -> ModelT | None:
        """
        Get a record by its ID.

        Args:
            record_id: Record ID

        Returns:
            ModelT | None: Record if found, None otherwise
        """
        id_column = getattr(self.model, self.id_field)
        statement = select(self.model).where(id_column == record_id)
        result = await self._execute(statement)
        return result.scalar_one_or_none()

    async def get_or_raise(self, record_id: int) -> ModelT:
        """
        Get a record by ID or raise an exception if not found.

        Raises:
            RecordNotFoundError: If record is not found
        """
        record = await self.get_by_id(record_id)
        if not record:
            raise RecordNotFoundError(
                detail=f"{self.model.__name__.removesuffix('DB')} not found",
            )
        return record

    async def delete(self, record_id: int) -> ModelT | None:
        """
        Delete a record by ID.

        Args:
            record_id: Record ID

        Returns:
            ModelT | None: The deleted record, or None if it did not exist
        """
        record = await self.get_by_id(record_id)
        if not record:
            return None

        try:
            await self.session.delete(record)
            await self.session.flush()
        except (SQLAlchemyError, OSError) as e:
            raise translate_store_error(e) from e
        return record

    async def count(self, *conditions: Any) -> int:
        """
        Count records matching `conditions` (all records when none given).

        Returns:
            int: Number of matching records
        """
        statement = select(func.count()).select_from(self.model).where(*conditions)
        result = await self._execute(statement)
        count = result.scalar()
        return count if count is not None else 0

    async def commit(self) -> None:
        """Commit the current transaction, translating store errors."""
        try:
            await self.session.commit()
        except (SQLAlchemyError, OSError) as e:
            await self.session.rollback()
            raise translate_store_error(e) from e

    async def _add_and_refresh(self, record: ModelT) -> ModelT:
        """
        Insert a record inside a savepoint and refresh it from the database.

        A failed insert rolls back only the savepoint, so the caller's
        transaction stays usable (e.g. to retry with a different slug).

        Raises:
            DuplicateEntryError: If a unique constraint is violated
            DatabaseError: For other database errors
        """
        try:
            async with self.session.begin_nested():
                self.session.add(record)
                await self.session.flush()
            await self.session.refresh(record)
        except (SQLAlchemyError, OSError) as e:
            raise translate_store_error(e) from e
        return record

    async def _values_in_use(
        self,
        field_name: str,
        values: Sequence[Any],
        exclude_id: int | None = None,
    ) -> bool:
        """
        Check whether any record has `field_name` equal to one of `values`.

        Args:
            field_name: Name of the field to check
            values: Candidate values
            exclude_id: Optional ID to exclude from check (for updates)
        """
        if not values:
            return False
        field = getattr(self.model, field_name)
        statement = select(1).where(field.in_(values))

        if exclude_id is not None:
            id_column = getattr(self.model, self.id_field)
            statement = statement.where(id_column != exclude_id)

        result = await self._execute(statement.limit(1))
        return result.scalar_one_or_none() is not None
