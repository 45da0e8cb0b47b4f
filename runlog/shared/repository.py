"""
Base repository with common CRUD operations.

Provides generic database operations for all feature repositories.
Uses SQLAlchemy async session for non-blocking database access.

Usage:
    class ActivityRepository(BaseRepository[Activity]):
        def __init__(self, db: AsyncSession):
            super().__init__(db, Activity)

        async def get_by_strava_id(self, strava_id: int) -> Activity | None:
            return await self.get_by(strava_activity_id=strava_id)
"""

from typing import Any, TypeVar, Generic, Type

from sqlalchemy import func, or_, select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession

T = TypeVar("T")


class BaseRepository(Generic[T]):
    """
    Base repository for database operations.

    Provides common CRUD methods that can be inherited by feature repositories.
    All methods are async for use with AsyncSession.
    """

    def __init__(self, db: AsyncSession, model: Type[T]):
        """
        Initialize repository.

        Args:
            db: Async database session
            model: SQLAlchemy model class
        """
        self.db = db
        self.model = model

    async def get_by(self, **kwargs) -> T | None:
        """
        Get single entity by arbitrary field values.

        Args:
            **kwargs: Field name-value pairs to filter by

        Returns:
            First matching entity or None
        """
        query = select(self.model)
        for key, value in kwargs.items():
            query = query.where(getattr(self.model, key) == value)
        result = await self.db.execute(query)
        return result.scalar_one_or_none()

    async def create(self, **kwargs) -> T:
        """
        Create new entity.

        Args:
            **kwargs: Field values for new entity

        Returns:
            Created entity with generated ID
        """
        entity = self.model(**kwargs)
        self.db.add(entity)
        await self.db.flush()
        await self.db.refresh(entity)
        return entity

    async def update(self, entity: T, **kwargs) -> T:
        """
        Update entity fields.

        Args:
            entity: Entity to update
            **kwargs: Field values to update

        Returns:
            Updated entity
        """
        for key, value in kwargs.items():
            setattr(entity, key, value)
        await self.db.flush()
        await self.db.refresh(entity)
        return entity

    async def delete(self, entity: T) -> None:
        """
        Delete entity.

        Args:
            entity: Entity to delete
        """
        await self.db.delete(entity)
        await self.db.flush()

    async def count(self, **kwargs) -> int:
        """
        Count entities matching criteria.

        Args:
            **kwargs: Field name-value pairs to filter by

        Returns:
            Number of matching entities
        """
        query = select(func.count()).select_from(self.model)
        for key, value in kwargs.items():
            query = query.where(getattr(self.model, key) == value)
        result = await self.db.execute(query)
        return result.scalar() or 0

    async def upsert(
        self,
        rows: list[dict[str, Any]],
        conflict_key: str,
        touch: dict[str, Any] | None = None,
        only_if_changed: bool = True,
    ) -> int:
        """
        Insert rows, updating existing ones on a unique-key conflict.

        With only_if_changed, a conflicting row is only rewritten when one of
        its values actually differs, so unchanged rows don't count as affected.

        All rows must share the same keys. Columns absent from the rows are
        left untouched on update.

        Args:
            rows: Column-value dicts to write
            conflict_key: Unique column identifying an existing row
            touch: Extra values applied only when a row is actually changed
            only_if_changed: Skip conflicting rows whose values are identical

        Returns:
            Number of rows inserted or changed
        """
        if not rows:
            return 0

        table = self.model.__table__
        stmt = self._dialect_insert()(table).values(rows)

        compared = [key for key in rows[0] if key != conflict_key]
        set_ = {key: stmt.excluded[key] for key in compared}
        set_.update(touch or {})

        if set_:
            stmt = stmt.on_conflict_do_update(
                index_elements=[conflict_key],
                set_=set_,
                where=or_(*[
                    table.c[key].is_distinct_from(stmt.excluded[key])
                    for key in compared
                ]) if compared and only_if_changed else None,
            )
        else:
            stmt = stmt.on_conflict_do_nothing(index_elements=[conflict_key])

        result = await self.db.execute(stmt)
        await self.db.flush()
        return max(result.rowcount or 0, 0)

    def _dialect_insert(self):
        """Return the dialect-specific insert() supporting ON CONFLICT."""
        dialect = self.db.get_bind().dialect.name
        if dialect == "postgresql":
            return postgresql.insert
        if dialect == "sqlite":
            return sqlite.insert
        raise NotImplementedError(f"Upsert not supported for dialect {dialect!r}")
