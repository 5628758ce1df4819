"""Base repository with generic, family-scoped CRUD operations.

Repositories only flush; services own the transaction and commit once per
operation so multi-step writes stay atomic.
"""
from typing import Generic, Type, TypeVar
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ledger_import.models.base import BaseModel

T = TypeVar("T", bound=BaseModel)


class BaseRepository(Generic[T]):
    """Generic repository providing CRUD operations for any tenant-scoped model."""

    def __init__(self, db: AsyncSession, model: Type[T]):
        self.db = db
        self.model = model

    async def get_by_id(self, family_id: UUID, id: UUID) -> T | None:
        """Get a single record by ID, or None if it belongs to another family."""
        result = await self.db.execute(
            select(self.model).where(self.model.id == id, self.model.family_id == family_id)
        )
        return result.unique().scalar_one_or_none()

    async def add(self, obj: T) -> T:
        """Stage a new record and flush so its ID is assigned."""
        self.db.add(obj)
        await self.db.flush()
        return obj

    async def add_many(self, objs: list[T]) -> list[T]:
        """Stage several records in one flush."""
        self.db.add_all(objs)
        await self.db.flush()
        return objs

    async def update(self, obj: T, data: dict) -> T:
        """Apply field updates to a loaded record."""
        for key, value in data.items():
            if hasattr(obj, key):
                setattr(obj, key, value)
        await self.db.flush()
        return obj

    async def delete(self, obj: T) -> None:
        await self.db.delete(obj)
        await self.db.flush()
