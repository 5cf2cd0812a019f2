from __future__ import annotations

from typing import Generic, Optional, Type, TypeVar

from sqlalchemy.ext.asyncio import AsyncSession

from models.base import Base

T = TypeVar("T", bound=Base)


class BaseRepository(Generic[T]):
    """Common CRUD helpers bound to one model.

    No commits are performed here; the request-scoped session commits once
    the handler returns.
    """

    model: Type[T]

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def add(self, entity: T) -> T:
        """Add an entity and flush so its primary key is populated."""
        self.session.add(entity)
        await self.session.flush()
        return entity

    async def get_by_id(self, id_value: int | str) -> Optional[T]:
        """Get an entity by its primary key."""
        return await self.session.get(self.model, id_value)

    async def delete(self, entity: T) -> None:
        """Delete an entity (flushed, not committed)."""
        await self.session.delete(entity)
        await self.session.flush()
