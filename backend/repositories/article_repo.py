from __future__ import annotations

from typing import List

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from models.article import Article
from .base import BaseRepository


class ArticleRepository(BaseRepository[Article]):
    """Repository for Article entities."""

    model = Article

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)

    async def list_recent(self, limit: int = 100, offset: int = 0) -> List[Article]:
        """List articles newest first."""
        stmt = (
            select(Article)
            .order_by(Article.created_at.desc(), Article.id.desc())
            .limit(limit)
            .offset(offset)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())
