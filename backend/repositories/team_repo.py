from __future__ import annotations

from typing import List, Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from models.team import Team
from .base import BaseRepository


class TeamRepository(BaseRepository[Team]):
    """Repository for Team entities."""

    model = Team

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)

    async def list_by_season(self, season: str) -> List[Team]:
        """List the teams of a season ordered by id."""
        stmt = select(Team).where(Team.season == season).order_by(Team.id)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_by_name(self, name: str, season: str) -> Optional[Team]:
        """Get the first team with this exact name in a season."""
        stmt = (
            select(Team)
            .where(Team.name == name, Team.season == season)
            .order_by(Team.id)
            .limit(1)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def count_by_season(self, season: str) -> int:
        stmt = select(func.count()).select_from(Team).where(Team.season == season)
        result = await self.session.execute(stmt)
        return int(result.scalar_one())
