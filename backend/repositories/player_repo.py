from __future__ import annotations

from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from models.player import Player
from models.player_team import PlayerTeam
from .base import BaseRepository


class PlayerRepository(BaseRepository[Player]):
    """Repository for Player entities."""

    model = Player

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)

    async def find_on_roster(self, name: str, team_id: int, season: str) -> Optional[Player]:
        """Find a player by exact name who is linked to ``team_id`` in ``season``."""
        stmt = (
            select(Player)
            .join(PlayerTeam, PlayerTeam.player_id == Player.id)
            .where(
                Player.name == name,
                PlayerTeam.team_id == team_id,
                PlayerTeam.season == season,
            )
            .limit(1)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def find_in_season(self, name: str, season: str) -> Optional[Player]:
        """Find a player by exact name among those linked to any team in ``season``."""
        stmt = (
            select(Player)
            .join(PlayerTeam, PlayerTeam.player_id == Player.id)
            .where(Player.name == name, PlayerTeam.season == season)
            .order_by(Player.id)
            .limit(1)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()
