from __future__ import annotations

from typing import Iterable, List, Optional

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from models.player import Player
from models.player_team import PlayerTeam
from .base import BaseRepository


class PlayerTeamRepository(BaseRepository[PlayerTeam]):
    """Repository for season roster links (player ↔ team ↔ season)."""

    model = PlayerTeam

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)

    def _with_relations(self):
        return select(PlayerTeam).options(
            selectinload(PlayerTeam.player),
            selectinload(PlayerTeam.team),
        )

    async def list_by_season(
        self, season: str, team_id: Optional[int] = None
    ) -> List[PlayerTeam]:
        """Links of a season (optionally one team), ordered by number then name."""
        stmt = (
            self._with_relations()
            .join(Player, Player.id == PlayerTeam.player_id)
            .where(PlayerTeam.season == season)
            .order_by(PlayerTeam.number, Player.name, PlayerTeam.id)
        )
        if team_id is not None:
            stmt = stmt.where(PlayerTeam.team_id == team_id)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def list_by_teams(
        self, team_ids: Iterable[int], season: Optional[str] = None
    ) -> List[PlayerTeam]:
        """Links for several teams, in insertion order."""
        ids = list(team_ids)
        if not ids:
            return []
        stmt = self._with_relations().where(PlayerTeam.team_id.in_(ids)).order_by(PlayerTeam.id)
        if season is not None:
            stmt = stmt.where(PlayerTeam.season == season)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def list_by_players(self, player_ids: Iterable[int]) -> List[PlayerTeam]:
        """Every link of the given players across all seasons."""
        ids = list(player_ids)
        if not ids:
            return []
        stmt = (
            self._with_relations()
            .where(PlayerTeam.player_id.in_(ids))
            .order_by(PlayerTeam.player_id, PlayerTeam.season, PlayerTeam.id)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def list_for_player(
        self,
        player_id: int,
        team_id: Optional[int] = None,
        season: Optional[str] = None,
    ) -> List[PlayerTeam]:
        stmt = self._with_relations().where(PlayerTeam.player_id == player_id).order_by(PlayerTeam.id)
        if team_id is not None:
            stmt = stmt.where(PlayerTeam.team_id == team_id)
        if season is not None:
            stmt = stmt.where(PlayerTeam.season == season)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_for_player_season(self, player_id: int, season: str) -> Optional[PlayerTeam]:
        """First link of a player in a season (a player normally has one)."""
        links = await self.list_for_player(player_id, season=season)
        return links[0] if links else None

    async def get_exact(self, player_id: int, team_id: int, season: str) -> Optional[PlayerTeam]:
        links = await self.list_for_player(player_id, team_id=team_id, season=season)
        return links[0] if links else None

    async def count_by_season(self, season: str) -> int:
        stmt = select(func.count()).select_from(PlayerTeam).where(PlayerTeam.season == season)
        result = await self.session.execute(stmt)
        return int(result.scalar_one())

    async def delete_by_team(self, team_id: int) -> int:
        result = await self.session.execute(delete(PlayerTeam).where(PlayerTeam.team_id == team_id))
        return result.rowcount or 0

    async def delete_by_player(self, player_id: int) -> int:
        result = await self.session.execute(delete(PlayerTeam).where(PlayerTeam.player_id == player_id))
        return result.rowcount or 0
