"""Team CRUD, including creating a team together with its roster."""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable

from sqlalchemy.ext.asyncio import AsyncSession

from models.player import Player
from models.player_team import PlayerTeam
from models.team import Team
from repositories.player_repo import PlayerRepository
from repositories.player_team_repo import PlayerTeamRepository
from repositories.team_repo import TeamRepository
from schemas.player import PLAYER_FIELDS, RosterPlayerIn
from schemas.team import TEAM_FIELDS, TeamCreate, TeamUpdate
from .errors import NotFoundError

logger = logging.getLogger(__name__)


async def add_roster_player(
    session: AsyncSession, body: RosterPlayerIn, team_id: int, season: str
) -> tuple[Player, PlayerTeam]:
    """Create a player and link them to ``team_id`` for ``season``."""
    player = await PlayerRepository(session).add(
        Player(**{field: getattr(body, field) for field in PLAYER_FIELDS})
    )
    link = await PlayerTeamRepository(session).add(
        PlayerTeam(
            player_id=player.id,
            team_id=team_id,
            season=season,
            number=body.number,
            jersey=body.jersey,
            stats=dict(body.stats),
        )
    )
    return player, link


async def create_team(session: AsyncSession, body: TeamCreate, default_season: str) -> Team:
    """Create a team and, if given, its players for the team's season."""
    season = body.season or default_season
    team = await TeamRepository(session).add(
        Team(season=season, **{field: getattr(body, field) for field in TEAM_FIELDS})
    )
    for player_body in body.players:
        await add_roster_player(session, player_body, team.id, season)
    logger.info("Created team %s (%s) with %d players", team.name, season, len(body.players))
    return team


async def create_teams(session: AsyncSession, bodies: Iterable[TeamCreate], default_season: str) -> int:
    """Bulk seed: create every team with its roster; returns the team count."""
    count = 0
    for body in bodies:
        await create_team(session, body, default_season)
        count += 1
    return count


async def update_team(session: AsyncSession, team_id: int, body: TeamUpdate) -> Team:
    team = await TeamRepository(session).get_by_id(team_id)
    if team is None:
        raise NotFoundError("Team not found")
    changes: Dict[str, Any] = body.model_dump(exclude_unset=True)
    for field, value in changes.items():
        if value is None and field != "titles":
            continue
        setattr(team, field, value if value is not None else [])
    await session.flush()
    return team


async def delete_team(session: AsyncSession, team_id: int) -> None:
    """Delete the team's roster links, then the team."""
    repo = TeamRepository(session)
    team = await repo.get_by_id(team_id)
    if team is None:
        raise NotFoundError("Team not found")
    removed = await PlayerTeamRepository(session).delete_by_team(team_id)
    await repo.delete(team)
    logger.info("Deleted team %s and %d roster links", team_id, removed)
