"""Player queries and CRUD over season roster links."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from models.player_team import PlayerTeam
from repositories.player_repo import PlayerRepository
from repositories.player_team_repo import PlayerTeamRepository
from repositories.team_repo import TeamRepository
from schemas.player import PLAYER_FIELDS, PlayerCreate, PlayerUpdate
from .errors import InvalidInputError, NotFoundError
from .roster_service import link_to_dict, player_to_dict, roster_entry, team_summary, team_to_dict
from .team_service import add_roster_player

logger = logging.getLogger(__name__)


async def list_players(
    session: AsyncSession,
    season: str,
    team_id: Optional[int] = None,
    include_all_seasons: bool = False,
) -> List[Dict[str, Any]]:
    """Season roster entries, optionally with each player's season history."""
    repo = PlayerTeamRepository(session)
    links = await repo.list_by_season(season, team_id)

    players = []
    for link in links:
        entry = roster_entry(link)
        entry["team"] = team_summary(link.team)
        players.append(entry)

    if include_all_seasons and team_id is None and players:
        history = await repo.list_by_players({p["id"] for p in players})
        by_player: Dict[int, List[Dict[str, Any]]] = {}
        seen = set()
        for link in history:
            key = (link.player_id, link.season)
            if key in seen:
                continue
            seen.add(key)
            by_player.setdefault(link.player_id, []).append(
                {"season": link.season, "team": team_summary(link.team)}
            )
        for entry in players:
            entry["season_history"] = by_player.get(entry["id"], [])

    return players


async def get_player_season(session: AsyncSession, player_id: int, season: str) -> Dict[str, Any]:
    link = await PlayerTeamRepository(session).get_for_player_season(player_id, season)
    if link is None:
        raise NotFoundError("Player not found in this season")
    return {
        "player": player_to_dict(link.player),
        "team": team_to_dict(link.team),
        "stats": link.stats or {},
        "number": link.number,
        "jersey": link.jersey,
    }


async def create_player(session: AsyncSession, body: PlayerCreate, default_season: str) -> Dict[str, Any]:
    if not body.team_id:
        raise InvalidInputError('The "team_id" field is required.')
    team = await TeamRepository(session).get_by_id(body.team_id)
    if team is None:
        raise NotFoundError("Team not found.")
    player, link = await add_roster_player(session, body, team.id, body.season or default_season)
    return {"player": player_to_dict(player), "link": link_to_dict(link)}


async def update_player(session: AsyncSession, player_id: int, body: PlayerUpdate) -> Dict[str, Any]:
    """Update player fields; with ``season`` and ``team_id``, upsert that roster link."""
    player = await PlayerRepository(session).get_by_id(player_id)
    if player is None:
        raise NotFoundError("Player not found")

    changes = body.model_dump(exclude_unset=True)
    for field in PLAYER_FIELDS:
        if changes.get(field) is not None:
            setattr(player, field, changes[field])

    link_repo = PlayerTeamRepository(session)
    if body.season and body.team_id:
        if await TeamRepository(session).get_by_id(body.team_id) is None:
            raise NotFoundError("Team not found")
        link = await link_repo.get_exact(player_id, body.team_id, body.season)
        if link is not None:
            if body.number is not None:
                link.number = body.number
            if body.jersey is not None:
                link.jersey = body.jersey
            if body.stats:
                link.stats = dict(body.stats)
        else:
            await link_repo.add(
                PlayerTeam(
                    player_id=player_id,
                    team_id=body.team_id,
                    season=body.season,
                    number=body.number or 0,
                    jersey=body.jersey or "",
                    stats=dict(body.stats or {}),
                )
            )
    await session.flush()

    links = await link_repo.list_for_player(player_id, team_id=body.team_id, season=body.season)
    data = player_to_dict(player)
    data["links"] = [dict(link_to_dict(link), team=team_to_dict(link.team)) for link in links]
    return data


async def delete_player(session: AsyncSession, player_id: int) -> None:
    repo = PlayerRepository(session)
    player = await repo.get_by_id(player_id)
    if player is None:
        raise NotFoundError("Player not found")
    await PlayerTeamRepository(session).delete_by_player(player_id)
    await repo.delete(player)
