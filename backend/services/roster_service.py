"""Shape teams, players and roster links into API payloads."""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from models.player import Player
from models.player_team import PlayerTeam
from models.team import Team
from repositories.player_team_repo import PlayerTeamRepository
from repositories.team_repo import TeamRepository
from schemas.player import PLAYER_FIELDS
from schemas.team import TEAM_FIELDS
from .errors import InvalidInputError, NotFoundError
from .statistics import aggregate_team_stats, find_standouts

logger = logging.getLogger(__name__)

DEFAULT_TITLES = [{"national": "0", "conference": "0", "state": "0"}]

# Fields exposed when comparing two teams.
COMPARE_FIELDS = (
    "id",
    "name",
    "abbreviation",
    "color",
    "logo",
    "city",
    "stadium",
    "head_coach",
    "founded",
    "titles",
)


def parse_titles(team: Team) -> Any:
    """Return structured titles, decoding the legacy JSON-string form."""
    titles = team.titles
    if isinstance(titles, str):
        try:
            return json.loads(titles)
        except json.JSONDecodeError:
            logger.warning("Unparseable titles for team %s; using defaults", team.name)
            return [dict(entry) for entry in DEFAULT_TITLES]
    return titles if titles is not None else []


def team_to_dict(team: Team) -> Dict[str, Any]:
    data: Dict[str, Any] = {"id": team.id, "season": team.season}
    for field in TEAM_FIELDS:
        data[field] = getattr(team, field)
    data["titles"] = parse_titles(team)
    return data


def player_to_dict(player: Player) -> Dict[str, Any]:
    data: Dict[str, Any] = {"id": player.id}
    for field in PLAYER_FIELDS:
        data[field] = getattr(player, field)
    return data


def link_to_dict(link: PlayerTeam) -> Dict[str, Any]:
    return {
        "id": link.id,
        "player_id": link.player_id,
        "team_id": link.team_id,
        "season": link.season,
        "number": link.number,
        "jersey": link.jersey,
        "stats": link.stats or {},
    }


def team_summary(team: Optional[Team]) -> Optional[Dict[str, Any]]:
    if team is None:
        return None
    return {"id": team.id, "name": team.name, "abbreviation": team.abbreviation, "color": team.color}


def roster_entry(link: PlayerTeam, player: Optional[Player] = None) -> Dict[str, Any]:
    """Flatten a link into its player record plus number, jersey, stats, team and season."""
    data = player_to_dict(player or link.player)
    data.update(
        number=link.number,
        jersey=link.jersey,
        stats=link.stats or {},
        team_id=link.team_id,
        season=link.season,
    )
    return data


async def _rosters_by_team(
    session: AsyncSession, teams: List[Team], season: str
) -> Dict[int, List[PlayerTeam]]:
    links = await PlayerTeamRepository(session).list_by_teams([t.id for t in teams], season)
    grouped: Dict[int, List[PlayerTeam]] = {t.id: [] for t in teams}
    for link in links:
        grouped.setdefault(link.team_id, []).append(link)
    return grouped


async def list_teams_with_rosters(session: AsyncSession, season: str) -> List[Dict[str, Any]]:
    teams = await TeamRepository(session).list_by_season(season)
    rosters = await _rosters_by_team(session, teams, season)
    result = []
    for team in teams:
        data = team_to_dict(team)
        data["players"] = [roster_entry(link) for link in rosters.get(team.id, [])]
        result.append(data)
    return result


async def get_team_with_roster(session: AsyncSession, team_id: int) -> Dict[str, Any]:
    team = await TeamRepository(session).get_by_id(team_id)
    if team is None:
        raise NotFoundError("Team not found")
    rosters = await _rosters_by_team(session, [team], team.season)
    data = team_to_dict(team)
    data["players"] = [roster_entry(link) for link in rosters.get(team.id, [])]
    return data


def _comparison_side(team: Team, links: List[PlayerTeam]) -> Dict[str, Any]:
    base = team_to_dict(team)
    side = {field: base[field] for field in COMPARE_FIELDS}
    entries = [
        {
            "id": link.player.id,
            "name": link.player.name,
            "position": link.player.position,
            "sector": link.player.sector,
            "jersey": link.jersey,
            "number": link.number,
            "stats": link.stats or {},
        }
        for link in links
    ]
    side["stats"] = aggregate_team_stats(entry["stats"] for entry in entries)
    side["standouts"] = find_standouts(entries)
    return side


async def compare_teams(
    session: AsyncSession,
    team1_id: Optional[int],
    team2_id: Optional[int],
    season: str,
) -> Dict[str, Any]:
    """Aggregate stats and standouts for two different teams in one season."""
    if team1_id is None or team2_id is None:
        raise InvalidInputError("Two team ids are required")
    if team1_id == team2_id:
        raise InvalidInputError("Teams must be different to compare")

    repo = TeamRepository(session)
    team1 = await repo.get_by_id(team1_id)
    team2 = await repo.get_by_id(team2_id)
    if team1 is None or team2 is None:
        raise NotFoundError("One or both teams were not found")

    rosters = await _rosters_by_team(session, [team1, team2], season)
    return {
        "teams": {
            "team1": _comparison_side(team1, rosters.get(team1.id, [])),
            "team2": _comparison_side(team2, rosters.get(team2.id, [])),
        }
    }
