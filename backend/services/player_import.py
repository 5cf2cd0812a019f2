"""Spreadsheet import of players with their season link and statistics."""

from __future__ import annotations

import logging
from typing import Any, Dict, List

from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from ingestion.spreadsheet import cell_text
from models.player import Player
from models.player_team import PlayerTeam
from repositories.player_repo import PlayerRepository
from repositories.player_team_repo import PlayerTeamRepository
from repositories.team_repo import TeamRepository
from schemas.player import PLAYER_FIELDS, PlayerFields
from .errors import ROW_ERRORS, InvalidInputError, NotFoundError
from .statistics import coerce_game_stats, to_number

logger = logging.getLogger(__name__)

FIRST_DATA_ROW = 2


def _player_fields(row: Dict[str, Any]) -> PlayerFields:
    data = {name: row[name] for name in PLAYER_FIELDS if row.get(name) is not None}
    try:
        return PlayerFields.model_validate(data)
    except ValidationError as e:
        raise InvalidInputError(f"Invalid player fields: {e.errors()[0]['msg']}") from e


async def _import_row(session: AsyncSession, row: Dict[str, Any], default_season: str) -> None:
    name = cell_text(row, "name")
    team_name = cell_text(row, "team_name")
    if not name or not team_name:
        raise InvalidInputError("Missing required fields: name and team_name")

    season = cell_text(row, "season") or default_season
    team = await TeamRepository(session).get_by_name(team_name, season)
    if team is None:
        raise NotFoundError(f"Team '{team_name}' not found in season {season}")

    number = int(to_number(row.get("number")))
    jersey = cell_text(row, "jersey")
    stats = coerce_game_stats(row)

    links = PlayerTeamRepository(session)
    player = await PlayerRepository(session).find_on_roster(name, team.id, season)
    link = await links.get_exact(player.id, team.id, season) if player is not None else None
    if link is not None:
        link.number = number
        link.jersey = jersey
        link.stats = stats
        await session.flush()
        return

    fields = _player_fields(row)
    player = await PlayerRepository(session).add(
        Player(**{field: getattr(fields, field) for field in PLAYER_FIELDS})
    )
    await links.add(
        PlayerTeam(player_id=player.id, team_id=team.id, season=season, number=number, jersey=jersey, stats=stats)
    )


async def import_players(
    session: AsyncSession, rows: List[Dict[str, Any]], default_season: str
) -> Dict[str, Any]:
    """Create or update one player per row; row failures are reported, not raised.

    Each row runs in its own savepoint, so a failed row leaves no partial writes.
    """
    success = 0
    errors: List[Dict[str, Any]] = []
    for index, row in enumerate(rows, start=FIRST_DATA_ROW):
        try:
            async with session.begin_nested():
                await _import_row(session, row, default_season)
        except ROW_ERRORS as e:
            logger.warning("Player row %d skipped: %s", index, e)
            errors.append({"row": index, "error": str(e)})
            continue
        success += 1

    logger.info("Player import finished: %d imported, %d errors", success, len(errors))
    return {
        "message": f"Import finished: {success} players imported successfully",
        "success": success,
        "errors": errors or None,
    }
