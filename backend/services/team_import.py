"""Spreadsheet import of teams, one row per team, upserted by (name, season)."""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, List

from sqlalchemy.ext.asyncio import AsyncSession

from ingestion.spreadsheet import cell_text
from models.team import Team
from repositories.team_repo import TeamRepository
from schemas.team import TEAM_FIELDS
from .errors import ROW_ERRORS, InvalidInputError

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = ("name", "abbreviation", "color")
FIRST_DATA_ROW = 2


def _titles(value: Any) -> Any:
    if value is None:
        return []
    if isinstance(value, str):
        try:
            return json.loads(value)
        except json.JSONDecodeError as e:
            raise InvalidInputError(f"titles is not valid JSON: {e.msg}") from e
    return value


def _team_values(row: Dict[str, Any]) -> Dict[str, Any]:
    missing = [column for column in REQUIRED_COLUMNS if not cell_text(row, column)]
    if missing:
        raise InvalidInputError(f"Missing required fields: {', '.join(missing)}")
    values = {name: cell_text(row, name) for name in TEAM_FIELDS if name != "titles"}
    values["titles"] = _titles(row.get("titles"))
    return values


async def _upsert_team(repo: TeamRepository, row: Dict[str, Any], default_season: str) -> None:
    values = _team_values(row)
    season = cell_text(row, "season") or default_season
    existing = await repo.get_by_name(values["name"], season)
    if existing is None:
        await repo.add(Team(season=season, **values))
        return
    for name, value in values.items():
        setattr(existing, name, value)
    await repo.session.flush()


async def import_teams(
    session: AsyncSession, rows: List[Dict[str, Any]], default_season: str
) -> Dict[str, Any]:
    repo = TeamRepository(session)
    success = 0
    errors: List[Dict[str, Any]] = []

    for index, row in enumerate(rows, start=FIRST_DATA_ROW):
        try:
            async with session.begin_nested():
                await _upsert_team(repo, row, default_season)
        except ROW_ERRORS as e:
            logger.warning("Team row %d skipped: %s", index, e)
            errors.append({"row": index, "error": str(e)})
            continue
        success += 1

    logger.info("Team import finished: %d imported, %d errors", success, len(errors))
    return {
        "message": f"Import finished: {success} teams imported successfully",
        "success": success,
        "errors": errors or None,
    }
