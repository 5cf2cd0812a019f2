"""Team endpoints: season listing, CRUD and the plan-gated comparison."""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from core.config import Settings
from core.dependencies import get_app_settings, get_db_session
from core.security import require_plan
from schemas.team import TeamCreate, TeamUpdate
from services.errors import InvalidInputError, NotFoundError
from services.roster_service import compare_teams, get_team_with_roster, list_teams_with_rosters, team_to_dict
from services.team_service import create_team, delete_team, update_team

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/teams", tags=["teams"])


@router.get("", summary="Teams of a season with their rosters")
async def get_teams(
    season: Optional[str] = Query(default=None, description="Season year; defaults to the configured season"),
    session: AsyncSession = Depends(get_db_session),
    settings: Settings = Depends(get_app_settings),
):
    season = season or settings.default_season
    logger.info("Listing teams for season %s", season)
    return await list_teams_with_rosters(session, season)


@router.get(
    "/compare",
    summary="Compare two teams",
    description="Aggregated season statistics and standout players of two teams. Requires the BASIC plan.",
    dependencies=[Depends(require_plan("BASIC"))],
)
async def get_compare(
    team1_id: Optional[int] = Query(default=None),
    team2_id: Optional[int] = Query(default=None),
    season: Optional[str] = Query(default=None),
    session: AsyncSession = Depends(get_db_session),
    settings: Settings = Depends(get_app_settings),
):
    try:
        return await compare_teams(session, team1_id, team2_id, season or settings.default_season)
    except InvalidInputError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e


@router.get("/{team_id}", summary="One team with its roster")
async def get_team(team_id: int, session: AsyncSession = Depends(get_db_session)):
    try:
        return await get_team_with_roster(session, team_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e


@router.post("", status_code=status.HTTP_201_CREATED, summary="Create a team and its players")
async def post_team(
    body: TeamCreate,
    session: AsyncSession = Depends(get_db_session),
    settings: Settings = Depends(get_app_settings),
):
    team = await create_team(session, body, settings.default_season)
    return team_to_dict(team)


@router.put("/{team_id}", summary="Update team fields")
async def put_team(team_id: int, body: TeamUpdate, session: AsyncSession = Depends(get_db_session)):
    try:
        team = await update_team(session, team_id, body)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
    return team_to_dict(team)


@router.delete("/{team_id}", summary="Delete a team and its roster links")
async def remove_team(team_id: int, session: AsyncSession = Depends(get_db_session)):
    try:
        await delete_team(session, team_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
    return {"message": "Team deleted successfully"}
