"""Player endpoints over season roster links."""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from core.config import Settings
from core.dependencies import get_app_settings, get_db_session
from schemas.player import PlayerCreate, PlayerUpdate
from services.errors import InvalidInputError, NotFoundError
from services.player_service import (
    create_player,
    delete_player,
    get_player_season,
    list_players,
    update_player,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/players", tags=["players"])


@router.get("", summary="Players of a season")
async def get_players(
    season: Optional[str] = Query(default=None),
    team_id: Optional[int] = Query(default=None),
    include_all_seasons: bool = Query(default=False, description="Attach each player's season history"),
    session: AsyncSession = Depends(get_db_session),
    settings: Settings = Depends(get_app_settings),
):
    season = season or settings.default_season
    logger.info("Listing players for season %s (team=%s)", season, team_id)
    return await list_players(session, season, team_id, include_all_seasons)


@router.get("/{player_id}/seasons/{year}", summary="A player's team and stats in one season")
async def get_player_in_season(player_id: int, year: str, session: AsyncSession = Depends(get_db_session)):
    try:
        return await get_player_season(session, player_id, year)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e


@router.post("", status_code=status.HTTP_201_CREATED, summary="Create a player on a team")
async def post_player(
    body: PlayerCreate,
    session: AsyncSession = Depends(get_db_session),
    settings: Settings = Depends(get_app_settings),
):
    try:
        return await create_player(session, body, settings.default_season)
    except InvalidInputError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e


@router.put("/{player_id}", summary="Update a player and optionally a season link")
async def put_player(player_id: int, body: PlayerUpdate, session: AsyncSession = Depends(get_db_session)):
    try:
        return await update_player(session, player_id, body)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e


@router.delete("/{player_id}", summary="Delete a player and their links")
async def remove_player(player_id: int, session: AsyncSession = Depends(get_db_session)):
    try:
        await delete_player(session, player_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
    return {"message": "Player deleted successfully"}
