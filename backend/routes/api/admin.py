"""Admin console: bulk imports, game statistics, season rollover and transfer audit.

Every route requires the ADMIN plan (PREMIUM also passes).
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, UploadFile, status
from sqlalchemy.ext.asyncio import AsyncSession

from core.config import Settings
from core.dependencies import get_app_settings, get_db_session
from core.security import require_plan
from ingestion.spreadsheet import SpreadsheetError, read_rows, validate_upload
from schemas.admin import SeasonStartRequest
from schemas.team import TeamCreate
from services.errors import InvalidInputError, NotFoundError
from services.game_stats import (
    ProcessedGamesCorruptError,
    list_processed_games,
    process_game,
    reprocess_game,
)
from services.player_import import import_players
from services.season_rollover import TransferAuditError, read_transfer_audit, start_season
from services.team_import import import_teams
from services.team_service import create_teams

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["admin"], dependencies=[Depends(require_plan("ADMIN"))])


async def _upload_rows(file: Optional[UploadFile], settings: Settings, *, as_text: bool = False) -> List[dict]:
    """Validate an uploaded spreadsheet and return its rows, or fail with 400."""
    if file is None:
        raise HTTPException(status_code=400, detail="No file uploaded")
    content = await file.read()
    try:
        validate_upload(file.filename, content, settings.max_upload_bytes)
        return read_rows(content, file.filename, as_text=as_text)
    except SpreadsheetError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e


@router.post(
    "/import-data",
    status_code=status.HTTP_201_CREATED,
    summary="Seed teams with nested players",
)
async def post_import_data(
    body: List[TeamCreate],
    session: AsyncSession = Depends(get_db_session),
    settings: Settings = Depends(get_app_settings),
) -> dict:
    count = await create_teams(session, body, settings.default_season)
    logger.info("Seeded %d teams", count)
    return {"message": "Data imported successfully", "teams": count}


@router.post("/import/teams", summary="Import teams from a spreadsheet")
async def post_import_teams(
    file: Optional[UploadFile] = File(default=None),
    session: AsyncSession = Depends(get_db_session),
    settings: Settings = Depends(get_app_settings),
) -> dict:
    rows = await _upload_rows(file, settings)
    return await import_teams(session, rows, settings.default_season)


@router.post("/import/players", summary="Import players from a spreadsheet")
async def post_import_players(
    file: Optional[UploadFile] = File(default=None),
    session: AsyncSession = Depends(get_db_session),
    settings: Settings = Depends(get_app_settings),
) -> dict:
    rows = await _upload_rows(file, settings, as_text=True)
    return await import_players(session, rows, settings.default_season)


@router.post(
    "/stats",
    summary="Apply one game's statistics",
    description="Adds each row's statistics to the player's season totals. A game can be processed once; use /stats/reprocess to correct it.",
)
async def post_game_stats(
    file: Optional[UploadFile] = File(default=None),
    game_id: Optional[str] = Form(default=None),
    game_date: Optional[str] = Form(default=None),
    session: AsyncSession = Depends(get_db_session),
    settings: Settings = Depends(get_app_settings),
) -> dict:
    rows = await _upload_rows(file, settings)
    try:
        return await process_game(session, rows, game_id or "", game_date or "", settings.default_season, file.filename)
    except InvalidInputError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    except ProcessedGamesCorruptError as e:
        raise HTTPException(status_code=500, detail="Processed games data is corrupted") from e


@router.post(
    "/stats/reprocess",
    summary="Replace one game's statistics",
    description="Reverts the previously applied deltas of the game, then applies the new sheet.",
)
async def post_game_stats_reprocess(
    file: Optional[UploadFile] = File(default=None),
    game_id: Optional[str] = Form(default=None),
    game_date: Optional[str] = Form(default=None),
    force: bool = Form(default=False),
    session: AsyncSession = Depends(get_db_session),
    settings: Settings = Depends(get_app_settings),
) -> dict:
    rows = await _upload_rows(file, settings)
    try:
        return await reprocess_game(
            session,
            rows,
            game_id or "",
            game_date or "",
            settings.default_season,
            file.filename,
            force=force,
        )
    except InvalidInputError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    except ProcessedGamesCorruptError as e:
        raise HTTPException(status_code=500, detail="Processed games data is corrupted") from e


@router.get("/processed-games", summary="Recently processed games")
async def get_processed_games(session: AsyncSession = Depends(get_db_session)) -> dict:
    return await list_processed_games(session)


@router.post("/seasons/{year}/start", summary="Start a season from the previous one")
async def post_start_season(
    year: str,
    body: SeasonStartRequest,
    session: AsyncSession = Depends(get_db_session),
    settings: Settings = Depends(get_app_settings),
) -> dict:
    """
    Copy every team and roster of ``year - 1`` into ``year``.

    - **team_changes**: per old team id, overrides for name, branding and staff.
    - **transfers**: players moving to another team; unresolvable ones are
      returned in ``skipped_transfers``.
    """
    try:
        result = await start_season(session, year, body, settings.transfers_dir)
    except InvalidInputError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    return result.to_dict()


@router.get("/transfers", summary="Transfers recorded by a rollover")
async def get_transfers(
    from_season: Optional[str] = Query(default=None),
    to_season: Optional[str] = Query(default=None),
    settings: Settings = Depends(get_app_settings),
):
    try:
        return read_transfer_audit(settings.transfers_dir, from_season, to_season)
    except InvalidInputError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
    except TransferAuditError as e:
        raise HTTPException(status_code=500, detail=str(e)) from e
