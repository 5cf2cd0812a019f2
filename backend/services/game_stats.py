"""Per-game statistics ingestion and reprocessing.

Each processed game leaves three meta entries behind:

- ``processed_games``: game id -> {game_date, processed_at, reprocessed}
- ``game_stats_<id>``: the deltas applied, one per player link
- ``game_<id>``: a short summary of the last run

Reprocessing subtracts the stored deltas before applying the new sheet, so
season totals always reflect the latest version of every game.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from ingestion.spreadsheet import cell_text
from models.player_team import PlayerTeam
from repositories.meta_repo import MetaRepository
from repositories.player_repo import PlayerRepository
from repositories.player_team_repo import PlayerTeamRepository
from .errors import ROW_ERRORS, InvalidInputError, NotFoundError
from .statistics import add_stats, coerce_game_stats, subtract_stats, to_number

logger = logging.getLogger(__name__)

PROCESSED_GAMES_KEY = "processed_games"
MAX_LISTED_GAMES = 100

# Spreadsheet row 1 holds the headers.
FIRST_DATA_ROW = 2


def game_stats_key(game_id: str) -> str:
    return f"game_stats_{game_id}"


def game_summary_key(game_id: str) -> str:
    return f"game_{game_id}"


@dataclass
class _BatchResult:
    deltas: List[Dict[str, Any]] = field(default_factory=list)
    errors: List[Dict[str, Any]] = field(default_factory=list)

    @property
    def success(self) -> int:
        return len(self.deltas)


class ProcessedGamesCorruptError(Exception):
    """The processed games registry cannot be decoded."""


async def _processed_games(meta: MetaRepository) -> Dict[str, Any]:
    row = await meta.get(PROCESSED_GAMES_KEY)
    if row is None or not row.value:
        return {}
    try:
        games = json.loads(row.value)
    except ValueError as e:
        raise ProcessedGamesCorruptError(f"Cannot decode processed games registry: {e}") from e
    if not isinstance(games, dict):
        raise ProcessedGamesCorruptError("Processed games registry is not an object")
    return games


async def _resolve_link(session: AsyncSession, row: Dict[str, Any], default_season: str) -> PlayerTeam:
    season = cell_text(row, "season") or default_season
    player_id = int(to_number(row.get("player_id")))
    player_name = cell_text(row, "player_name")
    links = PlayerTeamRepository(session)

    if player_id > 0:
        link = await links.get_for_player_season(player_id, season)
        ref = f"id {player_id}"
    elif player_name:
        player = await PlayerRepository(session).find_in_season(player_name, season)
        if player is None:
            raise NotFoundError(f"Player '{player_name}' not found in season {season}")
        link = await links.get_for_player_season(player.id, season)
        ref = f"'{player_name}'"
    else:
        raise InvalidInputError("Row needs player_id or player_name")

    if link is None:
        raise NotFoundError(f"Player {ref} has no team in season {season}")
    return link


async def _apply_rows(session: AsyncSession, rows: List[Dict[str, Any]], default_season: str) -> _BatchResult:
    result = _BatchResult()
    for index, row in enumerate(rows, start=FIRST_DATA_ROW):
        try:
            async with session.begin_nested():
                link = await _resolve_link(session, row, default_season)
                delta = coerce_game_stats(row)
                link.stats = add_stats(link.stats, delta)
                applied = {
                    "player_id": link.player_id,
                    "team_id": link.team_id,
                    "season": link.season,
                    "stats": delta,
                }
                await session.flush()
        except ROW_ERRORS as e:
            logger.warning("Stats row %d skipped: %s", index, e)
            result.errors.append({"row": index, "error": str(e)})
            continue
        result.deltas.append(applied)
    return result


async def _record_game(
    meta: MetaRepository,
    game_id: str,
    game_date: str,
    filename: Optional[str],
    batch: _BatchResult,
    reprocessed: bool,
) -> None:
    processed_at = datetime.now(timezone.utc).isoformat()
    await meta.put_json(game_stats_key(game_id), batch.deltas)

    games = await _processed_games(meta)
    games[game_id] = {"game_date": game_date, "processed_at": processed_at, "reprocessed": reprocessed}
    await meta.put_json(PROCESSED_GAMES_KEY, games)

    await meta.put_json(
        game_summary_key(game_id),
        {
            "game_id": game_id,
            "game_date": game_date,
            "processed_at": processed_at,
            "players_processed": batch.success,
            "filename": filename,
            "reprocessed": reprocessed,
        },
    )


def _require_game(game_id: str, game_date: str) -> None:
    if not game_id or not game_date:
        raise InvalidInputError("game_id and game_date are required")


async def process_game(
    session: AsyncSession,
    rows: List[Dict[str, Any]],
    game_id: str,
    game_date: str,
    default_season: str,
    filename: Optional[str] = None,
) -> Dict[str, Any]:
    """Apply one game's sheet to season totals. A game is processed once."""
    _require_game(game_id, game_date)
    meta = MetaRepository(session)
    if game_id in await _processed_games(meta):
        raise InvalidInputError(
            f"Game {game_id} was already processed; use /api/admin/stats/reprocess to correct it"
        )

    batch = await _apply_rows(session, rows, default_season)
    await _record_game(meta, game_id, game_date, filename, batch, reprocessed=False)
    logger.info("Processed game %s: %d players, %d errors", game_id, batch.success, len(batch.errors))
    return {
        "message": f"Statistics for game {game_id} processed for {batch.success} players",
        "game_id": game_id,
        "game_date": game_date,
        "success": batch.success,
        "errors": batch.errors or None,
    }


async def reprocess_game(
    session: AsyncSession,
    rows: List[Dict[str, Any]],
    game_id: str,
    game_date: str,
    default_season: str,
    filename: Optional[str] = None,
    force: bool = False,
) -> Dict[str, Any]:
    """Revert the stored deltas of ``game_id``, then apply ``rows`` in their place."""
    _require_game(game_id, game_date)
    meta = MetaRepository(session)
    if game_id not in await _processed_games(meta) and not force:
        raise InvalidInputError(f"Game {game_id} has not been processed yet; set force to process it anyway")

    links = PlayerTeamRepository(session)
    previous = await meta.get_json(game_stats_key(game_id), [])
    reverted = 0
    for entry in previous if isinstance(previous, list) else []:
        try:
            link = await links.get_exact(entry["player_id"], entry["team_id"], str(entry["season"]))
        except (KeyError, TypeError):
            logger.warning("Malformed stored delta for game %s: %r", game_id, entry)
            continue
        if link is None:
            logger.warning(
                "Link for player %s / team %s / season %s no longer exists; delta not reverted",
                entry["player_id"],
                entry["team_id"],
                entry["season"],
            )
            continue
        link.stats = subtract_stats(link.stats, entry.get("stats"))
        reverted += 1
    await session.flush()

    batch = await _apply_rows(session, rows, default_season)
    await _record_game(meta, game_id, game_date, filename, batch, reprocessed=True)
    logger.info(
        "Reprocessed game %s: %d deltas reverted, %d players applied, %d errors",
        game_id,
        reverted,
        batch.success,
        len(batch.errors),
    )
    return {
        "message": f"Statistics for game {game_id} reprocessed for {batch.success} players",
        "game_id": game_id,
        "game_date": game_date,
        "success": batch.success,
        "reverted": reverted,
        "errors": batch.errors or None,
    }


async def list_processed_games(session: AsyncSession, limit: int = MAX_LISTED_GAMES) -> Dict[str, Any]:
    """Processed games, newest first. A corrupt registry yields an empty list with ``error``."""
    try:
        games = await _processed_games(MetaRepository(session))
    except ProcessedGamesCorruptError as e:
        logger.error("%s", e)
        return {"games": [], "total": 0, "limit": limit, "error": "Processed games data is corrupted"}

    listed = [
        {
            "game_id": game_id,
            "game_date": info.get("game_date", ""),
            "processed_at": info.get("processed_at", ""),
            "reprocessed": bool(info.get("reprocessed")),
        }
        for game_id, info in games.items()
        if isinstance(info, dict)
    ]
    listed.sort(key=lambda game: game["processed_at"], reverse=True)
    return {"games": listed[:limit], "total": len(games), "limit": limit}
