"""Season rollover: copy teams and rosters of year Y-1 into year Y, applying transfers.

Every team of the previous season gets a new-season counterpart (optionally
rebranded through ``team_changes``). Explicit transfers are applied first;
every other unretired player is then carried over to the new counterpart of
their previous team. Each player ends up with exactly one new-season link,
with empty statistics. Applied transfers are also written to a JSON audit
file so they can be looked up after the fact.
"""

from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, Set

from sqlalchemy.ext.asyncio import AsyncSession

from models.player_team import PlayerTeam
from models.team import Team
from repositories.player_repo import PlayerRepository
from repositories.player_team_repo import PlayerTeamRepository
from repositories.team_repo import TeamRepository
from schemas.admin import SeasonStartRequest, TeamChange, TransferIn
from schemas.team import TEAM_FIELDS
from .errors import InvalidInputError, NotFoundError

logger = logging.getLogger(__name__)

# Team fields a TeamChange may override; all other fields are copied as-is.
OVERRIDABLE_FIELDS = (
    "name",
    "abbreviation",
    "color",
    "logo",
    "helmet",
    "instagram",
    "instagram2",
    "president",
    "head_coach",
    "offensive_coordinator",
    "defensive_coordinator",
)


class TransferAuditError(Exception):
    """The transfer audit file exists but cannot be read or decoded."""


@dataclass
class RolloverResult:
    season: str
    previous_season: str
    teams: int = 0
    players: int = 0
    transfers: int = 0
    transfers_saved: int = 0
    skipped_transfers: List[Dict[str, Any]] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["message"] = f"Season {self.season} started successfully!"
        return data


def _season_pair(year: str) -> tuple[str, str]:
    if not str(year).isdigit():
        raise InvalidInputError(f"Invalid season year: {year}")
    return str(year), str(int(year) - 1)


def audit_path(transfers_dir: str | Path, from_season: str, to_season: str) -> Path:
    return Path(transfers_dir) / f"transfers_{from_season}_{to_season}.json"


def _new_team_values(old: Team, change: Optional[TeamChange]) -> Dict[str, Any]:
    values = {name: getattr(old, name) for name in TEAM_FIELDS}
    if change is not None:
        for name in OVERRIDABLE_FIELDS:
            override = getattr(change, name)
            if override:
                values[name] = override
    return values


class _Rollover:
    """State of one rollover run; the public entry point is ``start_season``."""

    def __init__(self, session: AsyncSession, season: str, previous: str) -> None:
        self.session = session
        self.season = season
        self.previous = previous
        self.teams = TeamRepository(session)
        self.players = PlayerRepository(session)
        self.links = PlayerTeamRepository(session)
        self.new_by_old_id: Dict[int, Team] = {}
        self.renamed: Dict[str, Team] = {}
        self.processed: Set[int] = set()
        self.result = RolloverResult(season=season, previous_season=previous)
        self.applied: List[Dict[str, Any]] = []

    async def copy_teams(self, changes: List[TeamChange]) -> None:
        old_teams = await self.teams.list_by_season(self.previous)
        if not old_teams:
            raise InvalidInputError(f"No teams found in season {self.previous}")
        if await self.teams.count_by_season(self.season) > 0:
            raise InvalidInputError(f"Season {self.season} already has teams")

        by_team_id = {change.team_id: change for change in changes}
        for old in old_teams:
            values = _new_team_values(old, by_team_id.get(old.id))
            new = await self.teams.add(Team(season=self.season, **values))
            self.new_by_old_id[old.id] = new
            if new.name != old.name:
                self.renamed[old.name] = new
        self.result.teams = len(old_teams)

    async def _resolve_destination(self, transfer: TransferIn) -> Optional[Team]:
        if transfer.to_team_id is not None:
            team = self.new_by_old_id.get(transfer.to_team_id)
            if team is not None:
                return team
        if transfer.to_team_name:
            team = await self.teams.get_by_name(transfer.to_team_name, self.season)
            if team is not None:
                return team
            for renamed in self.renamed.values():
                if renamed.name == transfer.to_team_name:
                    return renamed
        return None

    def _skip(self, transfer: TransferIn, reason: str) -> None:
        logger.warning("Skipping transfer of player %s: %s", transfer.player_id, reason)
        self.result.skipped_transfers.append({"player_id": transfer.player_id, "reason": reason})

    async def apply_transfers(self, transfers: List[TransferIn], previous_links: Dict[int, PlayerTeam]) -> None:
        for transfer in transfers:
            if transfer.player_id in self.processed:
                self._skip(transfer, "player already processed")
                continue
            player = await self.players.get_by_id(transfer.player_id)
            if player is None:
                self._skip(transfer, "player not found")
                continue
            previous_link = previous_links.get(player.id)
            if previous_link is None:
                self._skip(transfer, f"player has no team in season {self.previous}")
                continue
            destination = await self._resolve_destination(transfer)
            if destination is None:
                self._skip(transfer, "destination team not found")
                continue

            if transfer.new_position:
                player.position = transfer.new_position
            if transfer.new_sector:
                player.sector = transfer.new_sector

            await self.links.add(
                PlayerTeam(
                    player_id=player.id,
                    team_id=destination.id,
                    season=self.season,
                    number=transfer.new_number or previous_link.number,
                    jersey=transfer.new_jersey or previous_link.jersey,
                    stats={},
                )
            )
            self.processed.add(player.id)
            self.applied.append(
                {
                    "player_id": player.id,
                    "player_name": player.name or transfer.player_name,
                    "from_team_id": previous_link.team.id,
                    "from_team_name": previous_link.team.name,
                    "from_team_abbreviation": previous_link.team.abbreviation,
                    "to_team_id": destination.id,
                    "to_team_name": destination.name,
                    "to_team_abbreviation": destination.abbreviation,
                    "new_position": transfer.new_position,
                    "new_sector": transfer.new_sector,
                    "new_number": transfer.new_number,
                    "new_jersey": transfer.new_jersey,
                    "recorded_at": datetime.now(timezone.utc).isoformat(),
                }
            )
        self.result.transfers = len(self.applied)

    async def carry_over(self, previous_links: List[PlayerTeam]) -> None:
        for link in previous_links:
            if link.player_id in self.processed:
                continue
            if link.player.retired:
                logger.info("Not carrying over retired player %s", link.player_id)
                continue
            new_team = self.new_by_old_id.get(link.team_id)
            if new_team is None:
                logger.error("No new-season team for previous team %s", link.team_id)
                continue
            await self.links.add(
                PlayerTeam(
                    player_id=link.player_id,
                    team_id=new_team.id,
                    season=self.season,
                    number=link.number,
                    jersey=link.jersey,
                    stats={},
                )
            )
            self.processed.add(link.player_id)

    def save_audit(self, transfers_dir: str | Path) -> int:
        path = audit_path(transfers_dir, self.previous, self.season)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(json.dumps(self.applied, indent=2, ensure_ascii=False), encoding="utf-8")
        except OSError:
            logger.exception("Failed to write transfer audit file %s", path)
            return 0
        logger.info("Saved %d transfers to %s", len(self.applied), path)
        return len(self.applied)


async def start_season(
    session: AsyncSession,
    year: str,
    body: SeasonStartRequest,
    transfers_dir: str | Path,
) -> RolloverResult:
    """Roll season ``year - 1`` forward into ``year``.

    Raises InvalidInputError when the previous season is empty or the target
    season already has teams. Runs inside the caller's transaction; any
    exception leaves the database untouched.
    """
    season, previous = _season_pair(year)
    run = _Rollover(session, season, previous)

    await run.copy_teams(body.team_changes)

    previous_links = await run.links.list_by_season(previous)
    first_link_by_player: Dict[int, PlayerTeam] = {}
    for link in previous_links:
        first_link_by_player.setdefault(link.player_id, link)

    await run.apply_transfers(body.transfers, first_link_by_player)
    await run.carry_over(previous_links)
    await session.flush()

    run.result.players = len(run.processed)
    run.result.transfers_saved = run.save_audit(transfers_dir)
    logger.info(
        "Season %s started: %d teams, %d players, %d transfers",
        season,
        run.result.teams,
        run.result.players,
        run.result.transfers,
    )
    return run.result


def read_transfer_audit(
    transfers_dir: str | Path, from_season: Optional[str], to_season: Optional[str]
) -> Any:
    """Load the transfers recorded when ``from_season`` rolled into ``to_season``."""
    if not from_season or not to_season:
        raise InvalidInputError("Parameters from_season and to_season are required")
    if not (from_season.isdigit() and to_season.isdigit()):
        raise InvalidInputError("Seasons must be numeric years")

    path = audit_path(transfers_dir, from_season, to_season)
    if not path.is_file():
        raise NotFoundError(f"No transfers found from {from_season} to {to_season}")
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        logger.error("Corrupt transfer audit file %s: %s", path, e)
        raise TransferAuditError("Transfer file is corrupted") from e
    except OSError as e:
        logger.error("Cannot read transfer audit file %s: %s", path, e)
        raise TransferAuditError("Error reading transfer file") from e
