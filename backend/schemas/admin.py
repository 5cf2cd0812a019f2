from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class TeamChange(BaseModel):
    """Overrides applied to a team while it is copied into the new season."""

    model_config = ConfigDict(extra="ignore")

    team_id: int = Field(..., description="Id of the team in the previous season")
    name: Optional[str] = None
    abbreviation: Optional[str] = None
    color: Optional[str] = None
    instagram: Optional[str] = None
    instagram2: Optional[str] = None
    logo: Optional[str] = None
    helmet: Optional[str] = None
    president: Optional[str] = None
    head_coach: Optional[str] = None
    offensive_coordinator: Optional[str] = None
    defensive_coordinator: Optional[str] = None


class TransferIn(BaseModel):
    """A player moving to another team at rollover."""

    model_config = ConfigDict(extra="ignore")

    player_id: int
    player_name: Optional[str] = None
    from_team_id: Optional[int] = None
    from_team_name: Optional[str] = None
    to_team_id: Optional[int] = Field(default=None, description="Destination team id in the previous season")
    to_team_name: Optional[str] = Field(default=None, description="Destination team name in the new season")
    new_position: Optional[str] = None
    new_sector: Optional[str] = None
    new_number: Optional[int] = None
    new_jersey: Optional[str] = None


class SeasonStartRequest(BaseModel):
    """Body for POST /admin/seasons/{year}/start."""

    model_config = ConfigDict(
        extra="ignore",
        json_schema_extra={
            "example": {
                "team_changes": [{"team_id": 3, "name": "Lions FA"}],
                "transfers": [{"player_id": 10, "to_team_id": 4, "new_number": 7}],
            }
        },
    )

    team_changes: List[TeamChange] = Field(default_factory=list)
    transfers: List[TransferIn] = Field(default_factory=list)
