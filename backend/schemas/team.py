from __future__ import annotations

from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .player import RosterPlayerIn


class TeamFields(BaseModel):
    """Branding and staff fields of a team."""

    model_config = ConfigDict(extra="ignore")

    name: str = ""
    abbreviation: str = ""
    color: str = ""
    city: str = ""
    state_flag: str = ""
    founded: str = ""
    logo: str = ""
    helmet: str = ""
    instagram: str = ""
    instagram2: str = ""
    stadium: str = ""
    president: str = ""
    head_coach: str = ""
    coach_instagram: str = ""
    offensive_coordinator: str = ""
    defensive_coordinator: str = ""
    titles: Any = Field(default_factory=list, description="List of {national, conference, state}")

    @field_validator("founded", mode="before")
    @classmethod
    def _founded(cls, value: Any) -> Any:
        return "" if value is None else str(value)


class TeamCreate(TeamFields):
    """Body for POST /teams; ``players`` are created and linked for ``season``."""

    model_config = ConfigDict(
        extra="ignore",
        json_schema_extra={
            "example": {
                "name": "Lions",
                "abbreviation": "LIO",
                "color": "#aa0000",
                "season": "2024",
                "titles": [{"national": "1", "conference": "2", "state": "3"}],
                "players": [{"name": "John Doe", "position": "QB", "number": 12}],
            }
        },
    )

    season: Optional[str] = None
    players: List[RosterPlayerIn] = Field(default_factory=list)

    @field_validator("season", mode="before")
    @classmethod
    def _season(cls, value: Any) -> Any:
        return None if value in (None, "") else str(value)


class TeamUpdate(BaseModel):
    """Body for PUT /teams/{id}; only the fields sent are changed. Players are ignored."""

    model_config = ConfigDict(extra="ignore")

    name: Optional[str] = None
    abbreviation: Optional[str] = None
    color: Optional[str] = None
    city: Optional[str] = None
    state_flag: Optional[str] = None
    founded: Optional[str] = None
    logo: Optional[str] = None
    helmet: Optional[str] = None
    instagram: Optional[str] = None
    instagram2: Optional[str] = None
    stadium: Optional[str] = None
    president: Optional[str] = None
    head_coach: Optional[str] = None
    coach_instagram: Optional[str] = None
    offensive_coordinator: Optional[str] = None
    defensive_coordinator: Optional[str] = None
    titles: Optional[Any] = None
    season: Optional[str] = None

    @field_validator("founded", "season", mode="before")
    @classmethod
    def _as_text(cls, value: Any) -> Any:
        return None if value is None else str(value)


TEAM_FIELDS = tuple(TeamFields.model_fields)
