from __future__ import annotations

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from services.statistics import to_number


def _coerce_int(value: Any) -> Any:
    if value is None or isinstance(value, int):
        return value
    return int(to_number(value))


class PlayerFields(BaseModel):
    """Biographical fields shared by player bodies."""

    model_config = ConfigDict(extra="ignore")

    name: str = Field(default="", description="Full name")
    origin_team: str = Field(default="", description="Team the player was developed at")
    position: str = ""
    sector: str = Field(default="Offense", description="Offense | Defense | Special Teams")
    experience: int = 0
    age: int = 0
    height: float = 0.0
    weight: int = 0
    instagram: str = ""
    instagram2: str = ""
    city: str = ""
    nationality: str = ""
    retired: bool = False

    @field_validator("experience", "age", "weight", mode="before")
    @classmethod
    def _ints(cls, value: Any) -> Any:
        return _coerce_int(value) if value is not None else 0

    @field_validator("height", mode="before")
    @classmethod
    def _height(cls, value: Any) -> Any:
        return to_number(value)


class RosterPlayerIn(PlayerFields):
    """A player plus the roster link data (number, jersey, season stats)."""

    number: int = 0
    jersey: str = ""
    stats: Dict[str, Any] = Field(default_factory=dict)

    @field_validator("number", mode="before")
    @classmethod
    def _number(cls, value: Any) -> Any:
        return _coerce_int(value) if value is not None else 0


class PlayerCreate(RosterPlayerIn):
    """Body for POST /players."""

    model_config = ConfigDict(
        extra="ignore",
        json_schema_extra={
            "example": {
                "name": "John Doe",
                "position": "QB",
                "sector": "Offense",
                "team_id": 1,
                "season": "2024",
                "number": 12,
                "jersey": "DOE",
            }
        },
    )

    team_id: Optional[int] = None
    season: Optional[str] = None


class PlayerUpdate(BaseModel):
    """Body for PUT /players/{id}; only the fields sent are changed."""

    model_config = ConfigDict(extra="ignore")

    name: Optional[str] = None
    origin_team: Optional[str] = None
    position: Optional[str] = None
    sector: Optional[str] = None
    experience: Optional[int] = None
    age: Optional[int] = None
    height: Optional[float] = None
    weight: Optional[int] = None
    instagram: Optional[str] = None
    instagram2: Optional[str] = None
    city: Optional[str] = None
    nationality: Optional[str] = None
    retired: Optional[bool] = None

    number: Optional[int] = None
    jersey: Optional[str] = None
    stats: Optional[Dict[str, Any]] = None
    team_id: Optional[int] = None
    season: Optional[str] = None

    @field_validator("experience", "age", "weight", "number", mode="before")
    @classmethod
    def _ints(cls, value: Any) -> Any:
        return _coerce_int(value)

    @field_validator("height", mode="before")
    @classmethod
    def _height(cls, value: Any) -> Any:
        return None if value is None else to_number(value)

    @field_validator("season", mode="before")
    @classmethod
    def _season(cls, value: Any) -> Any:
        return None if value in (None, "") else str(value)


PLAYER_FIELDS = tuple(PlayerFields.model_fields)
