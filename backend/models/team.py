from __future__ import annotations

from typing import TYPE_CHECKING, Any, List

from sqlalchemy import JSON, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base

if TYPE_CHECKING:
    from .player_team import PlayerTeam


class Team(Base):
    """A team as it exists in one season; each rollover creates a new row."""

    __tablename__ = "teams"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    abbreviation: Mapped[str] = mapped_column(String(20), nullable=False, default="")
    color: Mapped[str] = mapped_column(String(50), nullable=False, default="")
    city: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    state_flag: Mapped[str] = mapped_column(String(500), nullable=False, default="")
    founded: Mapped[str] = mapped_column(String(50), nullable=False, default="")
    logo: Mapped[str] = mapped_column(String(500), nullable=False, default="")
    helmet: Mapped[str] = mapped_column(String(500), nullable=False, default="")
    instagram: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    instagram2: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    stadium: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    president: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    head_coach: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    coach_instagram: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    offensive_coordinator: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    defensive_coordinator: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    # Older rows hold a JSON-encoded string instead of a list.
    titles: Mapped[Any] = mapped_column(JSON, nullable=False, default=list)
    season: Mapped[str] = mapped_column(String(10), nullable=False, index=True)

    roster: Mapped[List["PlayerTeam"]] = relationship(back_populates="team", passive_deletes=True)
