from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict

from sqlalchemy import JSON, ForeignKey, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base

if TYPE_CHECKING:
    from .player import Player
    from .team import Team


class PlayerTeam(Base):
    """Roster link: a player on a team for one season, with season stats."""

    __tablename__ = "player_teams"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    player_id: Mapped[int] = mapped_column(ForeignKey("players.id"), nullable=False, index=True)
    team_id: Mapped[int] = mapped_column(ForeignKey("teams.id"), nullable=False, index=True)
    season: Mapped[str] = mapped_column(String(10), nullable=False)
    number: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    jersey: Mapped[str] = mapped_column(String(50), nullable=False, default="")
    stats: Mapped[Dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)

    player: Mapped["Player"] = relationship(back_populates="links")
    team: Mapped["Team"] = relationship(back_populates="roster")

    __table_args__ = (
        Index("ix_player_teams_player_season", "player_id", "season"),
        Index("ix_player_teams_team_season", "team_id", "season"),
    )
