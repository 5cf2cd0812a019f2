from __future__ import annotations

from typing import TYPE_CHECKING, List

from sqlalchemy import Boolean, Float, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base

if TYPE_CHECKING:
    from .player_team import PlayerTeam


class Player(Base):
    """Biographical record of a player, independent of any team or season."""

    __tablename__ = "players"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    origin_team: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    position: Mapped[str] = mapped_column(String(50), nullable=False, default="")
    sector: Mapped[str] = mapped_column(String(50), nullable=False, default="Offense")
    experience: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    age: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    height: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    weight: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    instagram: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    instagram2: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    city: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    nationality: Mapped[str] = mapped_column(String(100), nullable=False, default="")
    retired: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    links: Mapped[List["PlayerTeam"]] = relationship(back_populates="player", passive_deletes=True)
