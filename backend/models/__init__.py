"""SQLAlchemy models for the league backend.

Importing this package registers every table on ``Base.metadata``.
"""

from .base import Base
from .article import Article
from .meta_entry import MetaEntry
from .player import Player
from .player_team import PlayerTeam
from .team import Team

__all__ = [
    "Base",
    "Article",
    "MetaEntry",
    "Player",
    "PlayerTeam",
    "Team",
]
