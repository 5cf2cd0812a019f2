"""Repository layer for DB access only (CRUD + simple queries).

Repositories take an AsyncSession explicitly and never commit; the
request-scoped session from core.dependencies owns the transaction.
"""

from .base import BaseRepository
from .article_repo import ArticleRepository
from .meta_repo import MetaRepository
from .player_repo import PlayerRepository
from .player_team_repo import PlayerTeamRepository
from .team_repo import TeamRepository

__all__ = [
    "BaseRepository",
    "ArticleRepository",
    "MetaRepository",
    "PlayerRepository",
    "PlayerTeamRepository",
    "TeamRepository",
]
