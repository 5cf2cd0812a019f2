from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncSession

from .config import Settings, get_settings
from .database import get_database_manager


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency yielding a transactional AsyncSession."""
    manager = get_database_manager()
    async with manager.session() as session:
        yield session


def get_app_settings() -> Settings:
    """FastAPI dependency returning the cached settings (overridable in tests)."""
    return get_settings()
