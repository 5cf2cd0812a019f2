from __future__ import annotations

import json
import logging
from typing import Any, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from models.meta_entry import MetaEntry

logger = logging.getLogger(__name__)


class MetaRepository:
    """Key/value store over ``meta_data`` with JSON-encoded values (custom API, no base class)."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get(self, key: str) -> Optional[MetaEntry]:
        return await self.session.get(MetaEntry, key)

    async def get_json(self, key: str, default: Any = None) -> Any:
        """Decode the value stored under ``key``; ``default`` when absent or corrupt."""
        row = await self.get(key)
        if row is None or not row.value:
            return default
        try:
            return json.loads(row.value)
        except json.JSONDecodeError:
            logger.warning("Corrupt JSON stored under meta key %s", key)
            return default

    async def put_json(self, key: str, value: Any) -> None:
        """Insert or replace the JSON value stored under ``key``."""
        payload = json.dumps(value)
        existing = await self.get(key)
        if existing is not None:
            existing.value = payload
        else:
            self.session.add(MetaEntry(key=key, value=payload))
        await self.session.flush()
