"""News article CRUD."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, List

from sqlalchemy.ext.asyncio import AsyncSession

from models.article import Article
from repositories.article_repo import ArticleRepository
from schemas.article import ArticleCreate, ArticleUpdate
from .errors import NotFoundError

ARTICLE_FIELDS = tuple(ArticleCreate.model_fields)


def _iso(value: datetime) -> str:
    # SQLite hands timestamps back naive; they are stored as UTC.
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.isoformat()


def article_to_dict(article: Article) -> Dict[str, Any]:
    data: Dict[str, Any] = {"id": article.id}
    for field in ARTICLE_FIELDS:
        data[field] = getattr(article, field)
    data["created_at"] = _iso(article.created_at)
    data["updated_at"] = _iso(article.updated_at)
    return data


async def list_articles(session: AsyncSession) -> List[Dict[str, Any]]:
    return [article_to_dict(a) for a in await ArticleRepository(session).list_recent()]


async def _get(session: AsyncSession, article_id: int) -> Article:
    article = await ArticleRepository(session).get_by_id(article_id)
    if article is None:
        raise NotFoundError("Article not found")
    return article


async def get_article(session: AsyncSession, article_id: int) -> Dict[str, Any]:
    return article_to_dict(await _get(session, article_id))


async def create_article(session: AsyncSession, body: ArticleCreate) -> Dict[str, Any]:
    now = datetime.now(timezone.utc)
    article = await ArticleRepository(session).add(Article(**body.model_dump(), created_at=now, updated_at=now))
    return article_to_dict(article)


async def update_article(session: AsyncSession, article_id: int, body: ArticleUpdate) -> Dict[str, Any]:
    """Apply the fields present in ``body`` and bump ``updated_at``."""
    article = await _get(session, article_id)
    for field, value in body.model_dump(exclude_unset=True).items():
        if value is not None:
            setattr(article, field, value)
    article.updated_at = datetime.now(timezone.utc)
    await session.flush()
    return article_to_dict(article)


async def delete_article(session: AsyncSession, article_id: int) -> None:
    await ArticleRepository(session).delete(await _get(session, article_id))
