from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from core.dependencies import get_db_session
from schemas.article import ArticleCreate, ArticleUpdate
from services.article_service import (
    create_article,
    delete_article,
    get_article,
    list_articles,
    update_article,
)
from services.errors import NotFoundError

router = APIRouter(prefix="/articles", tags=["articles"])


@router.get("")
async def get_articles(session: AsyncSession = Depends(get_db_session)):
    return await list_articles(session)


@router.get("/{article_id}")
async def get_one(article_id: int, session: AsyncSession = Depends(get_db_session)):
    try:
        return await get_article(session, article_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e


@router.post("", status_code=status.HTTP_201_CREATED)
async def post_article(body: ArticleCreate, session: AsyncSession = Depends(get_db_session)):
    return await create_article(session, body)


@router.put("/{article_id}")
async def put_article(article_id: int, body: ArticleUpdate, session: AsyncSession = Depends(get_db_session)):
    try:
        return await update_article(session, article_id, body)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e


@router.delete("/{article_id}")
async def remove_article(article_id: int, session: AsyncSession = Depends(get_db_session)):
    try:
        await delete_article(session, article_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
    return {"message": "Article deleted successfully"}
