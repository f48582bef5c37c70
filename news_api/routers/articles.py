from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from news_api.database import get_db
from news_api.dependencies import ArticleListParams
from news_api.schemas import ArticleId, CommentCreate, VoteUpdate
from news_api.services import article_service, comment_service

router = APIRouter(prefix="/api/articles", tags=["articles"])

@router.get("")
async def list_articles(
    params: ArticleListParams = Depends(),
    db: AsyncSession = Depends(get_db, scope="function"),
):
    articles = await article_service.get_articles(db, params.sort_by, params.order, params.topic)
    return {"articles": articles}

@router.get("/{article_id}")
async def get_article(article_id: ArticleId, db: AsyncSession = Depends(get_db, scope="function")):
    return {"article": await article_service.get_article(db, article_id)}

@router.patch("/{article_id}")
async def update_votes(
    article_id: ArticleId,
    data: VoteUpdate,
    db: AsyncSession = Depends(get_db, scope="function"),
):
    return {"updatedArticle": await article_service.update_votes(db, article_id, data)}

@router.get("/{article_id}/comments")
async def list_comments(article_id: ArticleId, db: AsyncSession = Depends(get_db, scope="function")):
    return {"comments": await comment_service.get_comments(db, article_id)}

@router.post("/{article_id}/comments", status_code=201)
async def add_comment(
    article_id: ArticleId,
    data: CommentCreate,
    db: AsyncSession = Depends(get_db, scope="function"),
):
    return {"comment": await comment_service.add_comment(db, article_id, data)}
