"""
Comment service — listing and append-only creation of comments on an
Article.

Comments cannot be edited or deleted through the API.  Both operations
check that the parent article exists first so that a missing article is
reported as 404 rather than as an empty list or a foreign-key failure.
"""
import logging

from sqlalchemy import insert, select
from sqlalchemy.ext.asyncio import AsyncSession

from news_api.database import row_to_dict
from news_api.models import Comment
from news_api.schemas import CommentCreate
from news_api.services.article_service import ensure_article_exists

logger = logging.getLogger(__name__)


async def get_comments(db: AsyncSession, article_id: int) -> list[dict]:
    """
    Return every comment on the article identified by *article_id*.

    An article without comments yields an empty list; an unknown article
    raises ``ApiError(404)``.
    """
    await ensure_article_exists(db, article_id)

    q = select(*Comment.__table__.columns).where(Comment.article_id == article_id)
    result = await db.execute(q)
    return [row_to_dict(row) for row in result.mappings().all()]


async def add_comment(db: AsyncSession, article_id: int, data: CommentCreate) -> dict:
    """
    Append a new comment by ``data.username`` to the article identified by
    *article_id* and return the stored row.

    The payload shape (exactly ``username`` and ``body``, both non-empty
    strings) is enforced by ``CommentCreate`` before this is called.  An
    unknown article raises ``ApiError(404)``.  An unknown username is
    rejected by the users foreign key and surfaces as the driver's
    integrity error.
    """
    await ensure_article_exists(db, article_id)

    q = (
        insert(Comment)
        .values(author=data.username, body=data.body, article_id=article_id, votes=0)
        .returning(*Comment.__table__.columns)
    )
    result = await db.execute(q)
    comment = row_to_dict(result.mappings().one())

    logger.info("Comment %s added to article %s by %s", comment["comment_id"], article_id, data.username)
    return comment
