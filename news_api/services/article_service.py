"""
Article service — reads and vote updates for the Article aggregate.

Design notes
------------
- Reads that return ``comment_count`` LEFT OUTER JOIN comments and GROUP
  BY the article primary key, so articles without comments report 0.
  The count is cast to INTEGER to keep Postgres from returning BIGINT.
- ``sort_by`` and ``order`` are checked against fixed whitelists before a
  statement is built; the column is then looked up on the mapped class,
  never interpolated.  The topic filter is always a bound parameter.
- Vote changes are a single ``UPDATE ... SET votes = votes + :delta
  RETURNING`` so concurrent requests cannot lose each other's increments.
- Service functions do not commit; the transaction boundary is owned by
  the ``get_db`` dependency in the router layer.
"""
import logging

from sqlalchemy import Integer, asc, cast, desc, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from news_api.database import row_to_dict
from news_api.errors import ARTICLE_NOT_FOUND, ApiError
from news_api.models import Article, Comment
from news_api.schemas import VoteUpdate

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Query whitelists
# ---------------------------------------------------------------------------

SORTABLE_COLUMNS: frozenset[str] = frozenset(
    {"title", "topic", "author", "body", "created_at", "votes"}
)
SORT_ORDERS: frozenset[str] = frozenset({"ASC", "DESC", "asc", "desc"})


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _select_with_comment_count():
    """SELECT articles.*, COUNT(comment_id)::INT AS comment_count ... GROUP BY article_id."""
    comment_count = cast(func.count(Comment.comment_id), Integer).label("comment_count")
    return (
        select(*Article.__table__.columns, comment_count)
        .outerjoin(Comment, Comment.article_id == Article.article_id)
        .group_by(Article.article_id)
    )


async def ensure_article_exists(db: AsyncSession, article_id: int) -> None:
    """Raise a 404 ``ApiError`` unless an article with *article_id* exists."""
    q = select(Article.article_id).where(Article.article_id == article_id)
    result = await db.execute(q)
    if result.scalar_one_or_none() is None:
        raise ApiError(404, ARTICLE_NOT_FOUND)


# ---------------------------------------------------------------------------
# Public service functions
# ---------------------------------------------------------------------------

async def get_articles(
    db: AsyncSession,
    sort_by: str = "created_at",
    order: str = "desc",
    topic: str | None = None,
) -> list[dict]:
    """
    Return all articles with their comment counts, sorted by *sort_by* in
    *order* direction and optionally restricted to one *topic*.

    Raises ``ApiError(400)`` for an unknown sort column or direction, and
    when a topic filter matches no articles.
    """
    if sort_by not in SORTABLE_COLUMNS:
        raise ApiError(400, "Invalid sort by")
    if order not in SORT_ORDERS:
        raise ApiError(400, "Invalid order")

    sort_col = getattr(Article, sort_by)
    order_expr = desc(sort_col) if order.lower() == "desc" else asc(sort_col)

    q = _select_with_comment_count().order_by(order_expr)
    if topic is not None:
        q = q.where(Article.topic == topic)

    result = await db.execute(q)
    rows = result.mappings().all()

    # An existing topic without articles is indistinguishable from an
    # unknown one here; both are reported as an invalid topic.
    if topic is not None and not rows:
        raise ApiError(400, "Invalid topic")

    logger.debug("Listed %d article(s) sort_by=%s order=%s topic=%s", len(rows), sort_by, order, topic)
    return [row_to_dict(row) for row in rows]


async def get_article(db: AsyncSession, article_id: int) -> dict:
    """
    Return the article identified by *article_id* including its
    ``comment_count``.

    Raises ``ApiError(404)`` when the article does not exist.
    """
    q = _select_with_comment_count().where(Article.article_id == article_id)
    result = await db.execute(q)
    row = result.mappings().one_or_none()
    if row is None:
        raise ApiError(404, ARTICLE_NOT_FOUND)
    return row_to_dict(row)


async def update_votes(db: AsyncSession, article_id: int, data: VoteUpdate) -> dict:
    """
    Add ``data.inc_votes`` to the article's vote count and return the
    updated article.

    The increment is applied by the database in one statement, so racing
    requests never overwrite each other.  Raises ``ApiError(404)`` when the
    article does not exist.
    """
    q = (
        update(Article)
        .where(Article.article_id == article_id)
        .values(votes=Article.votes + data.inc_votes)
        .returning(*Article.__table__.columns)
        .execution_options(synchronize_session=False)
    )
    result = await db.execute(q)
    row = result.mappings().one_or_none()
    if row is None:
        raise ApiError(404, ARTICLE_NOT_FOUND)

    logger.info("Article %s votes %+d -> %d", article_id, data.inc_votes, row["votes"])
    return row_to_dict(row)
