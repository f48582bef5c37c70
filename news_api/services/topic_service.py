"""Topic service — topics are seeded data and only ever listed."""
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from news_api.database import row_to_dict
from news_api.models import Topic


async def get_topics(db: AsyncSession) -> list[dict]:
    """Return every topic, in no particular order."""
    result = await db.execute(select(*Topic.__table__.columns))
    return [row_to_dict(row) for row in result.mappings().all()]
