"""
User service — read access for the User aggregate.

Users are seeded data; the API exposes no way to create or change them.
"""
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from news_api.database import row_to_dict
from news_api.models import User


async def get_users(db: AsyncSession) -> list[dict]:
    """Return every user, in no particular order."""
    result = await db.execute(select(*User.__table__.columns))
    return [row_to_dict(row) for row in result.mappings().all()]
