from datetime import datetime

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from news_api.config import settings
from news_api.middleware import install_query_counter

# One pool per process; the test suite swaps sessions in through
# ``app.dependency_overrides`` rather than touching this engine.
engine = create_async_engine(
    settings.DATABASE_URL,
    echo=settings.DEBUG,
    pool_pre_ping=True,
)
install_query_counter(engine)

async_session = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


class Base(DeclarativeBase):
    pass


async def get_db():
    """
    Yield a request-scoped session and own its transaction.

    Routers declare this with ``scope="function"`` so the commit (and any
    failure it raises) happens before the response is sent and still goes
    through the error mapper.
    """
    async with async_session() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


def row_to_dict(row) -> dict:
    """Convert a result mapping into a JSON-ready dict (timestamps as ISO-8601)."""
    return {
        key: value.isoformat() if isinstance(value, datetime) else value
        for key, value in row.items()
    }
