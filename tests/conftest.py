"""
Test infrastructure for the News API.

Strategy
--------
- SQLite via aiosqlite eliminates the need for a running Postgres instance
  in CI, keeping the suite fast and self-contained.
- Each test gets its own database file under ``tmp_path`` and a NullPool
  engine, so every session opens its own connection.  Concurrent requests
  then contend on real SQLite locks instead of sharing one connection's
  transaction.
- ``PRAGMA foreign_keys=ON`` is issued on every new connection so the
  comment author / article foreign keys behave as they do on Postgres.
- The app's get_db dependency is overridden so every test-time request uses
  the test session factory rather than the production one.
- Requesting ``async_client`` or ``db_session`` builds the database; pure
  unit tests (e.g. the error-mapping stages) never touch SQLite.
- The same small dataset (topics, users, articles, comments) is seeded
  for every test that needs a database; article ids follow insertion order starting at 1.
"""
from datetime import datetime, timezone

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy import event, insert
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from sqlalchemy.pool import NullPool

from news_api.database import Base, get_db
from news_api.main import app
from news_api.middleware import install_query_counter
from news_api.models import Article, Comment, Topic, User

# ---------------------------------------------------------------------------
# Seed data
# ---------------------------------------------------------------------------

TOPICS = [
    {"slug": "mitch", "description": "The man, the Mitch, the legend"},
    {"slug": "cats", "description": "Not dogs"},
    {"slug": "paper", "description": "what books are made of"},
]

USERS = [
    {
        "username": "butter_bridge",
        "name": "jonny",
        "avatar_url": "https://www.healthytherapies.com/wp-content/uploads/2016/06/Lime3.jpg",
    },
    {
        "username": "icellusedkars",
        "name": "sam",
        "avatar_url": "https://avatars2.githubusercontent.com/u/24604688?s=460&v=4",
    },
    {
        "username": "rogersop",
        "name": "paul",
        "avatar_url": "https://avatars2.githubusercontent.com/u/24394918?s=400&v=4",
    },
    {
        "username": "lurker",
        "name": "do_nothing",
        "avatar_url": "https://www.golenbock.com/wp-content/uploads/2015/01/placeholder-user.png",
    },
]


def _ts(year, month, day, hour=0, minute=0):
    return datetime(year, month, day, hour, minute, tzinfo=timezone.utc)


ARTICLES = [
    {   # article_id 1
        "title": "Living in the shadow of a great man",
        "topic": "mitch",
        "author": "butter_bridge",
        "body": "I find this existence challenging",
        "created_at": _ts(2020, 7, 9, 20, 11),
        "votes": 100,
    },
    {   # article_id 2
        "title": "Sony Vaio; or, The Laptop",
        "topic": "mitch",
        "author": "icellusedkars",
        "body": "Call me Mitchell.",
        "created_at": _ts(2020, 10, 16, 5, 3),
        "votes": 0,
    },
    {   # article_id 3
        "title": "Eight pug gifs that remind me of mitch",
        "topic": "mitch",
        "author": "icellusedkars",
        "body": "some gifs",
        "created_at": _ts(2020, 11, 3, 9, 12),
        "votes": 12,
    },
    {   # article_id 4
        "title": "Student SUES Mitch!",
        "topic": "mitch",
        "author": "rogersop",
        "body": "We all love Mitch and his wonderful, unique typing style.",
        "created_at": _ts(2020, 5, 6, 1, 14),
        "votes": -3,
    },
    {   # article_id 5
        "title": "UNCOVERED: catspiracy to bring down democracy",
        "topic": "cats",
        "author": "rogersop",
        "body": "Bastet walks amongst us, and the cats are taking arms!",
        "created_at": _ts(2020, 8, 3, 13, 14),
        "votes": 7,
    },
    {   # article_id 6
        "title": "Z",
        "topic": "mitch",
        "author": "icellusedkars",
        "body": "I was hungry.",
        "created_at": _ts(2020, 1, 7, 14, 8),
        "votes": 0,
    },
]

COMMENTS = [
    {
        "body": "Oh, I've got compassion running out of my nose, pal!",
        "author": "butter_bridge",
        "article_id": 1,
        "votes": 16,
        "created_at": _ts(2020, 4, 6, 12, 17),
    },
    {
        "body": "The beautiful thing about treasure is that it exists.",
        "author": "icellusedkars",
        "article_id": 1,
        "votes": 14,
        "created_at": _ts(2020, 10, 31, 3, 3),
    },
    {
        "body": "Lobster pot",
        "author": "lurker",
        "article_id": 1,
        "votes": 0,
        "created_at": _ts(2020, 5, 15, 20, 19),
    },
    {
        "body": "git push origin master",
        "author": "icellusedkars",
        "article_id": 3,
        "votes": 0,
        "created_at": _ts(2020, 6, 20, 7, 24),
    },
    {
        "body": "Ambidextrous marsupial",
        "author": "icellusedkars",
        "article_id": 3,
        "votes": 0,
        "created_at": _ts(2020, 9, 19, 23, 10),
    },
    {
        "body": "What do you see? I have no idea where this will lead us.",
        "author": "butter_bridge",
        "article_id": 5,
        "votes": 7,
        "created_at": _ts(2020, 11, 22, 11, 13),
    },
]


async def seed(session: AsyncSession) -> None:
    await session.execute(insert(Topic), TOPICS)
    await session.execute(insert(User), USERS)
    # One row at a time so article_id follows list order.
    for article in ARTICLES:
        await session.execute(insert(Article).values(**article))
    await session.execute(insert(Comment), COMMENTS)


def _enable_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest_asyncio.fixture
async def session_factory(tmp_path):
    """
    Build a fresh seeded database for each test and route the app's
    get_db dependency to it.
    """
    engine_test = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'news.db'}",
        poolclass=NullPool,
    )
    event.listen(engine_test.sync_engine, "connect", _enable_foreign_keys)
    # Register the per-request SQL query counter on the test engine.
    install_query_counter(engine_test)

    factory = async_sessionmaker(engine_test, class_=AsyncSession, expire_on_commit=False)

    async def override_get_db():
        async with factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db

    async with engine_test.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    async with factory() as session:
        await seed(session)
        await session.commit()

    yield factory

    app.dependency_overrides.pop(get_db, None)
    await engine_test.dispose()


@pytest_asyncio.fixture
async def db_session(session_factory) -> AsyncSession:
    """
    Yield a live AsyncSession for tests that call service functions
    directly.
    """
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def async_client(session_factory) -> AsyncClient:
    """Yield an httpx.AsyncClient wired to the FastAPI app via ASGITransport."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
