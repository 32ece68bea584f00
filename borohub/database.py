"""
Database Connection and Session Management

This module sets up SQLAlchemy's async database engine and provides
a dependency injection function for FastAPI routes to access database sessions.
"""

from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession
from sqlalchemy.orm import sessionmaker
from borohub.config import settings


# Create async database engine
# - Uses asyncpg for PostgreSQL or aiosqlite for SQLite (from DATABASE_URL)
# - Connection pool is managed by SQLAlchemy and released on shutdown
engine = create_async_engine(settings.DATABASE_URL, echo=False)


# Session factory for creating database sessions
# - expire_on_commit=False: objects stay readable after commit, which the
#   serializers rely on when building the response
AsyncSessionLocal = sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False
)


async def get_db():
    """
    Database session dependency for FastAPI routes.

    Yields one session per request. Each service operation commits once at
    its end, so when an operation raises, nothing it wrote is committed and
    the session rolls back on close.

    Usage in FastAPI routes:
        @router.get("/endpoint")
        async def route(db: AsyncSession = Depends(get_db)):
            result = await db.execute(select(Member))
    """
    async with AsyncSessionLocal() as session:
        yield session
