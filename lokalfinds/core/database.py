"""
Database connection and session management
Uses SQLAlchemy async engine as the document store for profiles, products and reviews
Reference: https://docs.sqlalchemy.org/en/20/orm/extensions/asyncio.html
"""
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import NullPool

from lokalfinds.core.config import settings


# Validate DATABASE_URL is set
if not settings.DATABASE_URL:
    raise ValueError(
        "DATABASE_URL environment variable is not set. "
        "Please set it in your .env file."
    )


def _connect_args(database_url: str) -> dict:
    """
    Driver-specific connection arguments.

    asyncpg accepts a command timeout and server settings; other drivers
    (aiosqlite in tests) reject them.
    Reference: https://magicstack.github.io/asyncpg/current/api/index.html#connection
    """
    if database_url.startswith("postgresql+asyncpg"):
        return {
            "command_timeout": 60,
            "server_settings": {
                "application_name": "lokalfinds_api",
            },
        }
    return {}


# Using NullPool - each session gets a fresh connection
# Reference: https://docs.sqlalchemy.org/en/20/core/pooling.html#switching-pool-implementations
engine = create_async_engine(
    settings.DATABASE_URL,
    echo=False,  # Set to True for SQL query logging (useful for debugging)
    poolclass=NullPool,
    connect_args=_connect_args(settings.DATABASE_URL),
)


# Create async session factory
# Reference: https://docs.sqlalchemy.org/en/20/orm/extensions/asyncio.html#session-basics
async_session_maker = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,  # Keep objects accessible after commit
    autocommit=False,
    autoflush=False,
)


# Base class for all database models
# Reference: https://docs.sqlalchemy.org/en/20/orm/declarative_styles.html
class Base(DeclarativeBase):
    """Base class for SQLAlchemy declarative models"""
    pass


