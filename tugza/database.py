# database.py
# Establishes connection to the SQL database and ORM setup.

from typing import Awaitable, Callable, TypeVar

from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.orm import declarative_base
from sqlalchemy.pool import NullPool

from .config import settings

SQLALCHEMY_DATABASE_URL = settings.DATABASE_URL

T = TypeVar("T")


def build_engine(url: str, echo: bool = False):
    """Create the async engine for `url`.

    PostgreSQL (asyncpg) gets the NullPool/timeout setup used in deployment;
    any other driver (SQLite in tests) is created with its defaults.
    """
    if url.startswith("postgresql+asyncpg"):
        return create_async_engine(
            url,
            echo=echo,
            poolclass=NullPool,  # Avoid connection pool issues with async
            connect_args={
                "timeout": 30,
                "server_settings": {"application_name": "tugza_bank"},
            },
        )
    return create_async_engine(url, echo=echo)


engine = build_engine(SQLALCHEMY_DATABASE_URL, echo=settings.SQL_ECHO)

SessionLocal = async_sessionmaker(
    bind=engine,
    autocommit=False,
    autoflush=False,
    expire_on_commit=False
)

Base = declarative_base()

async def with_transaction(session: AsyncSession, work: Callable[[AsyncSession], Awaitable[T]]) -> T:
    """Run `work` and commit once; roll back everything it wrote if it raises."""
    try:
        result = await work(session)
        await session.commit()
    except Exception:
        await session.rollback()
        raise
    return result
