from collections.abc import AsyncGenerator
from urllib.parse import parse_qs, urlencode, urlparse, urlunparse

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from app.core.config import settings


def to_async_url(database_url: str) -> str:
    """Map a plain postgresql:// URL to asyncpg and strip psycopg-only params.

    asyncpg does not accept sslmode/channel_binding; SSL is enabled via connect_args.
    Other URLs (e.g. sqlite+aiosqlite) are returned unchanged.
    """
    parsed = urlparse(database_url)
    if parsed.scheme not in ("postgresql", "postgres"):
        return database_url
    query = parse_qs(parsed.query, keep_blank_values=True)
    query.pop("sslmode", None)
    query.pop("channel_binding", None)
    new_query = urlencode(query, doseq=True)
    return urlunparse(("postgresql+asyncpg", parsed.netloc, parsed.path, parsed.params, new_query, parsed.fragment))


def to_sync_url(database_url: str) -> str:
    """Driver URL for synchronous tools (Alembic): asyncpg -> psycopg2, aiosqlite -> pysqlite."""
    scheme, sep, rest = database_url.partition("://")
    sync_scheme = {
        "postgresql+asyncpg": "postgresql+psycopg2",
        "postgres": "postgresql+psycopg2",
        "sqlite+aiosqlite": "sqlite",
    }.get(scheme, scheme)
    return f"{sync_scheme}{sep}{rest}"


async_database_url = to_async_url(settings.database_url)

_engine_kwargs: dict = {"echo": settings.env == "development", "pool_pre_ping": True}
if async_database_url.startswith("postgresql+asyncpg"):
    _engine_kwargs.update(
        pool_size=5,
        max_overflow=10,
        connect_args={"ssl": True},  # hosted Postgres requires SSL; asyncpg uses this instead of sslmode
    )

engine = create_async_engine(async_database_url, **_engine_kwargs)

async_session_maker = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autocommit=False,
    autoflush=False,
)


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    async with async_session_maker() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise

