"""Async SQLAlchemy engine and session factory for the HR star schema."""

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from config.settings import settings

_ASYNC_SCHEME = "postgresql+psycopg://"
_LOCAL_HOSTS = frozenset({"localhost", "127.0.0.1"})


def async_database_url(url: str) -> str:
    """Rewrite a plain PostgreSQL URL for the async psycopg driver.

    Remote hosts get ``sslmode=require`` unless the URL already sets it.
    """
    for prefix in ("postgres://", "postgresql://"):
        if url.startswith(prefix):
            url = _ASYNC_SCHEME + url[len(prefix):]
            break

    parsed = make_url(url)
    if parsed.host and parsed.host not in _LOCAL_HOSTS and "sslmode" not in parsed.query:
        parsed = parsed.update_query_dict({"sslmode": "require"})
    return parsed.render_as_string(hide_password=False)


engine = create_async_engine(
    async_database_url(settings.database_url),
    echo=settings.database_echo,
    pool_pre_ping=True,
)

async_session = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


async def get_session() -> AsyncSession:
    """Yield a session for one request; closed when the request ends."""
    async with async_session() as session:
        yield session
