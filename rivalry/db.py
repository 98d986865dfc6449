from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine


def create_engine(database_url: str) -> AsyncEngine:
    """Create the async engine for the submission store.

    SQLite files are used as-is; other backends get a connection pool sized for the API.
    """
    if database_url.startswith("sqlite"):
        return create_async_engine(url=database_url, echo=False)
    return create_async_engine(database_url, pool_size=20, max_overflow=20)


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    # Centralized session factory to avoid creating it in router modules.
    return async_sessionmaker(
        autocommit=False,
        class_=AsyncSession,
        autoflush=True,
        bind=engine,
        expire_on_commit=False,
    )
