from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from merchant_rules.config import Settings, settings as default_settings


def build_engine(config: Settings | None = None) -> AsyncEngine:
    config = config or default_settings
    # Do not log SQL statement parameters outside development: stored values
    # are raw transaction text.
    return create_async_engine(
        config.database_url,
        echo=(config.db_echo if config.app_env.lower() == "development" else False),
        future=True,
    )


def build_sessionmaker(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
