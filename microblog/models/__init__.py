import os
from sqlalchemy import event
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import NullPool

DATABASE_URL = os.getenv('DATABASE_URL') or 'sqlite+aiosqlite:///./microblog.db'
if DATABASE_URL.startswith('postgresql://') and not DATABASE_URL.startswith('postgresql+asyncpg://'):
    DATABASE_URL = DATABASE_URL.replace('postgresql://', 'postgresql+asyncpg://', 1)

IS_SQLITE = DATABASE_URL.startswith('sqlite')

# aiosqlite connections are bound to the loop that opened them
engine = create_async_engine(
    DATABASE_URL,
    future=True,
    echo=os.getenv('SQL_ECHO', '0') == '1',
    **({'poolclass': NullPool} if IS_SQLITE else {}),
)
AsyncSessionLocal = sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
Base = declarative_base()


if IS_SQLITE:
    @event.listens_for(engine.sync_engine, 'connect')
    def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
        # ON DELETE CASCADE is a no-op in SQLite without this
        cursor = dbapi_connection.cursor()
        cursor.execute('PRAGMA foreign_keys=ON')
        cursor.close()


async def init_models(drop: bool = False):
    """Create (optionally recreate) every table registered on Base."""
    async with engine.begin() as conn:
        if drop:
            await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)


# Import models to register tables
from .users import User, Authenticatable  # noqa: F401,E402
from .microposts import Micropost  # noqa: F401,E402
