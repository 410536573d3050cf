from sqlalchemy import event
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from sqlalchemy.orm import declarative_base

from smartauto.core.config import settings


def get_database_url():
    db_url = settings.DATABASE_URL
    if "postgresql" in db_url and "sslmode" not in db_url and settings.ENVIRONMENT != "development":
        return f"{db_url}?sslmode=require"
    return db_url


def enable_sqlite_foreign_keys(engine):
    """SQLite ignores FOREIGN KEY clauses unless the pragma is set on every connection."""
    if engine.dialect.name != "sqlite":
        return

    @event.listens_for(engine.sync_engine, "connect")
    def _set_sqlite_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


DATABASE_URL = get_database_url()
engine = create_async_engine(DATABASE_URL, echo=settings.DB_ECHO)
enable_sqlite_foreign_keys(engine)
async_session_maker = async_sessionmaker(engine, expire_on_commit=False, class_=AsyncSession)
Base = declarative_base()


def get_async_session_maker_instance():
    """Get the async session maker instance."""
    return async_session_maker
