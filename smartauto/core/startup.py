"""
Startup utilities for the application.
"""
import logging
from sqlalchemy import select, func
from sqlalchemy.exc import OperationalError, ProgrammingError

from smartauto.core.config import settings
from smartauto.core.database import Base, engine, get_async_session_maker_instance
from smartauto.core.security import get_password_hash
from smartauto.models.enums import Role
from smartauto.models.user import User

# Register every mapped table on Base.metadata
from smartauto.models import category, rental, vehicle  # noqa: F401

logger = logging.getLogger(__name__)


async def ensure_tables():
    """
    Create missing tables on SQLite deployments. PostgreSQL schemas are managed with
    'alembic upgrade head'.
    """
    if engine.dialect.name != "sqlite":
        return
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("SQLite database initialized")


async def ensure_default_admin():
    """
    Check if any admin exists in the database.
    If not, create the default admin configured in settings.
    """
    async_session_maker = get_async_session_maker_instance()
    async with async_session_maker() as session:
        try:
            result = await session.execute(
                select(func.count(User.id)).where(User.role == Role.admin.value)
            )
            admin_count = result.scalar()

            if admin_count:
                logger.info(f"Found {admin_count} admin(s) in database. Skipping default admin creation.")
                return

            logger.info("No admin found in database. Creating default admin...")
            default_admin = User(
                username=settings.DEFAULT_ADMIN_USERNAME,
                password_hash=get_password_hash(settings.DEFAULT_ADMIN_PASSWORD),
                name="Administrator",
                phone="0000000000",
                email=settings.DEFAULT_ADMIN_EMAIL,
                state="NA",
                city="-",
                street="-",
                number=0,
                role=Role.admin.value,
            )
            session.add(default_admin)
            await session.commit()
            logger.info(f"Default admin created with username: {settings.DEFAULT_ADMIN_USERNAME}")
        except (OperationalError, ProgrammingError) as e:
            logger.warning(
                f"Database error during admin check/creation. Error: {e}. "
                f"Please ensure database is accessible and migrations are run."
            )
