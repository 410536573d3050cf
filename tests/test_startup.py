from sqlalchemy import func, select

import smartauto.core.startup as startup
import smartauto.main as main
from smartauto.core.config import settings
from smartauto.models.enums import Role
from smartauto.models.user import User


class _Engine:
    def __init__(self, calls):
        self.calls = calls

    async def dispose(self):
        self.calls.append("dispose")


async def test_lifespan_prepares_database_and_releases_pool(monkeypatch):
    calls = []

    async def fake_tables():
        calls.append("tables")

    async def fake_admin():
        calls.append("admin")

    monkeypatch.setattr(main, "ensure_tables", fake_tables)
    monkeypatch.setattr(main, "ensure_default_admin", fake_admin)
    monkeypatch.setattr(main, "engine", _Engine(calls))

    async with main.app.router.lifespan_context(main.app):
        assert calls == ["tables", "admin"]

    assert calls == ["tables", "admin", "dispose"]


async def test_default_admin_is_seeded_once(monkeypatch, session_maker):
    monkeypatch.setattr(startup, "get_async_session_maker_instance", lambda: session_maker)

    await startup.ensure_default_admin()
    await startup.ensure_default_admin()

    async with session_maker() as session:
        admins = (
            await session.execute(select(User).where(User.role == Role.admin.value))
        ).scalars().all()
        total = (await session.execute(select(func.count(User.id)))).scalar()

    assert [a.username for a in admins] == [settings.DEFAULT_ADMIN_USERNAME]
    assert total == 1
