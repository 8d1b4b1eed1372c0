import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("EVENTS_SINK", "log")
os.environ.setdefault("JWT_SECRET", "test-secret-for-closet-insights-suite")

import httpx
import pytest
from asgi_lifespan import LifespanManager
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from closet.auth import deps as auth_deps
from closet.core import db as core_db
from closet.core.state import get_event_sink
from closet.events.types import AnalyticsEvent
from closet.main import app
from closet.models import models  # noqa: F401
from closet.models.models import WardrobeItem

USER_ID = "test-user"


class RecordingSink:
    def __init__(self):
        self.events: list[AnalyticsEvent] = []

    def emit(self, event: AnalyticsEvent) -> None:
        self.events.append(event)

    async def drain(self) -> None:
        return None

    def kinds(self) -> list[str]:
        return [e.kind for e in self.events]


@pytest.fixture
async def engine():
    eng = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with eng.begin() as conn:
        await conn.run_sync(core_db.Base.metadata.create_all)
    yield eng
    await eng.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, expire_on_commit=False, class_=AsyncSession)


@pytest.fixture
async def session(session_factory):
    async with session_factory() as s:
        yield s


@pytest.fixture
def sink():
    return RecordingSink()


@pytest.fixture
def make_item(session):
    async def _make(category="tops", colors=None, tags=None, user_id=USER_ID, usage_count=0, **kw):
        item = WardrobeItem(
            user_id=user_id,
            category=category,
            colors=list(colors or []),
            tags=list(tags or []),
            usage_count=usage_count,
            **kw,
        )
        session.add(item)
        await session.commit()
        await session.refresh(item)
        return item

    return _make


@pytest.fixture
async def client(session_factory, sink):
    async def _session():
        async with session_factory() as s:
            yield s

    app.dependency_overrides[core_db.get_session] = _session
    app.dependency_overrides[auth_deps.get_current_user_id] = lambda: USER_ID
    app.dependency_overrides[get_event_sink] = lambda: sink
    async with LifespanManager(app):
        async with httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://test") as ac:
            yield ac
    app.dependency_overrides.clear()
