from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from closet.core.config import settings
from closet.events.providers import CeleryEventSink, DatabaseEventSink, EventSink, LogEventSink


def build_event_sink(session_factory: async_sessionmaker[AsyncSession], kind: str | None = None) -> EventSink:
    kind = kind or settings.EVENTS_SINK
    if kind == "db":
        return DatabaseEventSink(session_factory)
    if kind == "celery":
        return CeleryEventSink()
    return LogEventSink()
