import asyncio
import logging

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from closet.events.store import write_event
from closet.events.types import AnalyticsEvent

logger = logging.getLogger("events")


class DatabaseEventSink:
    """Writes events in background tasks, each with its own session.

    A failed write is logged and dropped; it never reaches the caller that
    emitted the event.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory
        self._pending: set[asyncio.Task] = set()

    def emit(self, event: AnalyticsEvent) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.warning("no running loop, dropping event %s", event.kind)
            return
        task = loop.create_task(self._write(event))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def _write(self, event: AnalyticsEvent) -> None:
        try:
            async with self._session_factory() as session:
                await write_event(session, event)
        except Exception:
            logger.exception("failed to record event %s user=%s", event.kind, event.user_id)

    async def drain(self) -> None:
        if self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)
