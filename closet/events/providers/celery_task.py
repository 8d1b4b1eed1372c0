import logging

from closet.events.types import AnalyticsEvent

logger = logging.getLogger("events")


class CeleryEventSink:
    """Queues events for the `tasks.record_event` worker."""

    def emit(self, event: AnalyticsEvent) -> None:
        from workers.tasks import record_event

        try:
            record_event.delay(event.as_dict())
        except Exception:
            logger.exception("failed to enqueue event %s user=%s", event.kind, event.user_id)

    async def drain(self) -> None:
        return None
