import logging
from closet.events.types import AnalyticsEvent


class LogEventSink:
    def emit(self, event: AnalyticsEvent) -> None:
        logging.getLogger("events").info("event %s user=%s", event.kind, event.user_id)

    async def drain(self) -> None:
        return None
