from typing import Protocol
from closet.events.types import AnalyticsEvent


class EventSink(Protocol):
    def emit(self, event: AnalyticsEvent) -> None:
        """Hand off an event without waiting for it; must never raise."""
        ...

    async def drain(self) -> None:
        ...
