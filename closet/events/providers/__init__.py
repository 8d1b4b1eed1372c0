from closet.events.providers.base import EventSink
from closet.events.providers.log_only import LogEventSink
from closet.events.providers.database import DatabaseEventSink
from closet.events.providers.celery_task import CeleryEventSink

__all__ = [
    "EventSink",
    "LogEventSink",
    "DatabaseEventSink",
    "CeleryEventSink",
]
