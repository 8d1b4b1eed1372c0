"""Per-process application state, built in the app lifespan."""

from dataclasses import dataclass

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from closet.events.providers import EventSink
from closet.events.service import build_event_sink


@dataclass
class AppState:
    session_factory: async_sessionmaker[AsyncSession]
    events: EventSink

    @classmethod
    def build(cls, session_factory: async_sessionmaker[AsyncSession]) -> "AppState":
        return cls(session_factory=session_factory, events=build_event_sink(session_factory))

    async def close(self) -> None:
        await self.events.drain()


def get_app_state(request: Request) -> AppState:
    return request.app.state.closet


def get_event_sink(state: AppState = Depends(get_app_state)) -> EventSink:
    return state.events
