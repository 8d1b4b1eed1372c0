from .celery_app import celery
import asyncio
import logging
from datetime import date
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker

from closet.core.config import settings
from closet.core.timeutil import local_today, month_bounds, previous_month
from closet.events.store import write_event
from closet.events.types import AnalyticsEvent
from closet.models.models import OutfitFeedback
from closet.services.anti_consumption import MonthlyConfidenceEngine

logger = logging.getLogger(__name__)


@celery.task(name="tasks.record_event")
def record_event(event: dict) -> dict:
    """Persist one analytics event queued by the API."""

    async def _run() -> dict:
        engine = create_async_engine(settings.DATABASE_URL, echo=False)
        Session = async_sessionmaker(engine, expire_on_commit=False)
        try:
            async with Session() as session:
                written = await write_event(session, AnalyticsEvent.from_dict(event))
                return {"ok": True, "written": written}
        finally:
            await engine.dispose()

    return asyncio.run(_run())


@celery.task(name="tasks.snapshot_monthly_metrics")
def snapshot_monthly_metrics(year: Optional[int] = None, month: Optional[int] = None) -> dict:
    """Persist last month's confidence metrics for every user who rated an outfit in it."""
    if year is None or month is None:
        today: date = local_today()
        year, month = previous_month(today.year, today.month)

    async def _run() -> dict:
        engine = create_async_engine(settings.DATABASE_URL, echo=False)
        Session = async_sessionmaker(engine, expire_on_commit=False)
        start, end = month_bounds(year, month)
        try:
            async with Session() as session:
                res = await session.execute(
                    select(OutfitFeedback.user_id)
                    .where(OutfitFeedback.created_at >= start, OutfitFeedback.created_at < end)
                    .distinct()
                )
                user_ids = [row[0] for row in res.all()]

                metrics_engine = MonthlyConfidenceEngine()
                saved = 0
                errors = 0
                for user_id in user_ids:
                    try:
                        await metrics_engine.generate(session, user_id, month, year, persist=True)
                        saved += 1
                    except Exception:
                        logger.exception("monthly snapshot failed user=%s %04d-%02d", user_id, year, month)
                        await session.rollback()
                        errors += 1

                return {"ok": True, "month": f"{year:04d}-{month:02d}", "saved": saved, "errors": errors}
        finally:
            await engine.dispose()

    return asyncio.run(_run())
