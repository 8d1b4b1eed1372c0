import logging
import uuid

from sqlalchemy.ext.asyncio import AsyncSession

from closet.events.types import AnalyticsEvent, RECOMMENDATION_GENERATED
from closet.models.models import ShopYourClosetRecommendationLog

logger = logging.getLogger("events")


def _recommendation_row(event: AnalyticsEvent) -> ShopYourClosetRecommendationLog:
    p = event.payload
    return ShopYourClosetRecommendationLog(
        id=uuid.UUID(p["recommendation_id"]),
        user_id=event.user_id,
        target_item=p["target_item"],
        similar_item_ids=list(p.get("similar_item_ids") or []),
        confidence_score=float(p["confidence_score"]),
        reasoning=list(p.get("reasoning") or []),
        created_at=event.occurred_at,
    )


_ROW_BUILDERS = {
    RECOMMENDATION_GENERATED: _recommendation_row,
}


async def write_event(session: AsyncSession, event: AnalyticsEvent) -> bool:
    """Persist an event if it has a table; returns whether a row was written."""
    builder = _ROW_BUILDERS.get(event.kind)
    if builder is None:
        logger.debug("event %s has no table, skipping", event.kind)
        return False
    session.add(builder(event))
    await session.commit()
    return True
