import logging
import uuid
from datetime import datetime
from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from closet.core.errors import RecommendationNotFound
from closet.core.timeutil import local_today, utcnow
from closet.events.providers import EventSink
from closet.events.types import AnalyticsEvent, RECOMMENDATION_GENERATED
from closet.models.models import ShopYourClosetRecommendationLog
from closet.services.wardrobe import WardrobeRepository
from .similarity import build_reasoning, find_similar, similarity_confidence
from .types import ShopYourClosetRecommendation, TargetItem

logger = logging.getLogger(__name__)

NO_SIMILAR_ITEMS_MESSAGE = "No similar items in your closet - this might be a good addition"


class ShopYourClosetService:
    """Builds "shop your closet first" recommendations for a prospective purchase."""

    def __init__(self, events: EventSink, wardrobe: Optional[WardrobeRepository] = None) -> None:
        self.events = events
        self.wardrobe = wardrobe or WardrobeRepository()

    async def generate(
        self,
        session: AsyncSession,
        user_id: str,
        description: str,
        category: str,
        colors: Optional[List[str]] = None,
        style: Optional[str] = None,
        *,
        now: Optional[datetime] = None,
    ) -> ShopYourClosetRecommendation:
        now = now or utcnow()
        target = TargetItem(description=description, category=category, colors=list(colors or []), style=style or None)

        wardrobe_items = await self.wardrobe.get_wardrobe_items(session, user_id)
        similar = find_similar(wardrobe_items, target.category, target.colors, target.style)

        recommendation = ShopYourClosetRecommendation(
            id=str(uuid.uuid4()),
            user_id=user_id,
            target_item=target,
            similar_owned_items=similar,
            confidence_score=similarity_confidence(len(similar)),
            reasoning=build_reasoning(similar, target.category, local_today(now)),
            created_at=now,
        )
        logger.info(
            "shop-your-closet user=%s category=%s similar=%d confidence=%.2f",
            user_id, target.category, len(similar), recommendation.confidence_score,
        )
        self.events.emit(
            AnalyticsEvent(
                kind=RECOMMENDATION_GENERATED,
                user_id=user_id,
                payload={
                    "recommendation_id": recommendation.id,
                    "target_item": target.as_dict(),
                    "similar_item_ids": [str(item.id) for item in similar],
                    "confidence_score": recommendation.confidence_score,
                    "reasoning": recommendation.reasoning,
                },
                occurred_at=now,
            )
        )
        return recommendation


async def mark_recommendation(
    session: AsyncSession,
    user_id: str,
    recommendation_id: uuid.UUID,
    *,
    acted_upon: bool = False,
    now: Optional[datetime] = None,
) -> ShopYourClosetRecommendationLog:
    """Record that the user opened (and optionally acted on) a logged recommendation."""
    row = await session.get(ShopYourClosetRecommendationLog, recommendation_id)
    if row is None or row.user_id != user_id:
        raise RecommendationNotFound()
    if row.viewed_at is None:
        row.viewed_at = now or utcnow()
    if acted_upon:
        row.acted_upon = True
    await session.commit()
    await session.refresh(row)
    return row
