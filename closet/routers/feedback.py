import logging

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from closet.auth.deps import get_current_user_id
from closet.core.db import get_session
from closet.core.timeutil import local_today
from closet.models.models import OutfitFeedback, OutfitFeedbackItem, WardrobeItem
from closet.routers.items import get_wardrobe
from closet.schemas.feedback import FeedbackCreate, FeedbackOut
from closet.services.wardrobe import WardrobeRepository

router = APIRouter(prefix="/feedback", tags=["feedback"])
logger = logging.getLogger(__name__)


def _feedback_out(fb: OutfitFeedback) -> FeedbackOut:
    return FeedbackOut(
        id=str(fb.id),
        confidence_rating=fb.confidence_rating,
        item_ids=fb.item_ids,
        outfit_recommendation_id=str(fb.outfit_recommendation_id) if fb.outfit_recommendation_id else None,
        emotional_response=fb.emotional_response,
        occasion=fb.occasion,
        comfort_rating=fb.comfort_rating,
        created_at=fb.created_at,
    )


@router.post("", response_model=FeedbackOut)
async def create_feedback(
    payload: FeedbackCreate,
    session: AsyncSession = Depends(get_session),
    user_id: str = Depends(get_current_user_id),
    wardrobe: WardrobeRepository = Depends(get_wardrobe),
):
    # keep first occurrence order, drop repeats
    item_ids = list(dict.fromkeys(payload.item_ids))
    if item_ids:
        res = await session.execute(
            select(WardrobeItem.id).where(WardrobeItem.id.in_(item_ids), WardrobeItem.user_id == user_id)
        )
        owned = {row[0] for row in res.all()}
        if len(owned) != len(item_ids):
            raise HTTPException(status_code=400, detail="invalid_item_ids")

    fb = OutfitFeedback(
        user_id=user_id,
        confidence_rating=payload.confidence_rating,
        outfit_recommendation_id=payload.outfit_recommendation_id,
        emotional_response=payload.emotional_response,
        occasion=payload.occasion,
        comfort_rating=payload.comfort_rating,
        items=[OutfitFeedbackItem(item_id=i) for i in item_ids],
    )
    session.add(fb)
    await session.flush()
    # each rated outfit is one wear of every item in it
    worn_on = local_today(fb.created_at)
    for item_id in item_ids:
        await wardrobe.log_wear(
            session, user_id, item_id, worn_on, source="feedback", feedback_id=fb.id, commit=False
        )
    await session.commit()
    await session.refresh(fb)
    logger.info("feedback recorded id=%s rating=%d items=%d", fb.id, fb.confidence_rating, len(item_ids))
    return _feedback_out(fb)


@router.get("", response_model=list[FeedbackOut])
async def list_feedback(
    limit: int = Query(50, ge=1, le=200),
    session: AsyncSession = Depends(get_session),
    user_id: str = Depends(get_current_user_id),
):
    res = await session.execute(
        select(OutfitFeedback)
        .where(OutfitFeedback.user_id == user_id)
        .order_by(OutfitFeedback.created_at.desc())
        .limit(limit)
    )
    return [_feedback_out(fb) for fb in res.scalars().all()]
