from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from closet.auth.deps import get_current_user_id
from closet.core.db import get_session
from closet.core.errors import ItemNotFound, RecommendationNotFound
from closet.core.state import get_event_sink
from closet.events.providers import EventSink
from closet.schemas.closet import (
    CostPerWearOut,
    RecommendationStatusIn,
    RecommendationStatusOut,
    ShopYourClosetIn,
    ShopYourClosetOut,
    TargetItemOut,
)
from closet.schemas.items import ItemOut, item_out
from closet.services.anti_consumption import CostPerWearCalculator, ShopYourClosetService, get_neglected_items
from closet.services.anti_consumption.recommendations import NO_SIMILAR_ITEMS_MESSAGE, mark_recommendation

router = APIRouter(prefix="/closet", tags=["closet"])


def get_shop_service(events: EventSink = Depends(get_event_sink)) -> ShopYourClosetService:
    return ShopYourClosetService(events)


@router.post("/shop-your-closet", response_model=ShopYourClosetOut)
async def shop_your_closet(
    payload: ShopYourClosetIn,
    session: AsyncSession = Depends(get_session),
    user_id: str = Depends(get_current_user_id),
    service: ShopYourClosetService = Depends(get_shop_service),
):
    rec = await service.generate(
        session, user_id, payload.description, payload.category, payload.colors, payload.style
    )
    return ShopYourClosetOut(
        id=rec.id,
        target_item=TargetItemOut(**rec.target_item.as_dict()),
        similar_owned_items=[item_out(i) for i in rec.similar_owned_items],
        confidence_score=rec.confidence_score,
        reasoning=rec.reasoning,
        message=None if rec.similar_owned_items else NO_SIMILAR_ITEMS_MESSAGE,
        created_at=rec.created_at,
    )


@router.post("/recommendations/{recommendation_id}/status", response_model=RecommendationStatusOut)
async def recommendation_status(
    recommendation_id: UUID,
    payload: RecommendationStatusIn,
    session: AsyncSession = Depends(get_session),
    user_id: str = Depends(get_current_user_id),
):
    try:
        row = await mark_recommendation(session, user_id, recommendation_id, acted_upon=payload.acted_upon)
    except RecommendationNotFound as e:
        raise HTTPException(status_code=404, detail=e.code) from e
    return RecommendationStatusOut(id=str(row.id), viewed_at=row.viewed_at, acted_upon=row.acted_upon)


@router.get("/cost-per-wear/{item_id}", response_model=CostPerWearOut)
async def cost_per_wear(
    item_id: UUID,
    session: AsyncSession = Depends(get_session),
    user_id: str = Depends(get_current_user_id),
):
    try:
        record = await CostPerWearCalculator().calculate(session, item_id, user_id=user_id)
    except ItemNotFound as e:
        raise HTTPException(status_code=404, detail=e.code) from e
    return CostPerWearOut(
        item_id=record.item_id,
        purchase_price=round(record.purchase_price, 2),
        total_wears=record.total_wears,
        days_since_purchase=record.days_since_purchase,
        cost_per_wear=round(record.cost_per_wear, 2),
        projected_cost_per_wear=round(record.projected_cost_per_wear, 2),
    )


@router.get("/neglected", response_model=list[ItemOut])
async def neglected_items(
    days: int | None = Query(None, ge=1, le=3650),
    session: AsyncSession = Depends(get_session),
    user_id: str = Depends(get_current_user_id),
):
    items = await get_neglected_items(session, user_id, days=days)
    return [item_out(i) for i in items]
