import logging

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from closet.auth.deps import get_current_user_id
from closet.core.cache import cache_json_get, cache_json_set, metrics_key
from closet.core.config import settings
from closet.core.db import get_session
from closet.core.timeutil import local_today
from closet.schemas.insights import MonthlyMetricsOut, ShoppingBehaviorOut
from closet.schemas.items import item_out
from closet.services.anti_consumption import MonthlyConfidenceEngine, ShoppingBehaviorTracker

router = APIRouter(prefix="/insights", tags=["insights"])
logger = logging.getLogger(__name__)


def _is_past_month(month: int, year: int) -> bool:
    today = local_today()
    return (year, month) < (today.year, today.month)


@router.get("/monthly", response_model=MonthlyMetricsOut)
async def monthly_metrics(
    month: int | None = Query(None),
    year: int | None = Query(None, ge=1970, le=9999),
    persist: bool = Query(False),
    session: AsyncSession = Depends(get_session),
    user_id: str = Depends(get_current_user_id),
):
    today = local_today()
    month = today.month if month is None else month
    year = today.year if year is None else year
    if not 1 <= month <= 12:
        raise HTTPException(status_code=400, detail="invalid_month")

    # closed months never change, so they are safe to cache
    cacheable = settings.METRICS_CACHE_ENABLED and _is_past_month(month, year) and not persist
    key = metrics_key(user_id, month, year)
    if cacheable:
        try:
            cached = await cache_json_get(key)
        except Exception:
            logger.warning("metrics cache read failed key=%s", key, exc_info=True)
            cached = None
        if cached:
            return MonthlyMetricsOut(**cached)

    try:
        metrics = await MonthlyConfidenceEngine().generate(session, user_id, month, year, persist=persist)
    except ValueError as e:
        raise HTTPException(status_code=400, detail="invalid_month") from e
    out = MonthlyMetricsOut(
        month=metrics.month,
        year=metrics.year,
        total_outfits_rated=metrics.total_outfits_rated,
        average_confidence_rating=metrics.average_confidence_rating,
        confidence_improvement=metrics.confidence_improvement,
        most_confident_items=[item_out(i) for i in metrics.most_confident_items],
        least_confident_items=[item_out(i) for i in metrics.least_confident_items],
        wardrobe_utilization=metrics.wardrobe_utilization,
        cost_per_wear_improvement=metrics.cost_per_wear_improvement,
        shopping_reduction_percentage=metrics.shopping_reduction_percentage,
    )
    if cacheable:
        try:
            await cache_json_set(key, out.model_dump(mode="json"), settings.METRICS_CACHE_TTL_S)
        except Exception:
            logger.warning("metrics cache write failed key=%s", key, exc_info=True)
    return out


@router.get("/shopping", response_model=ShoppingBehaviorOut)
async def shopping_behavior(
    session: AsyncSession = Depends(get_session),
    user_id: str = Depends(get_current_user_id),
):
    data = await ShoppingBehaviorTracker().track(session, user_id)
    return ShoppingBehaviorOut(
        monthly_purchases=data.monthly_purchases,
        monthly_spend=round(data.monthly_spend, 2),
        previous_month_purchases=data.previous_month_purchases,
        previous_month_spend=round(data.previous_month_spend, 2),
        reduction_percentage=round(data.reduction_percentage, 2),
        streak_days=data.streak_days,
        total_savings=round(data.total_savings, 2),
        last_purchase_date=data.last_purchase_date,
    )
