import logging
from datetime import date
from typing import List, Optional, Tuple

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from closet.core.timeutil import local_today, month_bounds, previous_month
from closet.models.models import WardrobeItem
from .types import ShoppingBehaviorData

logger = logging.getLogger(__name__)


def reduction_percentage(previous: int, current: int) -> float:
    if previous <= 0:
        return 0.0
    return max(0.0, (previous - current) / previous * 100)


def monthly_shopping_reduction(previous: int, current: int) -> float:
    """Month-over-month reduction in [0, 100]; a purchase-free pair of months counts as 100."""
    if previous <= 0:
        return 100.0 if current == 0 else 0.0
    return max(0.0, min(100.0, (previous - current) / previous * 100))


async def purchases_in_month(
    session: AsyncSession, user_id: str, year: int, month: int
) -> List[Tuple[date, Optional[float]]]:
    start, end = month_bounds(year, month)
    res = await session.execute(
        select(WardrobeItem.purchase_date, WardrobeItem.purchase_price).where(
            WardrobeItem.user_id == user_id,
            WardrobeItem.purchase_date >= start.date(),
            WardrobeItem.purchase_date < end.date(),
        )
    )
    return [(row[0], row[1]) for row in res.all()]


async def last_purchase_date(session: AsyncSession, user_id: str) -> Optional[date]:
    res = await session.execute(
        select(func.max(WardrobeItem.purchase_date)).where(
            WardrobeItem.user_id == user_id,
            WardrobeItem.purchase_date.is_not(None),
        )
    )
    return res.scalar_one_or_none()


class ShoppingBehaviorTracker:
    async def track(
        self,
        session: AsyncSession,
        user_id: str,
        *,
        today: Optional[date] = None,
    ) -> ShoppingBehaviorData:
        today = today or local_today()
        prev_year, prev_month = previous_month(today.year, today.month)

        current = await purchases_in_month(session, user_id, today.year, today.month)
        previous = await purchases_in_month(session, user_id, prev_year, prev_month)

        current_count, previous_count = len(current), len(previous)
        current_spend = sum(price or 0.0 for _, price in current)
        previous_spend = sum(price or 0.0 for _, price in previous)

        last = await last_purchase_date(session, user_id)
        streak = max(0, (today - last).days) if last else 0

        avg_previous_price = previous_spend / max(1, previous_count)
        savings = max(0.0, (previous_count - current_count) * avg_previous_price)

        logger.info(
            "shopping behavior user=%s current=%d previous=%d streak=%d",
            user_id, current_count, previous_count, streak,
        )
        return ShoppingBehaviorData(
            user_id=user_id,
            monthly_purchases=current_count,
            monthly_spend=current_spend,
            previous_month_purchases=previous_count,
            previous_month_spend=previous_spend,
            reduction_percentage=reduction_percentage(previous_count, current_count),
            streak_days=streak,
            total_savings=savings,
            last_purchase_date=last,
        )
