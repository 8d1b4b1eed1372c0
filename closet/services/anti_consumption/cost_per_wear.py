import uuid
from datetime import date
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from closet.core.config import settings
from closet.core.errors import ItemNotFound
from closet.core.timeutil import local_today
from closet.models.models import ItemWearLog, WardrobeItem
from .types import CostPerWearRecord


def cost_per_wear(purchase_price: float, total_wears: int) -> float:
    # unworn items carry their full price
    if total_wears > 0:
        return purchase_price / total_wears
    return purchase_price


def projected_cost_per_wear(
    purchase_price: float,
    total_wears: int,
    days_since_purchase: int,
    horizon_days: Optional[int] = None,
) -> float:
    """Cost per wear after another `horizon_days` at the observed wear rate."""
    if total_wears <= 0:
        return cost_per_wear(purchase_price, total_wears)
    horizon_days = horizon_days if horizon_days is not None else settings.COST_PROJECTION_HORIZON_DAYS
    rate = total_wears / max(1, days_since_purchase)
    projected_wears = total_wears + rate * horizon_days
    return purchase_price / projected_wears


def build_record(
    item_id: str,
    purchase_price: Optional[float],
    purchase_date: Optional[date],
    total_wears: int,
    today: date,
) -> CostPerWearRecord:
    price = float(purchase_price or 0.0)
    days = max(0, (today - purchase_date).days) if purchase_date else 0
    return CostPerWearRecord(
        item_id=item_id,
        purchase_price=price,
        total_wears=total_wears,
        days_since_purchase=days,
        cost_per_wear=cost_per_wear(price, total_wears),
        projected_cost_per_wear=projected_cost_per_wear(price, total_wears, days),
    )


async def count_wears(
    session: AsyncSession,
    item_id: uuid.UUID,
    *,
    before: Optional[date] = None,
) -> int:
    """Number of wear events logged for the item (rated outfits, manual logs, challenges)."""
    query = select(func.count()).select_from(ItemWearLog).where(ItemWearLog.item_id == item_id)
    if before is not None:
        query = query.where(ItemWearLog.worn_date < before)
    res = await session.execute(query)
    return int(res.scalar_one())


class CostPerWearCalculator:
    async def calculate(
        self,
        session: AsyncSession,
        item_id: uuid.UUID,
        *,
        user_id: Optional[str] = None,
        today: Optional[date] = None,
    ) -> CostPerWearRecord:
        """Cost-per-wear for one item. Database errors are not caught here."""
        item = await session.get(WardrobeItem, item_id)
        if item is None or (user_id is not None and item.user_id != user_id):
            raise ItemNotFound()
        total_wears = await count_wears(session, item.id)
        return build_record(
            str(item.id),
            item.purchase_price,
            item.purchase_date,
            total_wears,
            today or local_today(),
        )
