import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from closet.core.config import settings
from closet.core.timeutil import month_bounds, previous_month
from closet.models.models import ItemWearLog, MonthlyConfidenceSnapshot, OutfitFeedback
from closet.services.wardrobe import WardrobeRepository
from .cost_per_wear import cost_per_wear
from .shopping import monthly_shopping_reduction, purchases_in_month
from .types import MonthlyConfidenceMetrics

logger = logging.getLogger(__name__)


@dataclass
class ItemConfidence:
    item_id: str
    average_rating: float
    appearances: int
    first_seen: int


def rank_item_confidence(feedback: Iterable[Tuple[int, Sequence[str]]]) -> List[ItemConfidence]:
    """Average rating of the outfits each item appeared in, in first-seen order."""
    ratings: Dict[str, List[int]] = {}
    for rating, item_ids in feedback:
        for item_id in item_ids:
            ratings.setdefault(item_id, []).append(rating)
    return [
        ItemConfidence(item_id=i, average_rating=sum(r) / len(r), appearances=len(r), first_seen=pos)
        for pos, (i, r) in enumerate(ratings.items())
    ]


def most_confident(ranked: List[ItemConfidence], limit: int) -> List[ItemConfidence]:
    return sorted(ranked, key=lambda c: (-c.average_rating, -c.appearances, c.first_seen))[:limit]


def least_confident(ranked: List[ItemConfidence], limit: int) -> List[ItemConfidence]:
    return sorted(ranked, key=lambda c: (c.average_rating, -c.appearances, c.first_seen))[:limit]


def _mean(values: Sequence[float]) -> float:
    return sum(values) / len(values) if values else 0.0


class MonthlyConfidenceEngine:
    """Recomputes a user's monthly confidence metrics from outfit feedback."""

    def __init__(self, wardrobe: Optional[WardrobeRepository] = None) -> None:
        self.wardrobe = wardrobe or WardrobeRepository()

    async def generate(
        self,
        session: AsyncSession,
        user_id: str,
        month: int,
        year: int,
        *,
        persist: bool = False,
    ) -> MonthlyConfidenceMetrics:
        start, end = month_bounds(year, month)
        label = f"{year:04d}-{month:02d}"

        feedback = await self._feedback_between(session, user_id, start, end)
        if not feedback:
            metrics = MonthlyConfidenceMetrics(user_id=user_id, month=label, year=year)
            if persist:
                await self._persist(session, metrics)
            return metrics

        precision = settings.METRICS_PRECISION
        ratings = [f.confidence_rating for f in feedback]
        average = _mean(ratings)

        prev_year, prev_month = previous_month(year, month)
        prev_start, prev_end = month_bounds(prev_year, prev_month)
        prev_feedback = await self._feedback_between(session, user_id, prev_start, prev_end)
        prev_average = _mean([f.confidence_rating for f in prev_feedback])

        wardrobe_items = await self.wardrobe.get_wardrobe_items(session, user_id)
        by_id = {str(item.id): item for item in wardrobe_items}

        ranked = rank_item_confidence((f.confidence_rating, f.item_ids) for f in feedback)
        limit = settings.METRICS_RANKED_ITEMS
        most = [by_id[c.item_id] for c in most_confident(ranked, limit) if c.item_id in by_id]
        least = [by_id[c.item_id] for c in least_confident(ranked, limit) if c.item_id in by_id]

        used = {c.item_id for c in ranked} & set(by_id)
        utilization = len(used) / len(by_id) * 100 if by_id else 0.0

        cpw_improvement = await self._cost_per_wear_improvement(session, user_id, wardrobe_items, start, end)

        current_purchases = await purchases_in_month(session, user_id, year, month)
        previous_purchases = await purchases_in_month(session, user_id, prev_year, prev_month)

        metrics = MonthlyConfidenceMetrics(
            user_id=user_id,
            month=label,
            year=year,
            total_outfits_rated=len(feedback),
            average_confidence_rating=round(average, precision),
            confidence_improvement=round(average - prev_average, precision),
            most_confident_items=most,
            least_confident_items=least,
            wardrobe_utilization=round(utilization, precision),
            cost_per_wear_improvement=round(cpw_improvement, precision),
            shopping_reduction_percentage=round(
                monthly_shopping_reduction(len(previous_purchases), len(current_purchases)), precision
            ),
        )
        logger.info(
            "monthly metrics user=%s month=%s rated=%d avg=%.2f",
            user_id, label, metrics.total_outfits_rated, metrics.average_confidence_rating,
        )
        if persist:
            await self._persist(session, metrics)
        return metrics

    async def _feedback_between(
        self, session: AsyncSession, user_id: str, start: datetime, end: datetime
    ) -> List[OutfitFeedback]:
        res = await session.execute(
            select(OutfitFeedback)
            .where(
                OutfitFeedback.user_id == user_id,
                OutfitFeedback.created_at >= start,
                OutfitFeedback.created_at < end,
            )
            .order_by(OutfitFeedback.created_at.asc())
        )
        return list(res.scalars().all())

    async def _wear_counts(self, session: AsyncSession, user_id: str, before: datetime) -> Dict[str, int]:
        res = await session.execute(
            select(ItemWearLog.item_id, func.count())
            .where(ItemWearLog.user_id == user_id, ItemWearLog.worn_date < before.date())
            .group_by(ItemWearLog.item_id)
        )
        return {str(item_id): int(count) for item_id, count in res.all()}

    async def _average_cost_per_wear(
        self, session: AsyncSession, user_id: str, items: Sequence[Any], cutoff: datetime
    ) -> float:
        counts = await self._wear_counts(session, user_id, cutoff)
        values = [
            cost_per_wear(float(item.purchase_price), counts.get(str(item.id), 0))
            for item in items
            if item.purchase_price is not None
            and (item.purchase_date is None or item.purchase_date < cutoff.date())
        ]
        return _mean(values)

    async def _cost_per_wear_improvement(
        self, session: AsyncSession, user_id: str, items: Sequence[Any], start: datetime, end: datetime
    ) -> float:
        """Percentage drop in average cost-per-wear over the month, floored at 0."""
        before = await self._average_cost_per_wear(session, user_id, items, start)
        after = await self._average_cost_per_wear(session, user_id, items, end)
        if before <= 0:
            return 0.0
        return max(0.0, (before - after) / before * 100)

    async def _persist(self, session: AsyncSession, metrics: MonthlyConfidenceMetrics) -> MonthlyConfidenceSnapshot:
        res = await session.execute(
            select(MonthlyConfidenceSnapshot).where(
                MonthlyConfidenceSnapshot.user_id == metrics.user_id,
                MonthlyConfidenceSnapshot.month == metrics.month,
                MonthlyConfidenceSnapshot.year == metrics.year,
            )
        )
        snapshot = res.scalar_one_or_none()
        if snapshot is None:
            snapshot = MonthlyConfidenceSnapshot(user_id=metrics.user_id, month=metrics.month, year=metrics.year)
            session.add(snapshot)
        snapshot.average_confidence_rating = metrics.average_confidence_rating
        snapshot.total_outfits_rated = metrics.total_outfits_rated
        snapshot.confidence_improvement = metrics.confidence_improvement
        snapshot.most_confident_item_ids = [str(i.id) for i in metrics.most_confident_items]
        snapshot.least_confident_item_ids = [str(i.id) for i in metrics.least_confident_items]
        snapshot.wardrobe_utilization = metrics.wardrobe_utilization
        snapshot.cost_per_wear_improvement = metrics.cost_per_wear_improvement
        snapshot.shopping_reduction_percentage = metrics.shopping_reduction_percentage
        await session.commit()
        return snapshot
