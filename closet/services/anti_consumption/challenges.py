import logging
import uuid
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Any, Dict, List, Optional

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from closet.core.config import settings
from closet.core.errors import ChallengeNotFound, InvalidChallengeItem, ItemNotFound
from closet.core.timeutil import as_utc, local_today, utcnow
from closet.events.providers import EventSink
from closet.events.types import AnalyticsEvent, CHALLENGE_COMPLETED, CHALLENGE_CREATED
from closet.models.models import RediscoveryChallenge, WardrobeItem
from closet.services.wardrobe import WardrobeRepository
from .types import ChallengeTemplate

logger = logging.getLogger(__name__)

NEGLECTED_ITEMS = "neglected_items"
COLOR_EXPLORATION = "color_exploration"
STYLE_MIXING = "style_mixing"

CHALLENGE_TEMPLATES: Dict[str, ChallengeTemplate] = {
    NEGLECTED_ITEMS: ChallengeTemplate(
        title="Rediscover Your Hidden Gems",
        description="Wear {count} items that have been waiting patiently in your closet",
        reward="Unlock a special confidence boost for creative styling!",
    ),
    COLOR_EXPLORATION: ChallengeTemplate(
        title="Color Adventure Challenge",
        description="Explore new color combinations with {count} of your neglected pieces",
        reward="Discover new favorite color pairings!",
    ),
    STYLE_MIXING: ChallengeTemplate(
        title="Style Fusion Challenge",
        description="Mix {count} pieces from different categories to create unique looks",
        reward="Master the art of versatile styling!",
    ),
}


@dataclass
class ChallengeView:
    challenge: RediscoveryChallenge
    target_items: List[Any]
    status: str


def challenge_status(challenge: RediscoveryChallenge, now: datetime) -> str:
    if challenge.completed_at is not None:
        return "completed"
    if as_utc(now) >= as_utc(challenge.expires_at):
        # informational only; progress can still be made
        return "expired"
    return "active"


def determine_challenge_type(items: List[Any]) -> str:
    categories = {item.category for item in items}
    colors = {c for item in items for c in (item.colors or [])}
    if len(categories) > 3:
        return STYLE_MIXING
    if len(colors) > 5:
        return COLOR_EXPLORATION
    return NEGLECTED_ITEMS


async def get_neglected_items(
    session: AsyncSession,
    user_id: str,
    *,
    days: Optional[int] = None,
    today: Optional[date] = None,
) -> List[WardrobeItem]:
    """Items never worn or not worn within `days`; never-worn first, then oldest wear."""
    days = days if days is not None else settings.NEGLECT_THRESHOLD_DAYS
    cutoff = (today or local_today()) - timedelta(days=days)
    res = await session.execute(
        select(WardrobeItem)
        .where(
            WardrobeItem.user_id == user_id,
            or_(WardrobeItem.last_worn.is_(None), WardrobeItem.last_worn < cutoff),
        )
        .order_by(WardrobeItem.last_worn.asc().nulls_first(), WardrobeItem.created_at.asc())
    )
    return list(res.scalars().all())


class RediscoveryChallengeService:
    def __init__(self, events: EventSink, wardrobe: Optional[WardrobeRepository] = None) -> None:
        self.events = events
        self.wardrobe = wardrobe or WardrobeRepository()

    async def create(
        self,
        session: AsyncSession,
        user_id: str,
        *,
        now: Optional[datetime] = None,
    ) -> Optional[ChallengeView]:
        """Start a challenge around neglected items, or None if nothing is neglected.

        A user has at most one active challenge; while it is running it is
        returned instead of creating another.
        """
        now = now or utcnow()
        neglected = await get_neglected_items(session, user_id, today=local_today(now))
        if not neglected:
            logger.info("rediscovery challenge: nothing neglected user=%s", user_id)
            return None

        active = await self.get_active(session, user_id, now=now)
        if active is not None:
            return active

        challenge_type = determine_challenge_type(neglected)
        template = CHALLENGE_TEMPLATES[challenge_type]
        targets = neglected[: settings.CHALLENGE_MAX_ITEMS]
        challenge = RediscoveryChallenge(
            user_id=user_id,
            challenge_type=challenge_type,
            title=template.title,
            description=template.description.format(count=len(targets)),
            reward=template.reward,
            target_item_ids=[str(item.id) for item in targets],
            confirmed_item_ids=[],
            progress=0,
            total_items=len(targets),
            expires_at=now + timedelta(days=settings.CHALLENGE_DURATION_DAYS),
            created_at=now,
        )
        session.add(challenge)
        await session.commit()
        await session.refresh(challenge)
        logger.info(
            "rediscovery challenge created id=%s type=%s items=%d", challenge.id, challenge_type, len(targets)
        )
        self.events.emit(
            AnalyticsEvent(
                kind=CHALLENGE_CREATED,
                user_id=user_id,
                payload={"challenge_id": str(challenge.id), "challenge_type": challenge_type, "total_items": len(targets)},
                occurred_at=now,
            )
        )
        return ChallengeView(challenge=challenge, target_items=targets, status=challenge_status(challenge, now))

    async def get_active(
        self,
        session: AsyncSession,
        user_id: str,
        *,
        now: Optional[datetime] = None,
    ) -> Optional[ChallengeView]:
        now = now or utcnow()
        res = await session.execute(
            select(RediscoveryChallenge)
            .where(
                RediscoveryChallenge.user_id == user_id,
                RediscoveryChallenge.completed_at.is_(None),
                RediscoveryChallenge.expires_at > now,
            )
            .order_by(RediscoveryChallenge.created_at.desc())
            .limit(1)
        )
        challenge = res.scalar_one_or_none()
        if challenge is None:
            return None
        return await self._view(session, challenge, now)

    async def list_challenges(
        self,
        session: AsyncSession,
        user_id: str,
        *,
        limit: int = 20,
        now: Optional[datetime] = None,
    ) -> List[ChallengeView]:
        now = now or utcnow()
        res = await session.execute(
            select(RediscoveryChallenge)
            .where(RediscoveryChallenge.user_id == user_id)
            .order_by(RediscoveryChallenge.created_at.desc())
            .limit(limit)
        )
        return [await self._view(session, c, now) for c in res.scalars().all()]

    async def get(
        self,
        session: AsyncSession,
        user_id: str,
        challenge_id: uuid.UUID,
        *,
        now: Optional[datetime] = None,
    ) -> ChallengeView:
        challenge = await session.get(RediscoveryChallenge, challenge_id)
        if challenge is None or challenge.user_id != user_id:
            raise ChallengeNotFound()
        return await self._view(session, challenge, now or utcnow())

    async def mark_item_worn(
        self,
        session: AsyncSession,
        user_id: str,
        challenge_id: uuid.UUID,
        item_id: uuid.UUID,
        *,
        now: Optional[datetime] = None,
    ) -> ChallengeView:
        """Confirm one target item as worn.

        Each target item counts once, so repeated taps cannot push progress
        past the number of distinct confirmed items. The row is locked for the
        update where the database supports it.
        """
        now = now or utcnow()
        res = await session.execute(
            select(RediscoveryChallenge)
            .where(RediscoveryChallenge.id == challenge_id, RediscoveryChallenge.user_id == user_id)
            .with_for_update()
        )
        challenge = res.scalar_one_or_none()
        if challenge is None:
            raise ChallengeNotFound()

        key = str(item_id)
        if key not in (challenge.target_item_ids or []):
            raise InvalidChallengeItem()
        confirmed = list(challenge.confirmed_item_ids or [])
        if challenge.completed_at is not None or key in confirmed:
            # nothing to change; commit just releases the row lock
            await session.commit()
            return await self._view(session, challenge, now)

        confirmed.append(key)
        challenge.confirmed_item_ids = confirmed
        challenge.progress = min(len(confirmed), challenge.total_items)
        try:
            await self.wardrobe.log_wear(
                session, user_id, item_id, local_today(now), source="challenge", commit=False
            )
        except ItemNotFound:
            logger.warning("challenge %s: target item %s no longer in wardrobe", challenge.id, key)

        completed = challenge.progress >= challenge.total_items
        if completed:
            challenge.completed_at = now
        await session.commit()
        await session.refresh(challenge)
        logger.info("challenge %s progress %d/%d", challenge.id, challenge.progress, challenge.total_items)

        if completed:
            self.events.emit(
                AnalyticsEvent(
                    kind=CHALLENGE_COMPLETED,
                    user_id=user_id,
                    payload={"challenge_id": str(challenge.id), "challenge_type": challenge.challenge_type},
                    occurred_at=now,
                )
            )
        return await self._view(session, challenge, now)

    async def _view(self, session: AsyncSession, challenge: RediscoveryChallenge, now: datetime) -> ChallengeView:
        ids = [uuid.UUID(i) for i in challenge.target_item_ids or []]
        items_by_id: Dict[str, WardrobeItem] = {}
        if ids:
            res = await session.execute(select(WardrobeItem).where(WardrobeItem.id.in_(ids)))
            items_by_id = {str(item.id): item for item in res.scalars().all()}
        targets = [items_by_id[i] for i in challenge.target_item_ids if i in items_by_id]
        return ChallengeView(challenge=challenge, target_items=targets, status=challenge_status(challenge, now))
