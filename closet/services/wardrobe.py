"""Wardrobe repository: CRUD over wardrobe items and wear logging."""

from __future__ import annotations

import logging
import uuid
from datetime import date
from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from closet.core.errors import ItemNotFound
from closet.core.tags import normalize_category, normalize_colors, normalize_many
from closet.core.timeutil import local_today
from closet.models.models import ItemWearLog, WardrobeItem

logger = logging.getLogger(__name__)


class WardrobeRepository:
    """Facade over the `wardrobe_items` table.

    Every read is scoped to the owning user. Items are listed newest first;
    callers that filter the list (the similarity scorer) rely on that order.
    """

    async def get_wardrobe_items(self, session: AsyncSession, user_id: str) -> list[WardrobeItem]:
        res = await session.execute(
            select(WardrobeItem)
            .where(WardrobeItem.user_id == user_id)
            .order_by(WardrobeItem.created_at.desc(), WardrobeItem.id)
        )
        return list(res.scalars().all())

    async def get_item(self, session: AsyncSession, user_id: str, item_id: uuid.UUID) -> WardrobeItem:
        item = await session.get(WardrobeItem, item_id)
        if not item or item.user_id != user_id:
            raise ItemNotFound()
        return item

    async def create_item(self, session: AsyncSession, user_id: str, data: dict[str, Any]) -> WardrobeItem:
        item = WardrobeItem(
            user_id=user_id,
            category=normalize_category(data["category"]),
            subcategory=data.get("subcategory"),
            name=data.get("name"),
            brand=data.get("brand"),
            colors=normalize_colors(data.get("colors") or []),
            tags=normalize_many(data.get("tags") or []),
            purchase_price=data.get("purchase_price"),
            purchase_date=data.get("purchase_date"),
            last_worn=data.get("last_worn"),
            usage_count=data.get("usage_count") or 0,
            notes=data.get("notes"),
        )
        session.add(item)
        if item.last_worn is not None:
            # a last-worn date implies at least one wear event
            item.usage_count = max(item.usage_count, 1)
            await session.flush()
            session.add(ItemWearLog(user_id=user_id, item_id=item.id, worn_date=item.last_worn, source="manual"))
        await session.commit()
        await session.refresh(item)
        return item

    async def update_item(
        self, session: AsyncSession, user_id: str, item_id: uuid.UUID, data: dict[str, Any]
    ) -> WardrobeItem:
        item = await self.get_item(session, user_id, item_id)
        for key, value in data.items():
            if key == "category":
                value = normalize_category(value)
            elif key == "colors":
                value = normalize_colors(value or [])
            elif key == "tags":
                value = normalize_many(value or [])
            setattr(item, key, value)
        await session.commit()
        await session.refresh(item)
        return item

    async def delete_item(self, session: AsyncSession, user_id: str, item_id: uuid.UUID) -> None:
        item = await self.get_item(session, user_id, item_id)
        await session.delete(item)
        await session.commit()

    async def log_wear(
        self,
        session: AsyncSession,
        user_id: str,
        item_id: uuid.UUID,
        worn_on: date | None = None,
        *,
        source: str = "manual",
        feedback_id: uuid.UUID | None = None,
        commit: bool = True,
    ) -> WardrobeItem:
        """Record one wear event: bump usage_count, move last_worn forward (never back).

        The event row is what cost-per-wear counts, so every wear path goes
        through here.
        """
        item = await self.get_item(session, user_id, item_id)
        worn_on = worn_on or local_today()
        session.add(
            ItemWearLog(user_id=user_id, item_id=item.id, worn_date=worn_on, source=source, feedback_id=feedback_id)
        )
        item.usage_count = (item.usage_count or 0) + 1
        if item.last_worn is None or worn_on > item.last_worn:
            item.last_worn = worn_on
        logger.info("wear logged item=%s source=%s usage_count=%s", item_id, source, item.usage_count)
        if commit:
            await session.commit()
            await session.refresh(item)
        return item
