from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy import String, Integer, Float, Boolean, ForeignKey, DateTime, Text, JSON, Uuid, UniqueConstraint, CheckConstraint
from sqlalchemy.sql import func
import uuid
from datetime import datetime, date
import sqlalchemy as sa

from closet.core.db import Base
from closet.core.timeutil import utcnow


class WardrobeItem(Base):
    __tablename__ = "wardrobe_items"
    id: Mapped[uuid.UUID] = mapped_column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id: Mapped[str] = mapped_column(String(64), index=True)
    category: Mapped[str] = mapped_column(String(32))
    subcategory: Mapped[str | None] = mapped_column(String(64), nullable=True)
    name: Mapped[str | None] = mapped_column(String(200), nullable=True)
    brand: Mapped[str | None] = mapped_column(String(200), nullable=True)
    colors: Mapped[list[str]] = mapped_column(JSON, default=list)
    tags: Mapped[list[str]] = mapped_column(JSON, default=list)
    purchase_price: Mapped[float | None] = mapped_column(Float, nullable=True)
    purchase_date: Mapped[date | None] = mapped_column(sa.Date(), nullable=True, index=True)
    last_worn: Mapped[date | None] = mapped_column(sa.Date(), nullable=True, index=True)
    usage_count: Mapped[int] = mapped_column(Integer, default=0)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, server_default=func.now(), onupdate=utcnow)


class OutfitFeedback(Base):
    __tablename__ = "outfit_feedback"
    __table_args__ = (CheckConstraint("confidence_rating BETWEEN 1 AND 5", name="ck_outfit_feedback_rating"),)
    id: Mapped[uuid.UUID] = mapped_column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id: Mapped[str] = mapped_column(String(64), index=True)
    outfit_recommendation_id: Mapped[uuid.UUID | None] = mapped_column(Uuid(as_uuid=True), nullable=True)
    confidence_rating: Mapped[int] = mapped_column(Integer)
    emotional_response: Mapped[dict | None] = mapped_column(JSON, nullable=True)
    occasion: Mapped[str | None] = mapped_column(Text, nullable=True)
    comfort_rating: Mapped[int | None] = mapped_column(Integer, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, server_default=func.now(), index=True)
    items: Mapped[list["OutfitFeedbackItem"]] = relationship(
        "OutfitFeedbackItem",
        back_populates="feedback",
        lazy="selectin",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    @property
    def item_ids(self) -> list[str]:
        return [str(link.item_id) for link in self.items]


class OutfitFeedbackItem(Base):
    __tablename__ = "outfit_feedback_item"
    feedback_id: Mapped[uuid.UUID] = mapped_column(Uuid(as_uuid=True), ForeignKey("outfit_feedback.id", ondelete="CASCADE"), primary_key=True)
    item_id: Mapped[uuid.UUID] = mapped_column(Uuid(as_uuid=True), ForeignKey("wardrobe_items.id", ondelete="CASCADE"), primary_key=True, index=True)
    feedback: Mapped["OutfitFeedback"] = relationship("OutfitFeedback", back_populates="items")


class ItemWearLog(Base):
    """One wear event. `source` is manual, feedback or challenge."""
    __tablename__ = "item_wear_log"
    id: Mapped[uuid.UUID] = mapped_column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id: Mapped[str] = mapped_column(String(64), index=True)
    item_id: Mapped[uuid.UUID] = mapped_column(Uuid(as_uuid=True), ForeignKey("wardrobe_items.id", ondelete="CASCADE"), index=True)
    worn_date: Mapped[date] = mapped_column(sa.Date(), index=True)
    source: Mapped[str] = mapped_column(String(16), default="manual")
    feedback_id: Mapped[uuid.UUID | None] = mapped_column(Uuid(as_uuid=True), ForeignKey("outfit_feedback.id", ondelete="SET NULL"), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, server_default=func.now())


class ShopYourClosetRecommendationLog(Base):
    __tablename__ = "shop_your_closet_recommendations"
    id: Mapped[uuid.UUID] = mapped_column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id: Mapped[str] = mapped_column(String(64), index=True)
    target_item: Mapped[dict] = mapped_column(JSON)
    similar_item_ids: Mapped[list[str]] = mapped_column(JSON, default=list)
    confidence_score: Mapped[float] = mapped_column(Float)
    reasoning: Mapped[list[str]] = mapped_column(JSON, default=list)
    viewed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    acted_upon: Mapped[bool] = mapped_column(Boolean, default=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, server_default=func.now())


class RediscoveryChallenge(Base):
    __tablename__ = "rediscovery_challenges"
    id: Mapped[uuid.UUID] = mapped_column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id: Mapped[str] = mapped_column(String(64), index=True)
    challenge_type: Mapped[str] = mapped_column(String(32))
    title: Mapped[str] = mapped_column(Text)
    description: Mapped[str] = mapped_column(Text)
    reward: Mapped[str] = mapped_column(Text)
    target_item_ids: Mapped[list[str]] = mapped_column(JSON)
    confirmed_item_ids: Mapped[list[str]] = mapped_column(JSON, default=list)
    progress: Mapped[int] = mapped_column(Integer, default=0)
    total_items: Mapped[int] = mapped_column(Integer)
    expires_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), index=True)
    completed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, server_default=func.now())


class MonthlyConfidenceSnapshot(Base):
    __tablename__ = "monthly_confidence_metrics"
    __table_args__ = (UniqueConstraint("user_id", "month", "year", name="uq_monthly_confidence_user_month"),)
    id: Mapped[uuid.UUID] = mapped_column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id: Mapped[str] = mapped_column(String(64), index=True)
    month: Mapped[str] = mapped_column(String(7))
    year: Mapped[int] = mapped_column(Integer)
    average_confidence_rating: Mapped[float] = mapped_column(Float)
    total_outfits_rated: Mapped[int] = mapped_column(Integer)
    confidence_improvement: Mapped[float] = mapped_column(Float, default=0.0)
    most_confident_item_ids: Mapped[list[str]] = mapped_column(JSON, default=list)
    least_confident_item_ids: Mapped[list[str]] = mapped_column(JSON, default=list)
    wardrobe_utilization: Mapped[float] = mapped_column(Float, default=0.0)
    cost_per_wear_improvement: Mapped[float] = mapped_column(Float, default=0.0)
    shopping_reduction_percentage: Mapped[float] = mapped_column(Float, default=0.0)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, server_default=func.now())
