from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from closet.schemas.items import Category, ItemOut, lower_category


class ShopYourClosetIn(BaseModel):
    description: str = Field(..., min_length=1, max_length=500)
    category: Category
    colors: List[str] = Field(default_factory=list)
    style: Optional[str] = None

    @field_validator("category", mode="before")
    @classmethod
    def normalize_category(cls, v):
        return lower_category(v)


class TargetItemOut(BaseModel):
    description: str
    category: str
    colors: List[str]
    style: Optional[str] = None


class ShopYourClosetOut(BaseModel):
    id: str
    target_item: TargetItemOut
    similar_owned_items: List[ItemOut]
    confidence_score: float = Field(..., ge=0, le=1)
    reasoning: List[str]
    message: Optional[str] = None
    created_at: datetime


class CostPerWearOut(BaseModel):
    item_id: str
    purchase_price: float
    total_wears: int
    days_since_purchase: int
    cost_per_wear: float
    projected_cost_per_wear: float


class RecommendationStatusIn(BaseModel):
    acted_upon: bool = False


class RecommendationStatusOut(BaseModel):
    id: str
    viewed_at: Optional[datetime] = None
    acted_upon: bool
