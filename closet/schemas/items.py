from datetime import date, datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, Field, field_validator

Category = Literal["tops", "bottoms", "dresses", "shoes", "accessories", "outerwear", "activewear"]


def lower_category(v):
    if isinstance(v, str):
        return v.strip().lower()
    return v


class ItemCreate(BaseModel):
    category: Category
    subcategory: Optional[str] = None
    name: Optional[str] = None
    brand: Optional[str] = None
    colors: List[str] = Field(default_factory=list)
    tags: List[str] = Field(default_factory=list)
    purchase_price: Optional[float] = Field(default=None, ge=0)
    purchase_date: Optional[date] = None
    last_worn: Optional[date] = None
    usage_count: int = Field(default=0, ge=0)
    notes: Optional[str] = None

    @field_validator("category", mode="before")
    @classmethod
    def normalize_category(cls, v):
        return lower_category(v)


class ItemUpdate(BaseModel):
    category: Optional[Category] = None
    subcategory: Optional[str] = None
    name: Optional[str] = None
    brand: Optional[str] = None
    colors: Optional[List[str]] = None
    tags: Optional[List[str]] = None
    purchase_price: Optional[float] = Field(default=None, ge=0)
    purchase_date: Optional[date] = None
    notes: Optional[str] = None

    @field_validator("category", mode="before")
    @classmethod
    def normalize_category(cls, v):
        return lower_category(v)


class ItemOut(BaseModel):
    id: str
    category: str
    subcategory: Optional[str] = None
    name: Optional[str] = None
    brand: Optional[str] = None
    colors: List[str] = Field(default_factory=list)
    tags: List[str] = Field(default_factory=list)
    purchase_price: Optional[float] = None
    purchase_date: Optional[date] = None
    last_worn: Optional[date] = None
    usage_count: int = 0
    notes: Optional[str] = None
    created_at: Optional[datetime] = None


class ItemWearLogIn(BaseModel):
    worn_date: Optional[date] = None


def item_out(item) -> ItemOut:
    return ItemOut(
        id=str(item.id),
        category=item.category,
        subcategory=item.subcategory,
        name=item.name,
        brand=item.brand,
        colors=list(item.colors or []),
        tags=list(item.tags or []),
        purchase_price=item.purchase_price,
        purchase_date=item.purchase_date,
        last_worn=item.last_worn,
        usage_count=item.usage_count or 0,
        notes=item.notes,
        created_at=item.created_at,
    )
