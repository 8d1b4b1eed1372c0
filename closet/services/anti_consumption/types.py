from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, List, Optional


@dataclass(frozen=True)
class TargetItem:
    """The garment the user is thinking about buying."""
    description: str
    category: str
    colors: List[str] = field(default_factory=list)
    style: Optional[str] = None

    def as_dict(self) -> dict:
        return {
            "description": self.description,
            "category": self.category,
            "colors": list(self.colors),
            "style": self.style,
        }


@dataclass
class ShopYourClosetRecommendation:
    id: str
    user_id: str
    target_item: TargetItem
    similar_owned_items: List[Any]  # WardrobeItem models, wardrobe order
    confidence_score: float  # 0-1
    reasoning: List[str]
    created_at: datetime


@dataclass(frozen=True)
class CostPerWearRecord:
    item_id: str
    purchase_price: float
    total_wears: int
    days_since_purchase: int
    cost_per_wear: float
    projected_cost_per_wear: float


@dataclass(frozen=True)
class ChallengeTemplate:
    title: str
    description: str
    reward: str


@dataclass
class MonthlyConfidenceMetrics:
    user_id: str
    month: str  # YYYY-MM
    year: int
    total_outfits_rated: int = 0
    average_confidence_rating: float = 0.0
    confidence_improvement: float = 0.0
    most_confident_items: List[Any] = field(default_factory=list)
    least_confident_items: List[Any] = field(default_factory=list)
    wardrobe_utilization: float = 0.0
    cost_per_wear_improvement: float = 0.0
    shopping_reduction_percentage: float = 0.0


@dataclass
class ShoppingBehaviorData:
    user_id: str
    monthly_purchases: int
    monthly_spend: float
    previous_month_purchases: int
    previous_month_spend: float
    reduction_percentage: float
    streak_days: int
    total_savings: float
    last_purchase_date: Optional[date] = None
