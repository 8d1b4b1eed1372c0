from datetime import date
from typing import List, Optional

from pydantic import BaseModel

from closet.schemas.items import ItemOut


class MonthlyMetricsOut(BaseModel):
    month: str
    year: int
    total_outfits_rated: int
    average_confidence_rating: float
    confidence_improvement: float
    most_confident_items: List[ItemOut]
    least_confident_items: List[ItemOut]
    wardrobe_utilization: float
    cost_per_wear_improvement: float
    shopping_reduction_percentage: float


class ShoppingBehaviorOut(BaseModel):
    monthly_purchases: int
    monthly_spend: float
    previous_month_purchases: int
    previous_month_spend: float
    reduction_percentage: float
    streak_days: int
    total_savings: float
    last_purchase_date: Optional[date] = None
