from .challenges import RediscoveryChallengeService, get_neglected_items
from .cost_per_wear import CostPerWearCalculator
from .metrics import MonthlyConfidenceEngine
from .recommendations import ShopYourClosetService
from .shopping import ShoppingBehaviorTracker

__all__ = [
    "CostPerWearCalculator",
    "MonthlyConfidenceEngine",
    "RediscoveryChallengeService",
    "ShopYourClosetService",
    "ShoppingBehaviorTracker",
    "get_neglected_items",
]
