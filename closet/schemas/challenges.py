from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, Field

from closet.schemas.items import ItemOut


class ChallengeOut(BaseModel):
    id: str
    challenge_type: Literal["neglected_items", "color_exploration", "style_mixing"]
    title: str
    description: str
    reward: str
    target_items: List[ItemOut]
    confirmed_item_ids: List[str]
    progress: int = Field(..., ge=0)
    total_items: int
    status: Literal["active", "completed", "expired"]
    days_remaining: int
    expires_at: datetime
    completed_at: Optional[datetime] = None
    created_at: datetime


class ChallengeCreateOut(BaseModel):
    """`challenge` is null when nothing in the wardrobe is neglected."""
    challenge: Optional[ChallengeOut] = None
    message: Optional[str] = None
