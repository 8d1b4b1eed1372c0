from datetime import datetime
from typing import Any, Dict, List, Optional
from uuid import UUID

from pydantic import BaseModel, Field


class FeedbackCreate(BaseModel):
    confidence_rating: int = Field(..., ge=1, le=5)
    item_ids: List[UUID] = Field(default_factory=list)
    outfit_recommendation_id: Optional[UUID] = None
    emotional_response: Optional[Dict[str, Any]] = None
    occasion: Optional[str] = None
    comfort_rating: Optional[int] = Field(default=None, ge=1, le=5)


class FeedbackOut(BaseModel):
    id: str
    confidence_rating: int
    item_ids: List[str]
    outfit_recommendation_id: Optional[str] = None
    emotional_response: Optional[Dict[str, Any]] = None
    occasion: Optional[str] = None
    comfort_rating: Optional[int] = None
    created_at: datetime
