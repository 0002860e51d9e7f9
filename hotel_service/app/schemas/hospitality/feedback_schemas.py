from datetime import datetime
from uuid import UUID
from typing import Dict, List, Optional
from pydantic import BaseModel, Field
from shared.core.schemas import CommonQueryParams
from ...enum.hotel_enum import FeedbackCategory, FeedbackStatus


class FeedbackCreate(BaseModel):
    rating: int = Field(..., ge=1, le=5)
    category: FeedbackCategory = FeedbackCategory.overall.value
    comment: Optional[str] = None
    reservation_id: Optional[UUID] = None

    model_config = {"use_enum_values": True}


class FeedbackModerate(BaseModel):
    id: UUID
    status: Optional[FeedbackStatus] = None
    response: Optional[str] = None

    model_config = {"use_enum_values": True}


class FeedbackOut(BaseModel):
    id: UUID
    guest_id: UUID
    reservation_id: Optional[UUID] = None
    rating: int
    category: str
    comment: Optional[str] = None
    status: str
    response: Optional[str] = None
    responded_at: Optional[datetime] = None
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class FeedbackRequest(CommonQueryParams):
    status: Optional[FeedbackStatus] = None
    category: Optional[FeedbackCategory] = None
    rating: Optional[int] = Field(None, ge=1, le=5)

    model_config = {"use_enum_values": True}


class FeedbackListResponse(BaseModel):
    feedback: List[FeedbackOut]
    total: int


class FeedbackStats(BaseModel):
    totalFeedback: int
    averageRating: float
    categoryAverages: Dict[str, float]
    ratingDistribution: Dict[str, int]
