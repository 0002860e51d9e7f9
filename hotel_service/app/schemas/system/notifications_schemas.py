from datetime import datetime
from uuid import UUID
from typing import List, Optional
from pydantic import BaseModel, Field


class NotificationOut(BaseModel):
    id: UUID
    type: str
    title: str
    message: str
    priority: Optional[str] = None
    related_entity: Optional[str] = None
    related_id: Optional[UUID] = None
    read: bool
    read_at: Optional[datetime] = None
    posted_date: Optional[datetime] = None

    model_config = {"from_attributes": True}


class NotificationRequest(BaseModel):
    unread_only: bool = False
    limit: int = Field(50, ge=1, le=200)


class NotificationListResponse(BaseModel):
    notifications: List[NotificationOut]
    unread_count: int
