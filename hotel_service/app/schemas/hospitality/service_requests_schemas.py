from datetime import datetime
from uuid import UUID
from typing import Dict, List, Optional
from pydantic import BaseModel, Field
from shared.core.schemas import CommonQueryParams
from ...enum.hotel_enum import Priority, ServiceRequestStatus, ServiceRequestType


class ServiceRequestCreate(BaseModel):
    service_type: ServiceRequestType
    description: str = Field(..., min_length=1)
    priority: Priority = Priority.medium.value
    scheduled_time: Optional[datetime] = None
    room_id: Optional[UUID] = None
    reservation_id: Optional[UUID] = None

    model_config = {"use_enum_values": True}


class ServiceRequestUpdate(BaseModel):
    id: UUID
    status: Optional[ServiceRequestStatus] = None
    priority: Optional[Priority] = None
    notes: Optional[str] = None
    assigned_to: Optional[UUID] = None
    cost: Optional[float] = Field(None, ge=0)

    model_config = {"use_enum_values": True}


class ServiceRequestOut(BaseModel):
    id: UUID
    guest_id: UUID
    room_id: Optional[UUID] = None
    reservation_id: Optional[UUID] = None
    service_type: str
    description: str
    status: str
    priority: str
    scheduled_time: Optional[datetime] = None
    assigned_to: Optional[UUID] = None
    cost: Optional[float] = None
    notes: Optional[str] = None
    completed_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class ServiceRequestRequest(CommonQueryParams):
    status: Optional[ServiceRequestStatus] = None
    service_type: Optional[ServiceRequestType] = None
    priority: Optional[Priority] = None

    model_config = {"use_enum_values": True}


class ServiceRequestListResponse(BaseModel):
    requests: List[ServiceRequestOut]
    total: int


class ServiceRequestOverview(BaseModel):
    total: int
    byStatus: Dict[str, int]
