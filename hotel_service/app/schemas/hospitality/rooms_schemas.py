from datetime import date, datetime
from uuid import UUID
from typing import Dict, List, Optional
from pydantic import BaseModel, Field, model_validator
from shared.core.schemas import CommonQueryParams
from ...enum.hotel_enum import RoomStatus, RoomType


# ----------------- Base -----------------
class RoomBase(BaseModel):
    room_number: str = Field(..., min_length=1, max_length=16)
    room_type: RoomType
    floor: int = Field(..., ge=0)
    price_per_night: float = Field(..., gt=0)
    max_occupancy: int = Field(..., ge=1)
    status: Optional[RoomStatus] = RoomStatus.available.value
    description: Optional[str] = None
    amenities: List[str] = []
    images: List[str] = []

    model_config = {"from_attributes": True, "use_enum_values": True}


# ----------------- Create -----------------
class RoomCreate(RoomBase):
    pass


# ----------------- Update -----------------
class RoomUpdate(BaseModel):
    id: UUID
    room_number: Optional[str] = Field(None, min_length=1, max_length=16)
    room_type: Optional[RoomType] = None
    floor: Optional[int] = Field(None, ge=0)
    price_per_night: Optional[float] = Field(None, gt=0)
    max_occupancy: Optional[int] = Field(None, ge=1)
    status: Optional[RoomStatus] = None
    description: Optional[str] = None
    amenities: Optional[List[str]] = None
    images: Optional[List[str]] = None

    model_config = {"use_enum_values": True}


class RoomStatusUpdate(BaseModel):
    status: RoomStatus

    model_config = {"use_enum_values": True}


# ----------------- Out -----------------
class RoomOut(RoomBase):
    id: UUID
    is_active: bool = True
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class RoomSummary(BaseModel):
    id: UUID
    room_number: str
    room_type: str
    floor: int
    price_per_night: float

    model_config = {"from_attributes": True}


# ----------------- Request -----------------
class RoomRequest(CommonQueryParams):
    status: Optional[RoomStatus] = None
    room_type: Optional[RoomType] = None
    floor: Optional[int] = None
    min_price: Optional[float] = None
    max_price: Optional[float] = None

    model_config = {"use_enum_values": True}


class AvailabilityRequest(BaseModel):
    check_in: date
    check_out: date
    room_type: Optional[RoomType] = None
    min_occupancy: Optional[int] = Field(None, ge=1)

    model_config = {"use_enum_values": True}


# ----------------- List Response -----------------
class RoomListResponse(BaseModel):
    rooms: List[RoomOut]
    total: int

    model_config = {"from_attributes": True}


class AvailabilityResponse(BaseModel):
    check_in: date
    check_out: date
    nights: int
    rooms: List[RoomOut]


# ------------ overview ------------------
class RoomOverview(BaseModel):
    totalRooms: int
    byStatus: Dict[str, int]
