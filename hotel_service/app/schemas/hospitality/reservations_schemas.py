from datetime import date, datetime
from uuid import UUID
from typing import List, Optional
from pydantic import BaseModel, Field
from shared.core.schemas import CommonQueryParams
from ...enum.hotel_enum import BookingSource, ReservationStatus
from .rooms_schemas import RoomSummary


class GuestSummary(BaseModel):
    id: UUID
    first_name: str
    last_name: str
    email: str
    phone: Optional[str] = None

    model_config = {"from_attributes": True}


# ----------------- Create -----------------
class ReservationCreate(BaseModel):
    room_id: UUID
    check_in: date
    check_out: date
    number_of_guests: int = Field(1, ge=1)
    booking_source: BookingSource = BookingSource.online.value
    special_requests: Optional[str] = None
    # Staff may book on behalf of a guest
    guest_id: Optional[UUID] = None

    model_config = {"use_enum_values": True}


# ----------------- Update -----------------
class ReservationUpdate(BaseModel):
    id: UUID
    status: Optional[ReservationStatus] = None
    special_requests: Optional[str] = None

    model_config = {"use_enum_values": True}


# ----------------- Out -----------------
class ReservationOut(BaseModel):
    id: UUID
    confirmation_number: str
    guest_id: UUID
    room_id: UUID
    check_in: date
    check_out: date
    number_of_guests: int
    status: str
    total_amount: float
    booking_source: str
    special_requests: Optional[str] = None
    created_by: Optional[UUID] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    room: Optional[RoomSummary] = None
    guest: Optional[GuestSummary] = None

    model_config = {"from_attributes": True}


# ----------------- Request -----------------
class ReservationRequest(CommonQueryParams):
    status: Optional[ReservationStatus] = None
    room_id: Optional[UUID] = None
    check_in_from: Optional[date] = None
    check_in_to: Optional[date] = None

    model_config = {"use_enum_values": True}


# ----------------- List Response -----------------
class ReservationListResponse(BaseModel):
    reservations: List[ReservationOut]
    total: int
