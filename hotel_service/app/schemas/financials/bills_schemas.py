from datetime import datetime
from uuid import UUID
from typing import List, Optional
from pydantic import BaseModel, Field
from shared.core.schemas import CommonQueryParams
from ...enum.hotel_enum import PaymentMethod, PaymentStatus, ServiceLineType


# ----------------- Service lines -----------------
class BillServiceIn(BaseModel):
    name: str = Field(..., min_length=1)
    service_type: ServiceLineType = ServiceLineType.other.value
    quantity: int = Field(1, ge=1)
    unit_price: float = Field(..., ge=0)

    model_config = {"use_enum_values": True}


class BillServiceOut(BaseModel):
    id: UUID
    name: str
    service_type: str
    quantity: int
    unit_price: float
    line_total: float
    added_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


# ----------------- Create -----------------
class BillCreate(BaseModel):
    reservation_id: UUID
    # Defaults to the reservation's total
    room_charges: Optional[float] = Field(None, ge=0)
    services: List[BillServiceIn] = []
    taxes: float = Field(0, ge=0)
    discount: float = Field(0, ge=0)
    notes: Optional[str] = None


# ----------------- Update -----------------
class BillUpdate(BaseModel):
    id: UUID
    services: Optional[List[BillServiceIn]] = None
    taxes: Optional[float] = Field(None, ge=0)
    discount: Optional[float] = Field(None, ge=0)
    notes: Optional[str] = None


class PaymentUpdate(BaseModel):
    payment_status: PaymentStatus
    payment_method: Optional[PaymentMethod] = None

    model_config = {"use_enum_values": True}


# ----------------- Out -----------------
class BillOut(BaseModel):
    id: UUID
    invoice_number: str
    reservation_id: UUID
    guest_id: UUID
    room_charges: float
    services: List[BillServiceOut] = []
    taxes: float
    discount: float
    total_amount: float
    payment_status: str
    payment_method: Optional[str] = None
    paid_at: Optional[datetime] = None
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


# ----------------- Request -----------------
class BillRequest(CommonQueryParams):
    payment_status: Optional[PaymentStatus] = None

    model_config = {"use_enum_values": True}


class BillListResponse(BaseModel):
    bills: List[BillOut]
    total: int
