from datetime import datetime
from typing import Dict, Optional
from pydantic import BaseModel, Field


class TaxSettings(BaseModel):
    service_tax: float = Field(10, ge=0, le=100)
    gst: float = Field(5, ge=0, le=100)
    city_tax: float = Field(2, ge=0, le=100)


class Policies(BaseModel):
    check_in_time: Optional[str] = None
    check_out_time: Optional[str] = None
    cancellation_policy: Optional[str] = None


class HotelInfo(BaseModel):
    name: Optional[str] = None
    address: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None


class NotificationSettings(BaseModel):
    email_notifications: bool = True
    sms_notifications: bool = False
    notify_on_booking: bool = True
    notify_on_check_in: bool = True
    notify_on_check_out: bool = True
    notify_on_maintenance: bool = True


class SystemSettingsOut(BaseModel):
    room_rates: Dict[str, float]
    tax_settings: TaxSettings
    policies: Policies
    hotel_info: HotelInfo
    notification_settings: NotificationSettings
    updated_at: Optional[datetime] = None


# Only the fields a caller sends are written
class SystemSettingsUpdate(BaseModel):
    room_rates: Optional[Dict[str, float]] = None
    tax_settings: Optional[TaxSettings] = None
    policies: Optional[Policies] = None
    hotel_info: Optional[HotelInfo] = None
    notification_settings: Optional[NotificationSettings] = None


class TaxBreakdown(BaseModel):
    amount: float
    service_tax: float
    gst: float
    city_tax: float
    total_taxes: float
