from sqlalchemy import JSON, Boolean, Column, DateTime, Integer, Numeric
from sqlalchemy.sql import func
from shared.core.database import Base

DEFAULT_ROOM_RATES = {
    "Single": 100,
    "Double": 150,
    "Suite": 300,
    "Deluxe": 250,
    "Presidential": 800,
}

DEFAULT_POLICIES = {
    "check_in_time": "14:00",
    "check_out_time": "11:00",
    "cancellation_policy": "Free cancellation up to 24 hours before check-in",
}

DEFAULT_HOTEL_INFO = {
    "name": "Luxury Hotel",
    "address": "",
    "phone": "",
    "email": "",
}


class SystemSetting(Base):
    """Hotel-wide settings. A single row, created on first read."""
    __tablename__ = "system_settings"

    id = Column(Integer, primary_key=True, default=1)

    # ---------- Rates & policies ----------
    room_rates = Column(JSON, nullable=False, default=lambda: dict(DEFAULT_ROOM_RATES))
    policies = Column(JSON, nullable=False, default=lambda: dict(DEFAULT_POLICIES))
    hotel_info = Column(JSON, nullable=False, default=lambda: dict(DEFAULT_HOTEL_INFO))

    # ---------- Taxes (percent) ----------
    service_tax = Column(Numeric(5, 2), nullable=False, default=10)
    gst = Column(Numeric(5, 2), nullable=False, default=5)
    city_tax = Column(Numeric(5, 2), nullable=False, default=2)

    # ---------- Notifications ----------
    email_notifications = Column(Boolean, nullable=False, default=True)
    sms_notifications = Column(Boolean, nullable=False, default=False)
    notify_on_booking = Column(Boolean, nullable=False, default=True)
    notify_on_check_in = Column(Boolean, nullable=False, default=True)
    notify_on_check_out = Column(Boolean, nullable=False, default=True)
    notify_on_maintenance = Column(Boolean, nullable=False, default=True)

    # ---------- Meta ----------
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
