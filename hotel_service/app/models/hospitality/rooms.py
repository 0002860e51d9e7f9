import uuid
from sqlalchemy import JSON, Boolean, Column, DateTime, Integer, Numeric, String, Text, func
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from shared.core.database import Base
from ...enum.hotel_enum import RoomStatus


class Room(Base):
    __tablename__ = "rooms"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    room_number = Column(String(16), unique=True, nullable=False, index=True)
    room_type = Column(String(24), nullable=False)
    floor = Column(Integer, nullable=False)
    price_per_night = Column(Numeric(10, 2), nullable=False)
    max_occupancy = Column(Integer, nullable=False)
    status = Column(String(16), nullable=False,
                    default=RoomStatus.available.value)
    description = Column(Text)
    amenities = Column(JSON, default=list)
    images = Column(JSON, default=list)
    is_active = Column(Boolean, nullable=False, default=True)
    # Bumped by every booking state change; compare-and-swap guard
    booking_version = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True),
                        server_default=func.now(), onupdate=func.now())

    reservations = relationship("Reservation", back_populates="room")
