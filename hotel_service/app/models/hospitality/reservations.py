import uuid
from sqlalchemy import Column, Date, DateTime, ForeignKey, Integer, Numeric, String, Text, func
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from shared.core.database import Base
from ...enum.hotel_enum import BookingSource, ReservationStatus


class Reservation(Base):
    __tablename__ = "reservations"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    confirmation_number = Column(
        String(40), unique=True, nullable=False, index=True)
    # Users live in the auth database, no FK
    guest_id = Column(UUID(as_uuid=True), nullable=False, index=True)
    room_id = Column(UUID(as_uuid=True), ForeignKey(
        "rooms.id"), nullable=False, index=True)
    check_in = Column(Date, nullable=False)
    check_out = Column(Date, nullable=False)
    number_of_guests = Column(Integer, nullable=False, default=1)
    status = Column(String(16), nullable=False,
                    default=ReservationStatus.confirmed.value)
    total_amount = Column(Numeric(12, 2), nullable=False)
    booking_source = Column(String(16), nullable=False,
                            default=BookingSource.online.value)
    special_requests = Column(Text)
    created_by = Column(UUID(as_uuid=True))
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True),
                        server_default=func.now(), onupdate=func.now())

    room = relationship("Room", back_populates="reservations")
    bill = relationship("Bill", back_populates="reservation", uselist=False)
