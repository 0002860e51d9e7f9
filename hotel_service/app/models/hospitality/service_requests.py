import uuid
from sqlalchemy import Column, DateTime, ForeignKey, Numeric, String, Text, func
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from shared.core.database import Base
from ...enum.hotel_enum import Priority, ServiceRequestStatus


class ServiceRequest(Base):
    __tablename__ = "service_requests"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    guest_id = Column(UUID(as_uuid=True), nullable=False, index=True)
    room_id = Column(UUID(as_uuid=True), ForeignKey("rooms.id"))
    reservation_id = Column(UUID(as_uuid=True), ForeignKey("reservations.id"))
    service_type = Column(String(24), nullable=False)
    description = Column(Text, nullable=False)
    status = Column(String(16), nullable=False,
                    default=ServiceRequestStatus.pending.value)
    priority = Column(String(16), nullable=False,
                      default=Priority.medium.value)
    scheduled_time = Column(DateTime(timezone=True))
    assigned_to = Column(UUID(as_uuid=True))
    cost = Column(Numeric(10, 2), default=0)
    notes = Column(Text)
    completed_at = Column(DateTime(timezone=True))
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True),
                        server_default=func.now(), onupdate=func.now())

    room = relationship("Room")
