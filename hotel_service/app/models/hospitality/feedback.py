import uuid
from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text, func
from sqlalchemy.dialects.postgresql import UUID
from shared.core.database import Base
from ...enum.hotel_enum import FeedbackCategory, FeedbackStatus


class Feedback(Base):
    __tablename__ = "feedback"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    guest_id = Column(UUID(as_uuid=True), nullable=False, index=True)
    reservation_id = Column(UUID(as_uuid=True), ForeignKey("reservations.id"))
    rating = Column(Integer, nullable=False)
    category = Column(String(16), nullable=False,
                      default=FeedbackCategory.overall.value)
    comment = Column(Text)
    status = Column(String(16), nullable=False,
                    default=FeedbackStatus.pending.value)
    response = Column(Text)
    responded_by = Column(UUID(as_uuid=True))
    responded_at = Column(DateTime(timezone=True))
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True),
                        server_default=func.now(), onupdate=func.now())
