import uuid
from sqlalchemy import Boolean, Column, DateTime, String, func
from sqlalchemy.dialects.postgresql import UUID
from shared.core.database import Base
from ...enum.hotel_enum import Priority


class Notification(Base):
    __tablename__ = "notifications"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(UUID(as_uuid=True), nullable=False, index=True)

    type = Column(String(24), nullable=False)
    title = Column(String(255), nullable=False)
    message = Column(String(500), nullable=False)
    priority = Column(String(16), default=Priority.medium.value)
    related_entity = Column(String(32))
    related_id = Column(UUID(as_uuid=True))
    read = Column(Boolean, nullable=False, default=False)
    read_at = Column(DateTime(timezone=True))
    is_deleted = Column(Boolean, nullable=False, default=False)
    posted_date = Column(DateTime(timezone=True), server_default=func.now())
