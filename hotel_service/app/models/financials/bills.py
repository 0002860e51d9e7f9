import uuid
from sqlalchemy import Column, DateTime, ForeignKey, Integer, Numeric, String, Text, UniqueConstraint, func
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from shared.core.database import Base
from ...enum.hotel_enum import PaymentStatus


class Bill(Base):
    __tablename__ = "bills"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    invoice_number = Column(String(40), nullable=False, index=True)
    reservation_id = Column(UUID(as_uuid=True), ForeignKey(
        "reservations.id"), nullable=False, unique=True)
    guest_id = Column(UUID(as_uuid=True), nullable=False, index=True)
    room_charges = Column(Numeric(12, 2), nullable=False, default=0)
    taxes = Column(Numeric(12, 2), nullable=False, default=0)
    discount = Column(Numeric(12, 2), nullable=False, default=0)
    total_amount = Column(Numeric(12, 2), nullable=False, default=0)
    payment_status = Column(String(16), nullable=False,
                            default=PaymentStatus.pending.value)
    payment_method = Column(String(16))
    paid_at = Column(DateTime(timezone=True))
    notes = Column(Text)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True),
                        server_default=func.now(), onupdate=func.now())

    reservation = relationship("Reservation", back_populates="bill")
    services = relationship(
        "BillService",
        back_populates="bill",
        cascade="all, delete-orphan",
        order_by="BillService.position",
    )

    __table_args__ = (
        UniqueConstraint("invoice_number", name="uq_bills_invoice_number"),
    )


class BillService(Base):
    __tablename__ = "bill_services"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    bill_id = Column(UUID(as_uuid=True), ForeignKey(
        "bills.id", ondelete="CASCADE"), nullable=False)
    position = Column(Integer, nullable=False, default=0)
    name = Column(String(200), nullable=False)
    service_type = Column(String(24), nullable=False, default="other")
    quantity = Column(Integer, nullable=False, default=1)
    unit_price = Column(Numeric(12, 2), nullable=False)
    line_total = Column(Numeric(12, 2), nullable=False)
    added_at = Column(DateTime(timezone=True), server_default=func.now())

    bill = relationship("Bill", back_populates="services")
