import logging
from datetime import datetime, timezone
from decimal import Decimal
from typing import Iterable, List, Optional
from uuid import UUID

from fastapi import BackgroundTasks
from sqlalchemy import func, or_
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from shared.core.exceptions import AuthorizationError, ConflictError, NotFoundError, ValidationError
from shared.core.schemas import UserToken
from shared.helpers.code_generator import MAX_CODE_ATTEMPTS, generate_code, generate_unique_code
from ...enum.hotel_enum import PaymentStatus
from ...models.financials.bills import Bill, BillService
from ...models.hospitality.reservations import Reservation
from ...schemas.financials.bills_schemas import (
    BillCreate, BillListResponse, BillOut, BillRequest, BillServiceIn, BillUpdate, PaymentUpdate
)
from ..system.dispatcher import Dispatcher, NotificationPreferences

logger = logging.getLogger(__name__)

INVOICE_PREFIX = "INV"
INVOICE_TIME_DIGITS = 10
INVOICE_RANDOM_CHARS = 4

ZERO = Decimal("0")
CENTS = Decimal("0.01")


def to_decimal(value) -> Decimal:
    if value is None:
        return ZERO
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def calculate_line_total(quantity: Optional[int], unit_price) -> Decimal:
    return (Decimal(quantity or 1) * to_decimal(unit_price)).quantize(CENTS)


def calculate_bill_total(room_charges, line_totals: Iterable, taxes, discount) -> Decimal:
    subtotal = to_decimal(room_charges) + sum((to_decimal(t) for t in line_totals), ZERO)
    total = (subtotal + to_decimal(taxes) - to_decimal(discount)).quantize(CENTS)
    if total < ZERO:
        raise ValidationError("Discount cannot exceed the bill amount")
    return total


def recalculate_bill(bill: Bill) -> Decimal:
    """Total from the stored lines, taxes and discount. Room charges never change."""
    bill.total_amount = calculate_bill_total(
        bill.room_charges,
        [line.line_total for line in bill.services],
        bill.taxes,
        bill.discount,
    )
    return bill.total_amount


def _build_lines(services: List[BillServiceIn], start: int = 0) -> List[BillService]:
    return [
        BillService(
            position=start + index,
            name=line.name,
            service_type=line.service_type,
            quantity=line.quantity or 1,
            unit_price=to_decimal(line.unit_price),
            line_total=calculate_line_total(line.quantity, line.unit_price),
        )
        for index, line in enumerate(services)
    ]


def invoice_number_exists(db: Session, invoice_number: str) -> bool:
    return db.query(Bill.id).filter(Bill.invoice_number == invoice_number).first() is not None


def generate_invoice_number(db: Optional[Session] = None) -> str:
    """Without a session the number is not checked against stored bills."""
    if db is None:
        return generate_code(INVOICE_PREFIX, INVOICE_TIME_DIGITS, INVOICE_RANDOM_CHARS)
    return generate_unique_code(
        INVOICE_PREFIX,
        lambda code: invoice_number_exists(db, code),
        INVOICE_TIME_DIGITS,
        INVOICE_RANDOM_CHARS,
    )


def get_bill_by_id(db: Session, bill_id: UUID) -> Bill:
    bill = db.query(Bill).filter(Bill.id == bill_id).first()
    if not bill:
        raise NotFoundError("Bill not found")
    return bill


def _check_access(bill: Bill, current_user: UserToken):
    if current_user.is_guest and bill.guest_id != UUID(current_user.user_id):
        raise AuthorizationError("Not authorized to view this bill")


# ----------------- Auto generation -----------------
def generate_bill_for_reservation(db: Session, reservation: Reservation) -> Optional[Bill]:
    """
    Pending bill carrying the reservation total as room charges.

    Runs after the reservation is committed. One invoice number attempt; any
    database failure is logged and leaves the reservation untouched.
    """
    bill = Bill(
        invoice_number=generate_invoice_number(),
        reservation_id=reservation.id,
        guest_id=reservation.guest_id,
        room_charges=reservation.total_amount,
        taxes=ZERO,
        discount=ZERO,
        total_amount=reservation.total_amount,
        payment_status=PaymentStatus.pending.value,
    )
    db.add(bill)
    try:
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Auto bill for reservation %s failed",
                         reservation.confirmation_number)
        return None
    db.refresh(bill)
    return bill


# ----------------- Create Bill -----------------
def create_bill(db: Session, bill: BillCreate) -> BillOut:
    reservation = db.query(Reservation).filter(
        Reservation.id == bill.reservation_id).first()
    if not reservation:
        raise NotFoundError("Reservation not found")

    room_charges = to_decimal(
        bill.room_charges if bill.room_charges is not None else reservation.total_amount)

    for attempt in range(1, MAX_CODE_ATTEMPTS + 1):
        if db.query(Bill.id).filter(Bill.reservation_id == reservation.id).first():
            raise ConflictError("Bill already exists for this reservation")

        db_bill = Bill(
            invoice_number=generate_invoice_number(db),
            reservation_id=reservation.id,
            guest_id=reservation.guest_id,
            room_charges=room_charges,
            taxes=to_decimal(bill.taxes),
            discount=to_decimal(bill.discount),
            notes=bill.notes,
            payment_status=PaymentStatus.pending.value,
        )
        db_bill.services = _build_lines(bill.services)
        recalculate_bill(db_bill)
        db.add(db_bill)
        try:
            db.commit()
        except IntegrityError:
            db.rollback()
            logger.warning("Invoice number collision, attempt %s", attempt)
            continue

        db.refresh(db_bill)
        logger.info("Bill %s created for reservation %s",
                    db_bill.invoice_number, reservation.confirmation_number)
        return BillOut.model_validate(db_bill)

    raise ConflictError("Could not allocate a unique invoice number")


# ----------------- Update Bill -----------------
def update_bill(db: Session, bill_update: BillUpdate) -> BillOut:
    bill = get_bill_by_id(db, bill_update.id)
    update_data = bill_update.model_dump(exclude_unset=True, exclude={"id", "services"})

    if bill_update.services is not None:
        bill.services = _build_lines(bill_update.services)
    for key, value in update_data.items():
        setattr(bill, key, to_decimal(value) if key in ("taxes", "discount") else value)

    recalculate_bill(bill)
    db.commit()
    db.refresh(bill)
    return BillOut.model_validate(bill)


def add_service(db: Session, bill_id: UUID, line: BillServiceIn) -> BillOut:
    bill = get_bill_by_id(db, bill_id)
    bill.services.extend(_build_lines([line], start=len(bill.services)))
    recalculate_bill(bill)
    db.commit()
    db.refresh(bill)
    return BillOut.model_validate(bill)


def update_payment(db: Session, bill_id: UUID, payment: PaymentUpdate) -> BillOut:
    bill = get_bill_by_id(db, bill_id)
    bill.payment_status = payment.payment_status
    if payment.payment_method:
        bill.payment_method = payment.payment_method
    if payment.payment_status == PaymentStatus.paid.value:
        bill.paid_at = datetime.now(timezone.utc)

    db.commit()
    db.refresh(bill)
    logger.info("Bill %s payment status %s", bill.invoice_number, bill.payment_status)
    return BillOut.model_validate(bill)


# ----------------- Read -----------------
def get_bills(db: Session, current_user: UserToken, params: BillRequest) -> BillListResponse:
    filters = []
    if current_user.is_guest:
        filters.append(Bill.guest_id == UUID(current_user.user_id))
    if params.payment_status:
        filters.append(Bill.payment_status == params.payment_status)
    if params.search:
        search_term = f"%{params.search}%"
        filters.append(or_(Bill.invoice_number.ilike(search_term),
                           Bill.notes.ilike(search_term)))

    base_query = db.query(Bill).filter(*filters)
    total = base_query.with_entities(func.count(Bill.id)).scalar()

    query = base_query.order_by(Bill.created_at.desc()).offset(params.skip)
    if params.limit:
        query = query.limit(params.limit)

    return BillListResponse(
        bills=[BillOut.model_validate(bill) for bill in query.all()],
        total=total,
    )


def get_bill(db: Session, current_user: UserToken, bill_id: UUID) -> BillOut:
    bill = get_bill_by_id(db, bill_id)
    _check_access(bill, current_user)
    return BillOut.model_validate(bill)


def get_bill_by_reservation(db: Session, current_user: UserToken, reservation_id: UUID) -> BillOut:
    bill = db.query(Bill).filter(Bill.reservation_id == reservation_id).first()
    if not bill:
        raise NotFoundError("Bill not found for this reservation")
    _check_access(bill, current_user)
    return BillOut.model_validate(bill)


def send_invoice(
        background_tasks: BackgroundTasks,
        db: Session,
        bill_id: UUID,
        preferences: NotificationPreferences) -> dict:
    bill = get_bill_by_id(db, bill_id)
    Dispatcher(background_tasks, preferences).invoice_ready(bill, bill.reservation)
    return {"id": str(bill.id), "invoice_number": bill.invoice_number, "queued": True}
