import logging
from decimal import Decimal
from typing import Dict, Iterable, Optional
from uuid import UUID

from fastapi import BackgroundTasks
from sqlalchemy import Text, cast, func, or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from shared.core.exceptions import (
    AuthorizationError, InvalidTransitionError, NotFoundError, OccupancyExceeded, RoomUnavailable
)
from shared.core.schemas import UserToken
from shared.helpers.code_generator import generate_unique_code
from shared.models.users import Users
from ...enum.hotel_enum import BLOCKING_STATUSES, ReservationStatus, RoomStatus
from ...models.hospitality.reservations import Reservation
from ...models.hospitality.rooms import Room
from ...schemas.hospitality.reservations_schemas import (
    GuestSummary, ReservationCreate, ReservationListResponse, ReservationOut,
    ReservationRequest, ReservationUpdate
)
from ...schemas.hospitality.rooms_schemas import RoomSummary
from ..financials.bills_crud import generate_bill_for_reservation
from ..system.dispatcher import Dispatcher, NotificationPreferences
from .rooms_crud import calculate_nights, get_room_by_id, validate_date_range

logger = logging.getLogger(__name__)

MAX_BOOKING_ATTEMPTS = 5

CONFIRMATION_PREFIX = "LUX"
CONFIRMATION_TIME_DIGITS = 8
CONFIRMATION_RANDOM_CHARS = 4

# Room status that follows a reservation into each status
ROOM_STATUS_FOR = {
    ReservationStatus.confirmed.value: RoomStatus.reserved.value,
    ReservationStatus.checked_in.value: RoomStatus.occupied.value,
    ReservationStatus.checked_out.value: RoomStatus.cleaning.value,
}

CANCELLABLE_STATUSES = (
    ReservationStatus.pending.value,
    ReservationStatus.confirmed.value,
)


def calculate_total_amount(price_per_night, nights: int) -> Decimal:
    return Decimal(str(price_per_night)) * nights


def confirmation_number_exists(db: Session, confirmation_number: str) -> bool:
    return db.query(Reservation.id).filter(
        Reservation.confirmation_number == confirmation_number).first() is not None


def generate_confirmation_number(db: Session) -> str:
    return generate_unique_code(
        CONFIRMATION_PREFIX,
        lambda code: confirmation_number_exists(db, code),
        CONFIRMATION_TIME_DIGITS,
        CONFIRMATION_RANDOM_CHARS,
    )


# ----------------- Conflict detection -----------------
def find_conflicting_reservations(
        db: Session,
        room_id: UUID,
        check_in,
        check_out,
        exclude_id: Optional[UUID] = None):
    """Blocking reservations on the room whose [check_in, check_out) overlaps the given range."""
    query = db.query(Reservation).filter(
        Reservation.room_id == room_id,
        Reservation.status.in_(BLOCKING_STATUSES),
        Reservation.check_in < check_out,
        Reservation.check_out > check_in,
    )
    if exclude_id:
        query = query.filter(Reservation.id != exclude_id)
    return query.all()


def claim_room(db: Session, room_id: UUID, seen_version: int, room_status: Optional[str] = None) -> bool:
    """Compare-and-swap on the room's booking version. False when another booking got there first."""
    values = {Room.booking_version: seen_version + 1}
    if room_status:
        values[Room.status] = room_status
    updated = db.query(Room).filter(
        Room.id == room_id,
        Room.booking_version == seen_version,
    ).update(values, synchronize_session=False)
    return updated == 1


def _try_claim_dates(db: Session, room: Room, check_in, check_out, room_status: str,
                     exclude_id: Optional[UUID] = None) -> bool:
    seen_version = room.booking_version
    if find_conflicting_reservations(db, room.id, check_in, check_out, exclude_id):
        raise RoomUnavailable()
    return claim_room(db, room.id, seen_version, room_status)


def _move_room(db: Session, room_id: UUID, room_status: str):
    db.query(Room).filter(Room.id == room_id).update(
        {Room.status: room_status, Room.booking_version: Room.booking_version + 1},
        synchronize_session=False,
    )


# ----------------- Output -----------------
def _guest_directory(auth_db: Optional[Session], guest_ids: Iterable[UUID]) -> Dict[UUID, Users]:
    ids = {guest_id for guest_id in guest_ids if guest_id}
    if auth_db is None or not ids:
        return {}
    return {user.id: user for user in auth_db.query(Users).filter(Users.id.in_(ids)).all()}


def _reservation_out(reservation: Reservation, guests: Dict[UUID, Users]) -> ReservationOut:
    out = ReservationOut.model_validate(reservation)
    if reservation.room:
        out.room = RoomSummary.model_validate(reservation.room)
    guest = guests.get(reservation.guest_id)
    if guest:
        out.guest = GuestSummary.model_validate(guest)
    return out


def to_reservation_out(reservation: Reservation, auth_db: Optional[Session] = None) -> ReservationOut:
    return _reservation_out(reservation, _guest_directory(auth_db, [reservation.guest_id]))


def get_reservation_by_id(db: Session, reservation_id: UUID) -> Reservation:
    reservation = db.query(Reservation).filter(
        Reservation.id == reservation_id).first()
    if not reservation:
        raise NotFoundError("Reservation not found")
    return reservation


def _check_owner(reservation: Reservation, current_user: UserToken, action: str = "view"):
    if current_user.is_guest and reservation.guest_id != UUID(current_user.user_id):
        raise AuthorizationError(f"Not authorized to {action} this reservation")


# ----------------- Build Filters -----------------
def build_reservation_filters(current_user: UserToken, params: ReservationRequest):
    filters = []
    if current_user.is_guest:
        filters.append(Reservation.guest_id == UUID(current_user.user_id))
    if params.status:
        filters.append(Reservation.status == params.status)
    if params.room_id:
        filters.append(Reservation.room_id == params.room_id)
    if params.check_in_from:
        filters.append(Reservation.check_in >= params.check_in_from)
    if params.check_in_to:
        filters.append(Reservation.check_in <= params.check_in_to)
    if params.search:
        search_term = f"%{params.search}%"
        filters.append(
            or_(
                Reservation.confirmation_number.ilike(search_term),
                cast(Reservation.special_requests, Text).ilike(search_term),
            )
        )
    return filters


# ----------------- Get All Reservations -----------------
def get_reservations(
        db: Session,
        auth_db: Session,
        current_user: UserToken,
        params: ReservationRequest) -> ReservationListResponse:
    base_query = db.query(Reservation).filter(
        *build_reservation_filters(current_user, params))
    total = base_query.with_entities(func.count(Reservation.id)).scalar()

    query = base_query.order_by(Reservation.check_in.desc()).offset(params.skip)
    if params.limit:
        query = query.limit(params.limit)
    reservations = query.all()

    guests = _guest_directory(auth_db, [r.guest_id for r in reservations])
    return ReservationListResponse(
        reservations=[_reservation_out(r, guests) for r in reservations],
        total=total,
    )


def get_reservation(db: Session, auth_db: Session, current_user: UserToken, reservation_id: UUID) -> ReservationOut:
    reservation = get_reservation_by_id(db, reservation_id)
    _check_owner(reservation, current_user)
    return to_reservation_out(reservation, auth_db)


def get_reservation_by_confirmation(
        db: Session,
        auth_db: Session,
        current_user: UserToken,
        confirmation_number: str) -> ReservationOut:
    reservation = db.query(Reservation).filter(
        Reservation.confirmation_number == confirmation_number.upper()).first()
    if not reservation:
        raise NotFoundError("Reservation not found")
    _check_owner(reservation, current_user)
    return to_reservation_out(reservation, auth_db)


def _resolve_guest_id(auth_db: Session, current_user: UserToken, guest_id: Optional[UUID]) -> UUID:
    own_id = UUID(current_user.user_id)
    if current_user.is_guest:
        if guest_id and guest_id != own_id:
            raise AuthorizationError("Guests can only book for themselves")
        return own_id

    if not guest_id or guest_id == own_id:
        return own_id

    guest = auth_db.query(Users).filter(
        Users.id == guest_id, Users.is_active == True).first()
    if not guest:
        raise NotFoundError("Guest not found")
    return guest.id


# ----------------- Create Reservation -----------------
def create_reservation(
        background_tasks: BackgroundTasks,
        db: Session,
        auth_db: Session,
        current_user: UserToken,
        reservation: ReservationCreate,
        preferences: Optional[NotificationPreferences] = None) -> ReservationOut:
    validate_date_range(reservation.check_in, reservation.check_out)
    guest_id = _resolve_guest_id(auth_db, current_user, reservation.guest_id)
    nights = calculate_nights(reservation.check_in, reservation.check_out)

    for attempt in range(1, MAX_BOOKING_ATTEMPTS + 1):
        room = get_room_by_id(db, reservation.room_id)
        if reservation.number_of_guests > room.max_occupancy:
            raise OccupancyExceeded(room.max_occupancy)

        confirmation_number = generate_confirmation_number(db)
        total_amount = calculate_total_amount(room.price_per_night, nights)

        if not _try_claim_dates(db, room, reservation.check_in, reservation.check_out,
                                RoomStatus.reserved.value):
            db.rollback()
            logger.warning("Room %s changed during booking, attempt %s",
                           room.room_number, attempt)
            continue

        db_reservation = Reservation(
            confirmation_number=confirmation_number,
            guest_id=guest_id,
            room_id=room.id,
            check_in=reservation.check_in,
            check_out=reservation.check_out,
            number_of_guests=reservation.number_of_guests,
            status=ReservationStatus.confirmed.value,
            total_amount=total_amount,
            booking_source=reservation.booking_source,
            special_requests=reservation.special_requests,
            created_by=UUID(current_user.user_id),
        )
        db.add(db_reservation)
        try:
            db.commit()
        except IntegrityError:
            # Confirmation number taken between lookup and insert
            db.rollback()
            logger.warning("Confirmation number collision, attempt %s", attempt)
            continue
        break
    else:
        raise RoomUnavailable("Room is being booked by another request, please try again")

    db.refresh(db_reservation)
    logger.info("Reservation %s created for room %s (%s nights)",
                db_reservation.confirmation_number, db_reservation.room.room_number, nights)

    generate_bill_for_reservation(db, db_reservation)
    Dispatcher(background_tasks, preferences).reservation_created(
        db_reservation, db_reservation.room)

    return to_reservation_out(db_reservation, auth_db)


# ----------------- Check in / Check out -----------------
def check_in_reservation(
        background_tasks: BackgroundTasks,
        db: Session,
        auth_db: Session,
        reservation_id: UUID,
        preferences: Optional[NotificationPreferences] = None) -> ReservationOut:
    reservation = get_reservation_by_id(db, reservation_id)
    if reservation.status != ReservationStatus.confirmed.value:
        raise InvalidTransitionError(
            "reservation", reservation.status, ReservationStatus.checked_in.value)

    reservation.status = ReservationStatus.checked_in.value
    _move_room(db, reservation.room_id, RoomStatus.occupied.value)
    db.commit()
    db.refresh(reservation)

    Dispatcher(background_tasks, preferences).checked_in(reservation, reservation.room)
    return to_reservation_out(reservation, auth_db)


def check_out_reservation(
        background_tasks: BackgroundTasks,
        db: Session,
        auth_db: Session,
        reservation_id: UUID,
        preferences: Optional[NotificationPreferences] = None) -> ReservationOut:
    reservation = get_reservation_by_id(db, reservation_id)
    if reservation.status != ReservationStatus.checked_in.value:
        raise InvalidTransitionError(
            "reservation", reservation.status, ReservationStatus.checked_out.value)

    reservation.status = ReservationStatus.checked_out.value
    _move_room(db, reservation.room_id, RoomStatus.cleaning.value)
    db.commit()
    db.refresh(reservation)

    Dispatcher(background_tasks, preferences).checked_out(reservation, reservation.room)
    return to_reservation_out(reservation, auth_db)


# ----------------- Update Reservation -----------------
def _release_room(db: Session, reservation: Reservation):
    """After a cancellation, a room held only by this reservation becomes available."""
    room = reservation.room
    if room.status != RoomStatus.reserved.value:
        return
    others = db.query(Reservation.id).filter(
        Reservation.room_id == room.id,
        Reservation.id != reservation.id,
        Reservation.status == ReservationStatus.confirmed.value,
    ).first()
    if not others:
        _move_room(db, room.id, RoomStatus.available.value)


def _reactivate(db: Session, reservation: Reservation, target_status: str):
    for attempt in range(1, MAX_BOOKING_ATTEMPTS + 1):
        room = get_room_by_id(db, reservation.room_id)
        if _try_claim_dates(db, room, reservation.check_in, reservation.check_out,
                            ROOM_STATUS_FOR[target_status], exclude_id=reservation.id):
            return
        db.rollback()
    raise RoomUnavailable("Room is being booked by another request, please try again")


def update_reservation(
        background_tasks: BackgroundTasks,
        db: Session,
        auth_db: Session,
        current_user: UserToken,
        reservation_update: ReservationUpdate,
        preferences: Optional[NotificationPreferences] = None) -> ReservationOut:
    reservation = get_reservation_by_id(db, reservation_update.id)
    _check_owner(reservation, current_user, "modify")

    update_data = reservation_update.model_dump(exclude_unset=True, exclude={"id"})
    new_status = update_data.get("status")
    old_status = reservation.status

    if current_user.is_guest and new_status and new_status != ReservationStatus.cancelled.value:
        raise AuthorizationError("Guests can only cancel reservations")
    if (current_user.is_guest and new_status == ReservationStatus.cancelled.value
            and old_status not in CANCELLABLE_STATUSES):
        raise InvalidTransitionError("reservation", old_status, new_status)

    status_changed = bool(new_status) and new_status != old_status
    if status_changed:
        if new_status in BLOCKING_STATUSES and old_status not in BLOCKING_STATUSES:
            # Coming back into the ledger must not overlap anyone
            _reactivate(db, reservation, new_status)
        elif new_status in ROOM_STATUS_FOR:
            _move_room(db, reservation.room_id, ROOM_STATUS_FOR[new_status])
        elif old_status == ReservationStatus.confirmed.value:
            _release_room(db, reservation)

    for key, value in update_data.items():
        setattr(reservation, key, value)

    db.commit()
    db.refresh(reservation)

    if status_changed:
        logger.info("Reservation %s moved from %s to %s by %s",
                    reservation.confirmation_number, old_status, new_status, current_user.role)
        Dispatcher(background_tasks, preferences).reservation_status_changed(
            reservation, reservation.room)

    return to_reservation_out(reservation, auth_db)
