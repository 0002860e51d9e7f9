import logging
import math
from datetime import date, timedelta
from typing import List, Optional
from uuid import UUID

from sqlalchemy import case, func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from shared.core.exceptions import ConflictError, DuplicateKey, InvalidDateRange, NotFoundError
from shared.core.schemas import Lookup
from ...enum.hotel_enum import BLOCKING_STATUSES, RoomStatus, RoomType
from ...models.hospitality.reservations import Reservation
from ...models.hospitality.rooms import Room
from ...schemas.hospitality.rooms_schemas import (
    AvailabilityRequest, AvailabilityResponse, RoomCreate, RoomListResponse,
    RoomOut, RoomOverview, RoomRequest, RoomUpdate
)

logger = logging.getLogger(__name__)

ONE_DAY = timedelta(days=1)


def validate_date_range(check_in: date, check_out: date):
    if check_out <= check_in:
        raise InvalidDateRange()


def calculate_nights(check_in: date, check_out: date) -> int:
    """Whole nights between two dates, rounding a partial day up."""
    return math.ceil((check_out - check_in) / ONE_DAY)


# ----------------- Build Filters -----------------
def build_room_filters(params: RoomRequest):
    filters = [Room.is_active == True]

    if params.status:
        filters.append(Room.status == params.status)
    if params.room_type:
        filters.append(Room.room_type == params.room_type)
    if params.floor is not None:
        filters.append(Room.floor == params.floor)
    if params.min_price is not None:
        filters.append(Room.price_per_night >= params.min_price)
    if params.max_price is not None:
        filters.append(Room.price_per_night <= params.max_price)
    if params.search:
        filters.append(Room.room_number.ilike(f"%{params.search}%"))
    return filters


# ----------------- Get All Rooms -----------------
def get_rooms(db: Session, params: RoomRequest) -> RoomListResponse:
    base_query = db.query(Room).filter(*build_room_filters(params))
    total = base_query.with_entities(func.count(Room.id)).scalar()

    query = base_query.order_by(Room.floor.asc(), Room.room_number.asc()).offset(params.skip)
    if params.limit:
        query = query.limit(params.limit)

    return RoomListResponse(
        rooms=[RoomOut.model_validate(room) for room in query.all()],
        total=total,
    )


def get_room_by_id(db: Session, room_id: UUID) -> Room:
    room = db.query(Room).filter(Room.id == room_id, Room.is_active == True).first()
    if not room:
        raise NotFoundError("Room not found")
    return room


def get_room(db: Session, room_id: UUID) -> RoomOut:
    return RoomOut.model_validate(get_room_by_id(db, room_id))


def _ensure_room_number_free(db: Session, room_number: str, room_id: Optional[UUID] = None):
    query = db.query(Room.id).filter(Room.room_number == room_number)
    if room_id:
        query = query.filter(Room.id != room_id)
    if query.first():
        raise DuplicateKey(f"Room number {room_number} already exists")


# ----------------- Create Room -----------------
def create_room(db: Session, room: RoomCreate) -> RoomOut:
    _ensure_room_number_free(db, room.room_number)

    db_room = Room(**room.model_dump())
    db.add(db_room)
    try:
        db.commit()
    except IntegrityError:
        # Lost a race on the unique room number
        db.rollback()
        raise DuplicateKey(f"Room number {room.room_number} already exists")
    db.refresh(db_room)
    logger.info("Room %s created", db_room.room_number)
    return RoomOut.model_validate(db_room)


# ----------------- Update Room -----------------
def update_room(db: Session, room_update: RoomUpdate) -> RoomOut:
    db_room = get_room_by_id(db, room_update.id)
    update_data = room_update.model_dump(exclude_unset=True, exclude={"id"})

    if update_data.get("room_number") and update_data["room_number"] != db_room.room_number:
        _ensure_room_number_free(db, update_data["room_number"], db_room.id)

    for key, value in update_data.items():
        setattr(db_room, key, value)

    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise DuplicateKey(f"Room number {update_data.get('room_number')} already exists")
    db.refresh(db_room)
    return RoomOut.model_validate(db_room)


def set_room_status(db: Session, room_id: UUID, status: str) -> Room:
    db_room = get_room_by_id(db, room_id)
    db_room.status = status
    db.commit()
    db.refresh(db_room)
    logger.info("Room %s status set to %s", db_room.room_number, status)
    return db_room


def has_active_reservations(db: Session, room_id: UUID) -> bool:
    return db.query(Reservation.id).filter(
        Reservation.room_id == room_id,
        Reservation.status.in_(BLOCKING_STATUSES),
    ).first() is not None


# ---------------- Delete Room ----------------
def delete_room(db: Session, room_id: UUID) -> dict:
    db_room = get_room_by_id(db, room_id)
    if has_active_reservations(db, room_id):
        raise ConflictError("Cannot delete a room with active reservations")

    db_room.is_active = False
    db.commit()
    return {"id": str(room_id), "deleted": True}


# ----------------- Availability -----------------
def find_available_rooms(
        db: Session,
        check_in: date,
        check_out: date,
        room_type: Optional[str] = None,
        min_occupancy: Optional[int] = None) -> List[Room]:
    validate_date_range(check_in, check_out)

    # Pass 1: static filters
    filters = [Room.is_active == True, Room.status == RoomStatus.available.value]
    if room_type:
        filters.append(Room.room_type == room_type)
    if min_occupancy:
        filters.append(Room.max_occupancy >= min_occupancy)
    rooms = db.query(Room).filter(*filters).order_by(Room.room_number.asc()).all()

    # Pass 2: rooms held by an overlapping reservation
    booked_room_ids = {
        row.room_id for row in db.query(Reservation.room_id).filter(
            Reservation.status.in_(BLOCKING_STATUSES),
            Reservation.check_in < check_out,
            Reservation.check_out > check_in,
        ).distinct()
    }
    return [room for room in rooms if room.id not in booked_room_ids]


def check_availability(db: Session, params: AvailabilityRequest) -> AvailabilityResponse:
    rooms = find_available_rooms(
        db, params.check_in, params.check_out, params.room_type, params.min_occupancy)
    return AvailabilityResponse(
        check_in=params.check_in,
        check_out=params.check_out,
        nights=calculate_nights(params.check_in, params.check_out),
        rooms=[RoomOut.model_validate(room) for room in rooms],
    )


# ------------ overview ------------------
def get_room_overview(db: Session) -> RoomOverview:
    counts = db.query(
        func.count(Room.id).label("total"),
        *[
            func.count(case((Room.status == status.value, 1))).label(status.value)
            for status in RoomStatus
        ]
    ).filter(Room.is_active == True).one()

    return RoomOverview(
        totalRooms=counts.total or 0,
        byStatus={status.value: getattr(counts, status.value) or 0 for status in RoomStatus},
    )


def room_type_lookup() -> List[Lookup]:
    return [Lookup(id=room_type.value, name=room_type.value) for room_type in RoomType]


def room_status_lookup() -> List[Lookup]:
    return [Lookup(id=status.value, name=status.name.capitalize()) for status in RoomStatus]
