from typing import List
from uuid import UUID
from fastapi import APIRouter, BackgroundTasks, Depends
from sqlalchemy.orm import Session

from shared.core.auth import allow_admin, allow_management, allow_staff
from shared.core.database import get_hotel_db as get_db
from shared.core.schemas import Lookup, UserToken
from ...crud.hospitality import rooms_crud as crud
from ...crud.system.dispatcher import Dispatcher, NotificationPreferences, get_notification_preferences
from ...enum.hotel_enum import RoomStatus
from ...schemas.hospitality.rooms_schemas import (
    AvailabilityRequest, AvailabilityResponse, RoomCreate, RoomListResponse,
    RoomOut, RoomOverview, RoomRequest, RoomStatusUpdate, RoomUpdate
)

router = APIRouter(prefix="/api/rooms", tags=["Rooms"])


# ---------------- List Rooms ----------------
@router.get("/all", response_model=RoomListResponse)
def get_rooms_endpoint(
    params: RoomRequest = Depends(),
    db: Session = Depends(get_db)
):
    return crud.get_rooms(db, params)


@router.get("/availability", response_model=AvailabilityResponse)
def check_availability_endpoint(
    params: AvailabilityRequest = Depends(),
    db: Session = Depends(get_db)
):
    return crud.check_availability(db, params)


@router.get("/overview", response_model=RoomOverview)
def get_room_overview(
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(allow_staff)
):
    return crud.get_room_overview(db)


# ----------------type / status Lookup by enum ----------------
@router.get("/type-lookup", response_model=List[Lookup])
def room_type_lookup():
    return crud.room_type_lookup()


@router.get("/status-lookup", response_model=List[Lookup])
def room_status_lookup():
    return crud.room_status_lookup()


@router.get("/{room_id}", response_model=RoomOut)
def get_room_endpoint(room_id: UUID, db: Session = Depends(get_db)):
    return crud.get_room(db, room_id)


# ----------------- Create Room -----------------
@router.post("/", response_model=RoomOut)
def create_room_route(
    room: RoomCreate,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(allow_management)
):
    return crud.create_room(db, room)


# ----------------- Update Room -----------------
@router.put("/", response_model=RoomOut)
def update_room_route(
    room_update: RoomUpdate,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(allow_management)
):
    return crud.update_room(db, room_update)


@router.put("/{room_id}/status", response_model=RoomOut)
def update_room_status_route(
    room_id: UUID,
    status_update: RoomStatusUpdate,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    preferences: NotificationPreferences = Depends(get_notification_preferences),
    current_user: UserToken = Depends(allow_staff)
):
    room = crud.set_room_status(db, room_id, status_update.status)
    if room.status == RoomStatus.maintenance.value:
        Dispatcher(background_tasks, preferences).room_maintenance(room)
    return RoomOut.model_validate(room)


# ---------------- Delete Room ----------------
@router.delete("/{room_id}")
def delete_room_route(
    room_id: UUID,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(allow_admin)
):
    return crud.delete_room(db, room_id)
