from uuid import UUID
from fastapi import APIRouter, BackgroundTasks, Depends
from sqlalchemy.orm import Session

from shared.core.auth import allow_staff, validate_current_token
from shared.core.database import get_auth_db, get_hotel_db as get_db
from shared.core.schemas import UserToken
from ...crud.hospitality import reservations_crud as crud
from ...crud.system.dispatcher import NotificationPreferences, get_notification_preferences
from ...schemas.hospitality.reservations_schemas import (
    ReservationCreate, ReservationListResponse, ReservationOut, ReservationRequest, ReservationUpdate
)

router = APIRouter(prefix="/api/reservations", tags=["Reservations"])


# ---------------- List Reservations ----------------
@router.get("/all", response_model=ReservationListResponse)
def get_reservations_endpoint(
    params: ReservationRequest = Depends(),
    db: Session = Depends(get_db),
    auth_db: Session = Depends(get_auth_db),
    current_user: UserToken = Depends(validate_current_token)
):
    return crud.get_reservations(db, auth_db, current_user, params)


@router.get("/confirmation/{confirmation_number}", response_model=ReservationOut)
def get_reservation_by_confirmation_endpoint(
    confirmation_number: str,
    db: Session = Depends(get_db),
    auth_db: Session = Depends(get_auth_db),
    current_user: UserToken = Depends(validate_current_token)
):
    return crud.get_reservation_by_confirmation(db, auth_db, current_user, confirmation_number)


@router.get("/{reservation_id}", response_model=ReservationOut)
def get_reservation_endpoint(
    reservation_id: UUID,
    db: Session = Depends(get_db),
    auth_db: Session = Depends(get_auth_db),
    current_user: UserToken = Depends(validate_current_token)
):
    return crud.get_reservation(db, auth_db, current_user, reservation_id)


# ----------------- Create Reservation -----------------
@router.post("/", response_model=ReservationOut)
def create_reservation_route(
    reservation: ReservationCreate,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    auth_db: Session = Depends(get_auth_db),
    preferences: NotificationPreferences = Depends(get_notification_preferences),
    current_user: UserToken = Depends(validate_current_token)
):
    return crud.create_reservation(
        background_tasks, db, auth_db, current_user, reservation, preferences)


# ----------------- Update Reservation -----------------
@router.put("/", response_model=ReservationOut)
def update_reservation_route(
    reservation_update: ReservationUpdate,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    auth_db: Session = Depends(get_auth_db),
    preferences: NotificationPreferences = Depends(get_notification_preferences),
    current_user: UserToken = Depends(validate_current_token)
):
    return crud.update_reservation(
        background_tasks, db, auth_db, current_user, reservation_update, preferences)


# ----------------- Check in / out -----------------
@router.post("/{reservation_id}/check-in", response_model=ReservationOut)
def check_in_route(
    reservation_id: UUID,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    auth_db: Session = Depends(get_auth_db),
    preferences: NotificationPreferences = Depends(get_notification_preferences),
    current_user: UserToken = Depends(allow_staff)
):
    return crud.check_in_reservation(background_tasks, db, auth_db, reservation_id, preferences)


@router.post("/{reservation_id}/check-out", response_model=ReservationOut)
def check_out_route(
    reservation_id: UUID,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    auth_db: Session = Depends(get_auth_db),
    preferences: NotificationPreferences = Depends(get_notification_preferences),
    current_user: UserToken = Depends(allow_staff)
):
    return crud.check_out_reservation(background_tasks, db, auth_db, reservation_id, preferences)
