from uuid import UUID
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from shared.core.auth import validate_current_token
from shared.core.database import get_hotel_db as get_db
from shared.core.schemas import UserToken
from ...crud.system import notifications_crud as crud
from ...schemas.system.notifications_schemas import NotificationListResponse, NotificationOut, NotificationRequest

router = APIRouter(prefix="/api/notifications", tags=["Notifications"])


@router.get("/all", response_model=NotificationListResponse)
def get_notifications_endpoint(
    params: NotificationRequest = Depends(),
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    return crud.get_notifications(db, UUID(current_user.user_id), params)


@router.put("/read-all")
def mark_all_read_route(
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    return crud.mark_all_as_read(db, UUID(current_user.user_id))


@router.put("/{notification_id}/read", response_model=NotificationOut)
def mark_read_route(
    notification_id: UUID,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    return crud.mark_as_read(db, UUID(current_user.user_id), notification_id)


@router.delete("/{notification_id}")
def delete_notification_route(
    notification_id: UUID,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    return crud.delete_notification(db, UUID(current_user.user_id), notification_id)
