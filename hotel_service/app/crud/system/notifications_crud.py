from datetime import datetime, timezone
from typing import Iterable, Optional
from uuid import UUID
from sqlalchemy.orm import Session

from shared.core.exceptions import AuthorizationError, NotFoundError
from shared.models.users import Users
from shared.utils.enums import ELEVATED_ROLES
from ...enum.hotel_enum import Priority
from ...models.system.notifications import Notification
from ...schemas.system.notifications_schemas import NotificationListResponse, NotificationOut, NotificationRequest


def _unread_filters(user_id: UUID):
    return [
        Notification.user_id == user_id,
        Notification.is_deleted == False,
        Notification.read == False,
    ]


def get_notifications(db: Session, user_id: UUID, params: NotificationRequest) -> NotificationListResponse:
    query = db.query(Notification).filter(
        Notification.user_id == user_id,
        Notification.is_deleted == False,
    )
    if params.unread_only:
        query = query.filter(Notification.read == False)

    notifications = (
        query
        .order_by(Notification.posted_date.desc())
        .limit(params.limit)
        .all()
    )
    unread_count = db.query(Notification).filter(*_unread_filters(user_id)).count()

    return NotificationListResponse(
        notifications=[NotificationOut.model_validate(n) for n in notifications],
        unread_count=unread_count,
    )


def _get_own_notification(db: Session, user_id: UUID, notification_id: UUID) -> Notification:
    notification = db.query(Notification).filter(
        Notification.id == notification_id,
        Notification.is_deleted == False,
    ).first()
    if not notification:
        raise NotFoundError("Notification not found")
    if notification.user_id != user_id:
        raise AuthorizationError("Not authorized to access this notification")
    return notification


def mark_as_read(db: Session, user_id: UUID, notification_id: UUID) -> NotificationOut:
    notification = _get_own_notification(db, user_id, notification_id)
    if not notification.read:
        notification.read = True
        notification.read_at = datetime.now(timezone.utc)
        db.commit()
        db.refresh(notification)
    return NotificationOut.model_validate(notification)


def mark_all_as_read(db: Session, user_id: UUID) -> dict:
    updated = db.query(Notification).filter(*_unread_filters(user_id)).update(
        {Notification.read: True, Notification.read_at: datetime.now(timezone.utc)},
        synchronize_session=False,
    )
    db.commit()
    return {"updated": updated}


def delete_notification(db: Session, user_id: UUID, notification_id: UUID) -> dict:
    notification = _get_own_notification(db, user_id, notification_id)
    notification.is_deleted = True
    db.commit()
    return {"id": str(notification_id), "deleted": True}


# ----------------- Producers -----------------
def create_notification(
        db: Session,
        user_id: UUID,
        type: str,
        title: str,
        message: str,
        priority: str = Priority.medium.value,
        related_entity: Optional[str] = None,
        related_id: Optional[UUID] = None,
        commit: bool = True) -> Notification:
    notification = Notification(
        user_id=user_id,
        type=type,
        title=title,
        message=message,
        priority=priority,
        related_entity=related_entity,
        related_id=related_id,
    )
    db.add(notification)
    if commit:
        db.commit()
    return notification


def get_staff_ids(auth_db: Session, roles: Iterable[str] = ELEVATED_ROLES) -> list[UUID]:
    rows = auth_db.query(Users.id).filter(
        Users.role.in_(list(roles)),
        Users.is_active == True,
    ).all()
    return [row.id for row in rows]


def notify_staff(db: Session, auth_db: Session, type: str, title: str, message: str, **kwargs) -> int:
    staff_ids = get_staff_ids(auth_db)
    for staff_id in staff_ids:
        create_notification(db, staff_id, type, title, message, commit=False, **kwargs)
    db.commit()
    return len(staff_ids)
