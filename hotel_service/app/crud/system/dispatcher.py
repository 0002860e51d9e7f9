"""
Side effects of ledger transitions.

Crud functions queue deliveries on the request's BackgroundTasks, so they run
after the response is sent. Every delivery opens its own sessions and logs
its own failures; nothing here can undo or fail the primary operation.
"""
import logging
from typing import Optional
from uuid import UUID

from fastapi import BackgroundTasks, Depends
from pydantic import BaseModel
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from shared.core.config import settings
from shared.core.database import AuthSessionLocal, HotelSessionLocal, get_hotel_db
from shared.helpers.email_helper import EmailHelper
from shared.models.users import Users
from shared.utils import email_templates
from ...enum.hotel_enum import NotificationType, Priority
from ...models.system.system_settings import SystemSetting
from .notifications_crud import create_notification, notify_staff
from .system_settings_crud import get_or_create_settings

logger = logging.getLogger(__name__)


class NotificationPreferences(BaseModel):
    email_notifications: bool = True
    notify_on_booking: bool = True
    notify_on_check_in: bool = True
    notify_on_check_out: bool = True
    notify_on_maintenance: bool = True
    hotel_name: str = settings.APP_NAME

    @classmethod
    def from_settings(cls, setting: SystemSetting) -> "NotificationPreferences":
        return cls(
            email_notifications=setting.email_notifications,
            notify_on_booking=setting.notify_on_booking,
            notify_on_check_in=setting.notify_on_check_in,
            notify_on_check_out=setting.notify_on_check_out,
            notify_on_maintenance=setting.notify_on_maintenance,
            hotel_name=(setting.hotel_info or {}).get("name") or settings.APP_NAME,
        )


def load_preferences(db: Session) -> NotificationPreferences:
    return NotificationPreferences.from_settings(get_or_create_settings(db))


# ----------------- Deliveries (run as background tasks) -----------------
def deliver_notification(user_id: UUID, type: str, title: str, message: str, **kwargs) -> bool:
    db = HotelSessionLocal()
    try:
        create_notification(db, user_id, type, title, message, **kwargs)
        return True
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Could not store '%s' notification for user %s", type, user_id)
        return False
    finally:
        db.close()


def deliver_staff_notification(type: str, title: str, message: str, **kwargs) -> bool:
    db = HotelSessionLocal()
    auth_db = AuthSessionLocal()
    try:
        sent = notify_staff(db, auth_db, type, title, message, **kwargs)
        logger.debug("'%s' notification sent to %s staff users", type, sent)
        return True
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Could not notify staff about '%s'", title)
        return False
    finally:
        db.close()
        auth_db.close()


def deliver_email(template_code: str, user_id: UUID, subject: str, context: dict) -> bool:
    auth_db = AuthSessionLocal()
    try:
        user = auth_db.query(Users).filter(Users.id == user_id).first()
    except SQLAlchemyError:
        logger.exception("Could not look up recipient %s for '%s' email", user_id, template_code)
        return False
    finally:
        auth_db.close()

    if not user:
        logger.warning("Recipient %s for '%s' email not found", user_id, template_code)
        return False

    sent = EmailHelper().send_email(
        template_code=template_code,
        recipients=[user.email],
        subject=subject,
        context={**context, "guest_name": user.full_name},
    )
    if not sent:
        logger.warning("'%s' email to %s was not sent", template_code, user.email)
    return sent


# ----------------- Dispatcher -----------------
def _money(value) -> str:
    return f"{float(value or 0):.2f}"


class Dispatcher:
    """Turns ledger events into queued notification and email deliveries."""

    def __init__(self, background_tasks: BackgroundTasks, preferences: Optional[NotificationPreferences] = None):
        self.background_tasks = background_tasks
        self.preferences = preferences or NotificationPreferences()

    def _notify(self, user_id, type: NotificationType, title: str, message: str, **kwargs):
        self.background_tasks.add_task(
            deliver_notification, user_id, type.value, title, message, **kwargs)

    def _notify_staff(self, type: NotificationType, title: str, message: str, **kwargs):
        self.background_tasks.add_task(
            deliver_staff_notification, type.value, title, message, **kwargs)

    def _email(self, template_code: str, user_id, subject: str, context: dict):
        if self.preferences.email_notifications:
            self.background_tasks.add_task(
                deliver_email, template_code, user_id, subject,
                {"hotel_name": self.preferences.hotel_name, **context})

    def _reservation_context(self, reservation, room) -> dict:
        return {
            "confirmation_number": reservation.confirmation_number,
            "room_number": room.room_number if room else "",
            "room_type": room.room_type if room else "",
            "check_in": reservation.check_in.isoformat(),
            "check_out": reservation.check_out.isoformat(),
            "number_of_guests": reservation.number_of_guests,
            "total_amount": _money(reservation.total_amount),
            "status": reservation.status,
        }

    # ---------- Reservations ----------
    def reservation_created(self, reservation, room):
        context = self._reservation_context(reservation, room)
        related = {"related_entity": "reservation", "related_id": reservation.id}

        self._notify(
            reservation.guest_id, NotificationType.booking, "Reservation Confirmed",
            f"Your reservation {reservation.confirmation_number} for room {context['room_number']} "
            f"from {context['check_in']} to {context['check_out']} is confirmed.",
            **related)
        if self.preferences.notify_on_booking:
            self._notify_staff(
                NotificationType.booking, "New Reservation",
                f"Room {context['room_number']} booked from {context['check_in']} to "
                f"{context['check_out']} ({reservation.confirmation_number}).",
                **related)
        self._email(email_templates.RESERVATION_CONFIRMED, reservation.guest_id,
                    f"Reservation Confirmed - {reservation.confirmation_number}", context)

    def checked_in(self, reservation, room):
        if self.preferences.notify_on_check_in:
            self._notify_staff(
                NotificationType.check_in, "Guest Checked In",
                f"Reservation {reservation.confirmation_number} checked in to room {room.room_number}.",
                related_entity="reservation", related_id=reservation.id)

    def checked_out(self, reservation, room):
        if self.preferences.notify_on_check_out:
            self._notify_staff(
                NotificationType.check_out, "Guest Checked Out",
                f"Reservation {reservation.confirmation_number} checked out, room {room.room_number} needs cleaning.",
                priority=Priority.high.value,
                related_entity="reservation", related_id=reservation.id)

    def reservation_status_changed(self, reservation, room):
        context = self._reservation_context(reservation, room)
        self._notify(
            reservation.guest_id, NotificationType.booking, "Reservation Updated",
            f"Reservation {reservation.confirmation_number} is now {reservation.status}.",
            related_entity="reservation", related_id=reservation.id)
        self._email(email_templates.RESERVATION_STATUS_UPDATED, reservation.guest_id,
                    f"Reservation {reservation.status.title()} - {reservation.confirmation_number}",
                    context)

    # ---------- Billing ----------
    def invoice_ready(self, bill, reservation):
        services_total = sum(float(line.line_total) for line in bill.services)
        self._notify(
            bill.guest_id, NotificationType.payment, "Invoice Available",
            f"Invoice {bill.invoice_number} of {_money(bill.total_amount)} is available.",
            related_entity="bill", related_id=bill.id)
        self._email(email_templates.INVOICE_GENERATED, bill.guest_id,
                    f"Invoice {bill.invoice_number}", {
                        "invoice_number": bill.invoice_number,
                        "confirmation_number": reservation.confirmation_number,
                        "room_charges": _money(bill.room_charges),
                        "services_total": _money(services_total),
                        "taxes": _money(bill.taxes),
                        "discount": _money(bill.discount),
                        "total_amount": _money(bill.total_amount),
                        "payment_status": bill.payment_status,
                    })

    # ---------- Service requests ----------
    def service_request_created(self, service_request):
        self._notify_staff(
            NotificationType.service_request, "New Service Request",
            f"New {service_request.service_type} request: {service_request.description[:200]}",
            priority=service_request.priority,
            related_entity="service_request", related_id=service_request.id)

    def service_request_updated(self, service_request):
        self._notify(
            service_request.guest_id, NotificationType.service_request, "Service Request Updated",
            f"Your {service_request.service_type} request is now {service_request.status}.",
            related_entity="service_request", related_id=service_request.id)

    def room_maintenance(self, room):
        if self.preferences.notify_on_maintenance:
            self._notify_staff(
                NotificationType.maintenance, "Room Under Maintenance",
                f"Room {room.room_number} was set to maintenance.",
                related_entity="room", related_id=room.id)

    # ---------- Messaging ----------
    def message_received(self, message, sender_name: str):
        self._notify(
            message.recipient_id, NotificationType.message, "New Message",
            f"{sender_name}: {message.content[:200]}",
            related_entity="conversation", related_id=message.conversation_id)


def get_notification_preferences(db: Session = Depends(get_hotel_db)) -> NotificationPreferences:
    """Request dependency: settings are read once and handed to the ledger."""
    return load_preferences(db)
