import re
import uuid
from datetime import date
from decimal import Decimal

import pytest
from sqlalchemy.exc import SQLAlchemyError

from conftest import booking_payload
from shared.core.database import HotelSessionLocal
from shared.utils import email_templates
from shared.utils.app_status_code import AppStatusCode
from hotel_service.app.crud.hospitality import reservations_crud
from hotel_service.app.crud.hospitality.rooms_crud import calculate_nights
from hotel_service.app.crud.system import dispatcher
from hotel_service.app.enum.hotel_enum import BLOCKING_STATUSES
from hotel_service.app.models.financials.bills import Bill
from hotel_service.app.models.hospitality.reservations import Reservation
from hotel_service.app.models.hospitality.rooms import Room
from hotel_service.app.models.system.notifications import Notification


def _book(client, actor, room, check_in, check_out, guests=1, **extra):
    return client.post("/api/reservations/",
                       json=booking_payload(room, check_in, check_out, guests, **extra),
                       headers=actor.headers)


def _reservation_count(db) -> int:
    db.expire_all()
    return db.query(Reservation).count()


def _notifications_for(db, user_id):
    db.expire_all()
    return db.query(Notification).filter(Notification.user_id == user_id).all()


# ----------------- Booking scenarios -----------------
def test_booking_charges_per_night_and_reserves_room(client, db, guest, make_room):
    room = make_room("101", price=150, max_occupancy=2)

    resp = _book(client, guest, room, "2024-01-10", "2024-01-13", guests=2)

    assert resp.status_code == 200
    body = resp.json()
    assert body["status"] == "Success"
    data = body["data"]
    assert data["total_amount"] == 450
    assert data["status"] == "confirmed"
    assert data["guest_id"] == str(guest.id)
    assert data["room"]["room_number"] == "101"
    assert re.fullmatch(r"LUX\d{8}[A-Z0-9]{4}", data["confirmation_number"])

    db.refresh(room)
    assert room.status == "reserved"


def test_overlapping_booking_is_rejected(client, db, guest, other_guest, make_room):
    room = make_room("101", price=150, max_occupancy=2)
    assert _book(client, guest, room, "2024-01-10", "2024-01-13", 2).status_code == 200

    resp = _book(client, other_guest, room, "2024-01-12", "2024-01-14")

    assert resp.status_code == 409
    assert resp.json()["status_code"] == AppStatusCode.ROOM_UNAVAILABLE
    assert _reservation_count(db) == 1


def test_booking_starting_on_previous_checkout_is_allowed(client, db, guest, other_guest, make_room):
    room = make_room("101", price=150, max_occupancy=2)
    assert _book(client, guest, room, "2024-01-10", "2024-01-13", 2).status_code == 200

    resp = _book(client, other_guest, room, "2024-01-13", "2024-01-15")

    assert resp.status_code == 200
    assert resp.json()["data"]["total_amount"] == 300
    assert _reservation_count(db) == 2


@pytest.mark.parametrize("check_in, check_out", [
    ("2024-02-01", "2024-02-01"),
    ("2024-02-05", "2024-02-01"),
])
def test_checkout_not_after_checkin_is_rejected(client, db, guest, make_room, check_in, check_out):
    room = make_room("101")

    resp = _book(client, guest, room, check_in, check_out)

    assert resp.status_code == 400
    assert resp.json()["status_code"] == AppStatusCode.INVALID_DATE_RANGE
    assert _reservation_count(db) == 0


def test_too_many_guests_is_rejected(client, db, guest, make_room):
    room = make_room("101", max_occupancy=2)

    resp = _book(client, guest, room, "2024-03-01", "2024-03-03", guests=3)

    assert resp.status_code == 400
    assert resp.json()["status_code"] == AppStatusCode.OCCUPANCY_EXCEEDED
    assert "2" in resp.json()["message"]
    assert _reservation_count(db) == 0
    db.refresh(room)
    assert room.status == "available"


def test_unknown_room_is_not_found(client, guest):
    resp = client.post("/api/reservations/", json={
        "room_id": str(uuid.uuid4()),
        "check_in": "2024-03-01",
        "check_out": "2024-03-03",
    }, headers=guest.headers)

    assert resp.status_code == 404


def test_malformed_date_is_a_validation_error(client, guest, make_room):
    room = make_room("101")

    resp = _book(client, guest, room, "not-a-date", "2024-03-03")

    assert resp.status_code == 422
    assert resp.json()["status"] == "Failure"


def test_booking_requires_a_token(client, make_room):
    room = make_room("101")

    resp = client.post("/api/reservations/", json=booking_payload(room, "2024-03-01", "2024-03-02"))

    assert resp.status_code in (401, 403)


@pytest.mark.parametrize("check_in, check_out, nights", [
    (date(2024, 1, 10), date(2024, 1, 11), 1),
    (date(2024, 2, 27), date(2024, 3, 2), 4),
    (date(2024, 12, 30), date(2025, 1, 2), 3),
    (date(2024, 1, 1), date(2024, 12, 31), 365),
])
def test_total_is_price_times_nights(check_in, check_out, nights):
    assert calculate_nights(check_in, check_out) == nights
    assert reservations_crud.calculate_total_amount(Decimal("189.99"), nights) == Decimal("189.99") * nights


def test_no_two_blocking_reservations_overlap(client, db, guest, make_room):
    room = make_room("101")
    attempts = [
        ("2024-05-01", "2024-05-05"),
        ("2024-05-03", "2024-05-06"),
        ("2024-05-05", "2024-05-07"),
        ("2024-04-28", "2024-05-02"),
        ("2024-04-25", "2024-05-01"),
        ("2024-05-06", "2024-05-10"),
        ("2024-05-07", "2024-05-09"),
        ("2024-04-20", "2024-06-01"),
    ]
    outcomes = [_book(client, guest, room, ci, co).status_code for ci, co in attempts]
    assert outcomes == [200, 409, 200, 409, 200, 409, 200, 409]

    db.expire_all()
    held = db.query(Reservation).filter(
        Reservation.room_id == room.id, Reservation.status.in_(BLOCKING_STATUSES)).all()
    for first in held:
        for second in held:
            if first.id != second.id:
                assert first.check_out <= second.check_in or second.check_out <= first.check_in


# ----------------- Concurrent booking -----------------
def test_booking_that_loses_the_room_race_is_rejected(client, db, guest, other_guest, make_room, monkeypatch):
    room = make_room("101")
    room_id = room.id
    real_check = reservations_crud.find_conflicting_reservations
    calls = []

    def check_then_competitor_books(session, *args, **kwargs):
        calls.append(1)
        result = real_check(session, *args, **kwargs)
        if len(calls) == 1:
            # Another request books the same dates between our check and our write
            other = HotelSessionLocal()
            try:
                other.add(Reservation(
                    confirmation_number="LUX00000000RACE",
                    guest_id=other_guest.id,
                    room_id=room_id,
                    check_in=date(2024, 7, 1),
                    check_out=date(2024, 7, 4),
                    number_of_guests=1,
                    status="confirmed",
                    total_amount=Decimal("450"),
                    booking_source="online",
                ))
                other.query(Room).filter(Room.id == room_id).update(
                    {Room.booking_version: Room.booking_version + 1}, synchronize_session=False)
                other.commit()
            finally:
                other.close()
        return result

    monkeypatch.setattr(reservations_crud, "find_conflicting_reservations", check_then_competitor_books)

    resp = _book(client, guest, room, "2024-07-02", "2024-07-05")

    assert resp.status_code == 409
    assert resp.json()["status_code"] == AppStatusCode.ROOM_UNAVAILABLE
    assert len(calls) == 2
    db.expire_all()
    held = db.query(Reservation).filter(Reservation.room_id == room_id).all()
    assert [r.confirmation_number for r in held] == ["LUX00000000RACE"]


def test_booking_retries_when_room_changes_without_conflict(client, db, guest, make_room, monkeypatch):
    room = make_room("101")
    room_id = room.id
    real_check = reservations_crud.find_conflicting_reservations
    calls = []

    def check_then_room_changes(session, *args, **kwargs):
        calls.append(1)
        if len(calls) == 1:
            other = HotelSessionLocal()
            try:
                other.query(Room).filter(Room.id == room_id).update(
                    {Room.booking_version: Room.booking_version + 1}, synchronize_session=False)
                other.commit()
            finally:
                other.close()
        return real_check(session, *args, **kwargs)

    monkeypatch.setattr(reservations_crud, "find_conflicting_reservations", check_then_room_changes)

    resp = _book(client, guest, room, "2024-07-02", "2024-07-05")

    assert resp.status_code == 200
    assert len(calls) == 2
    assert _reservation_count(db) == 1
    db.refresh(room)
    assert room.booking_version == 2


def test_booking_gives_up_after_repeated_room_changes(client, db, guest, make_room, monkeypatch):
    room = make_room("101")
    monkeypatch.setattr(reservations_crud, "claim_room", lambda *args, **kwargs: False)

    resp = _book(client, guest, room, "2024-07-02", "2024-07-05")

    assert resp.status_code == 409
    assert "another request" in resp.json()["message"]
    assert _reservation_count(db) == 0


def test_claim_room_fails_on_stale_version(db, make_room):
    room = make_room("101")

    assert reservations_crud.claim_room(db, room.id, 0, "reserved") is True
    db.commit()
    assert reservations_crud.claim_room(db, room.id, 0, "reserved") is False
    db.rollback()

    db.refresh(room)
    assert room.booking_version == 1
    assert room.status == "reserved"


# ----------------- Side effects -----------------
def test_booking_creates_bill_and_notifications(client, db, guest, receptionist, housekeeping, make_room):
    room = make_room("101", price=150)

    resp = _book(client, guest, room, "2024-01-10", "2024-01-13", 2)
    reservation_id = resp.json()["data"]["id"]

    db.expire_all()
    bill = db.query(Bill).filter(Bill.reservation_id == uuid.UUID(reservation_id)).one()
    assert bill.room_charges == Decimal("450")
    assert bill.taxes == 0
    assert bill.discount == 0
    assert bill.total_amount == Decimal("450")
    assert bill.payment_status == "pending"
    assert re.fullmatch(r"INV\d{10}[A-Z0-9]{4}", bill.invoice_number)

    assert [n.title for n in _notifications_for(db, guest.id)] == ["Reservation Confirmed"]
    assert [n.title for n in _notifications_for(db, receptionist.id)] == ["New Reservation"]
    assert _notifications_for(db, housekeeping.id) == []


def test_staff_booking_alerts_follow_settings(client, db, admin, guest, receptionist, make_room):
    resp = client.put("/api/settings/", json={
        "notification_settings": {"notify_on_booking": False}
    }, headers=admin.headers)
    assert resp.status_code == 200
    room = make_room("101")

    assert _book(client, guest, room, "2024-01-10", "2024-01-13").status_code == 200

    assert _notifications_for(db, receptionist.id) == []
    assert len(_notifications_for(db, guest.id)) == 1


def test_confirmation_email_is_queued_only_when_enabled(client, admin, guest, make_room, monkeypatch):
    sent = []
    monkeypatch.setattr(dispatcher, "deliver_email",
                        lambda template_code, user_id, subject, context: sent.append((template_code, user_id)))
    room = make_room("101")

    assert _book(client, guest, room, "2024-01-10", "2024-01-11").status_code == 200
    assert sent == [(email_templates.RESERVATION_CONFIRMED, guest.id)]

    client.put("/api/settings/", json={"notification_settings": {"email_notifications": False}},
               headers=admin.headers)
    assert _book(client, guest, room, "2024-01-11", "2024-01-12").status_code == 200
    assert len(sent) == 1


def test_failed_notification_does_not_undo_booking(client, db, guest, receptionist, make_room, monkeypatch):
    def broken_store(*args, **kwargs):
        raise SQLAlchemyError("notifications table is gone")

    monkeypatch.setattr(dispatcher, "create_notification", broken_store)
    room = make_room("101")

    resp = _book(client, guest, room, "2024-01-10", "2024-01-13")

    assert resp.status_code == 200
    assert _reservation_count(db) == 1
    assert _notifications_for(db, guest.id) == []


def test_failed_bill_does_not_undo_booking(client, db, guest, make_room, monkeypatch):
    from hotel_service.app.crud.financials import bills_crud
    monkeypatch.setattr(bills_crud, "generate_invoice_number", lambda db=None: None)
    room = make_room("101")

    resp = _book(client, guest, room, "2024-01-10", "2024-01-13")

    assert resp.status_code == 200
    assert _reservation_count(db) == 1
    assert db.query(Bill).count() == 0


# ----------------- Booking on behalf -----------------
def test_guest_cannot_book_for_someone_else(client, db, guest, other_guest, make_room):
    room = make_room("101")

    resp = _book(client, guest, room, "2024-01-10", "2024-01-13", guest_id=str(other_guest.id))

    assert resp.status_code == 403
    assert _reservation_count(db) == 0


def test_staff_books_on_behalf_of_guest(client, receptionist, guest, make_room):
    room = make_room("101")

    resp = _book(client, receptionist, room, "2024-01-10", "2024-01-13",
                 guest_id=str(guest.id), booking_source="phone")

    data = resp.json()["data"]
    assert data["guest_id"] == str(guest.id)
    assert data["created_by"] == str(receptionist.id)
    assert data["booking_source"] == "phone"
    assert data["guest"]["email"] == guest.email


# ----------------- Check in / out -----------------
def test_check_in_and_out_move_the_room(client, db, guest, receptionist, make_room):
    room = make_room("101")
    reservation_id = _book(client, guest, room, "2024-01-10", "2024-01-13").json()["data"]["id"]

    resp = client.post(f"/api/reservations/{reservation_id}/check-in", headers=receptionist.headers)
    assert resp.status_code == 200
    assert resp.json()["data"]["status"] == "checked-in"
    db.refresh(room)
    assert room.status == "occupied"

    resp = client.post(f"/api/reservations/{reservation_id}/check-out", headers=receptionist.headers)
    assert resp.status_code == 200
    assert resp.json()["data"]["status"] == "checked-out"
    db.refresh(room)
    assert room.status == "cleaning"

    titles = {n.title for n in _notifications_for(db, receptionist.id)}
    assert {"Guest Checked In", "Guest Checked Out"} <= titles


@pytest.mark.parametrize("status", ["pending", "checked-in", "checked-out", "cancelled"])
def test_check_in_requires_confirmed(client, db, guest, receptionist, make_room, make_reservation, status):
    room = make_room("101", status="maintenance")
    reservation = make_reservation(room, guest.id, date(2024, 1, 10), date(2024, 1, 12), status=status)

    resp = client.post(f"/api/reservations/{reservation.id}/check-in", headers=receptionist.headers)

    assert resp.status_code == 409
    assert resp.json()["status_code"] == AppStatusCode.INVALID_STATUS_TRANSITION
    db.refresh(room)
    db.refresh(reservation)
    assert room.status == "maintenance"
    assert reservation.status == status


@pytest.mark.parametrize("status", ["pending", "confirmed", "checked-out", "cancelled"])
def test_check_out_requires_checked_in(client, db, guest, receptionist, make_room, make_reservation, status):
    room = make_room("101", status="reserved")
    reservation = make_reservation(room, guest.id, date(2024, 1, 10), date(2024, 1, 12), status=status)

    resp = client.post(f"/api/reservations/{reservation.id}/check-out", headers=receptionist.headers)

    assert resp.status_code == 409
    db.refresh(room)
    assert room.status == "reserved"


def test_guest_cannot_check_in(client, guest, make_room, make_reservation):
    room = make_room("101")
    reservation = make_reservation(room, guest.id, date(2024, 1, 10), date(2024, 1, 12))

    resp = client.post(f"/api/reservations/{reservation.id}/check-in", headers=guest.headers)

    assert resp.status_code == 403


# ----------------- Updates -----------------
def test_guest_cancels_own_reservation_and_room_is_released(client, db, guest, make_room):
    room = make_room("101")
    reservation_id = _book(client, guest, room, "2024-01-10", "2024-01-13").json()["data"]["id"]

    resp = client.put("/api/reservations/", json={"id": reservation_id, "status": "cancelled"},
                      headers=guest.headers)

    assert resp.status_code == 200
    assert resp.json()["data"]["status"] == "cancelled"
    db.refresh(room)
    assert room.status == "available"
    assert "Reservation Updated" in {n.title for n in _notifications_for(db, guest.id)}


def test_cancel_keeps_room_reserved_for_other_bookings(client, db, guest, make_room):
    room = make_room("101")
    first = _book(client, guest, room, "2024-01-10", "2024-01-13").json()["data"]["id"]
    _book(client, guest, room, "2024-01-20", "2024-01-22")

    client.put("/api/reservations/", json={"id": first, "status": "cancelled"}, headers=guest.headers)

    db.refresh(room)
    assert room.status == "reserved"


def test_guest_cannot_cancel_someone_elses_reservation(client, guest, other_guest, make_room, make_reservation):
    room = make_room("101")
    reservation = make_reservation(room, other_guest.id, date(2024, 1, 10), date(2024, 1, 12))

    resp = client.put("/api/reservations/", json={"id": str(reservation.id), "status": "cancelled"},
                      headers=guest.headers)

    assert resp.status_code == 403


def test_guest_can_only_cancel(client, guest, make_room, make_reservation):
    room = make_room("101")
    reservation = make_reservation(room, guest.id, date(2024, 1, 10), date(2024, 1, 12))

    resp = client.put("/api/reservations/", json={"id": str(reservation.id), "status": "checked-in"},
                      headers=guest.headers)

    assert resp.status_code == 403


def test_guest_cannot_cancel_after_check_in(client, guest, make_room, make_reservation):
    room = make_room("101")
    reservation = make_reservation(room, guest.id, date(2024, 1, 10), date(2024, 1, 12), status="checked-in")

    resp = client.put("/api/reservations/", json={"id": str(reservation.id), "status": "cancelled"},
                      headers=guest.headers)

    assert resp.status_code == 409


def test_reactivating_into_a_taken_slot_is_rejected(client, db, guest, other_guest, receptionist,
                                                     make_room, make_reservation):
    room = make_room("101")
    cancelled = make_reservation(room, guest.id, date(2024, 1, 10), date(2024, 1, 13), status="cancelled")
    make_reservation(room, other_guest.id, date(2024, 1, 12), date(2024, 1, 14))

    resp = client.put("/api/reservations/", json={"id": str(cancelled.id), "status": "confirmed"},
                      headers=receptionist.headers)

    assert resp.status_code == 409
    assert resp.json()["status_code"] == AppStatusCode.ROOM_UNAVAILABLE
    db.refresh(cancelled)
    assert cancelled.status == "cancelled"


def test_reactivating_into_a_free_slot_reserves_room(client, db, guest, receptionist, make_room, make_reservation):
    room = make_room("101")
    cancelled = make_reservation(room, guest.id, date(2024, 1, 10), date(2024, 1, 13), status="cancelled")

    resp = client.put("/api/reservations/", json={"id": str(cancelled.id), "status": "confirmed"},
                      headers=receptionist.headers)

    assert resp.status_code == 200
    assert resp.json()["data"]["status"] == "confirmed"
    db.refresh(room)
    assert room.status == "reserved"


def test_special_requests_update_without_status_change(client, db, guest, make_room, make_reservation):
    room = make_room("101")
    reservation = make_reservation(room, guest.id, date(2024, 1, 10), date(2024, 1, 12))

    resp = client.put("/api/reservations/", json={"id": str(reservation.id), "special_requests": "Late arrival"},
                      headers=guest.headers)

    assert resp.status_code == 200
    assert resp.json()["data"]["special_requests"] == "Late arrival"
    assert _notifications_for(db, guest.id) == []


# ----------------- Reads -----------------
def test_guest_sees_only_own_reservations(client, guest, other_guest, receptionist, make_room, make_reservation):
    room = make_room("101")
    make_reservation(room, guest.id, date(2024, 1, 10), date(2024, 1, 12))
    make_reservation(room, other_guest.id, date(2024, 1, 12), date(2024, 1, 14))

    own = client.get("/api/reservations/all", headers=guest.headers).json()["data"]
    everyone = client.get("/api/reservations/all", headers=receptionist.headers).json()["data"]

    assert own["total"] == 1
    assert own["reservations"][0]["guest_id"] == str(guest.id)
    assert everyone["total"] == 2


def test_lookup_by_confirmation_number(client, guest, other_guest, make_room):
    room = make_room("101")
    number = _book(client, guest, room, "2024-01-10", "2024-01-12").json()["data"]["confirmation_number"]

    found = client.get(f"/api/reservations/confirmation/{number.lower()}", headers=guest.headers)
    hidden = client.get(f"/api/reservations/confirmation/{number}", headers=other_guest.headers)

    assert found.status_code == 200
    assert found.json()["data"]["confirmation_number"] == number
    assert hidden.status_code == 403
