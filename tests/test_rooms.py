from datetime import date

from shared.utils.app_status_code import AppStatusCode
from hotel_service.app.crud.hospitality import rooms_crud
from hotel_service.app.models.system.notifications import Notification

ROOM = {
    "room_number": "201",
    "room_type": "Suite",
    "floor": 2,
    "price_per_night": 250,
    "max_occupancy": 4,
    "amenities": ["WiFi", "Jacuzzi"],
}


def _available_numbers(client, check_in, check_out, **filters):
    resp = client.get("/api/rooms/availability",
                      params={"check_in": check_in, "check_out": check_out, **filters})
    assert resp.status_code == 200
    return [room["room_number"] for room in resp.json()["data"]["rooms"]]


def test_manager_creates_room(client, manager):
    resp = client.post("/api/rooms/", json=ROOM, headers=manager.headers)

    assert resp.status_code == 200
    room = resp.json()["data"]
    assert room["room_number"] == "201"
    assert room["status"] == "available"
    assert room["amenities"] == ["WiFi", "Jacuzzi"]


def test_duplicate_room_number_is_rejected(client, manager):
    client.post("/api/rooms/", json=ROOM, headers=manager.headers)

    resp = client.post("/api/rooms/", json=ROOM, headers=manager.headers)

    assert resp.status_code == 409
    assert resp.json()["status_code"] == AppStatusCode.DUPLICATE_ADD_ERROR


def test_receptionist_cannot_create_room(client, receptionist):
    assert client.post("/api/rooms/", json=ROOM, headers=receptionist.headers).status_code == 403


def test_invalid_room_is_rejected(client, manager):
    resp = client.post("/api/rooms/", json={**ROOM, "max_occupancy": 0}, headers=manager.headers)

    assert resp.status_code == 422


def test_update_room_to_taken_number_is_rejected(client, manager, make_room):
    make_room("101")
    other = make_room("102")

    resp = client.put("/api/rooms/", json={"id": str(other.id), "room_number": "101"},
                      headers=manager.headers)

    assert resp.status_code == 409


def test_update_room_price(client, manager, make_room):
    room = make_room("101", price=100)

    resp = client.put("/api/rooms/", json={"id": str(room.id), "price_per_night": 120.5},
                      headers=manager.headers)

    assert resp.json()["data"]["price_per_night"] == 120.5
    assert resp.json()["data"]["room_number"] == "101"


def test_list_rooms_filters(client, make_room):
    make_room("101", room_type="Single", floor=1)
    make_room("201", room_type="Suite", floor=2)
    make_room("202", room_type="Suite", floor=2, status="maintenance")

    suites = client.get("/api/rooms/all", params={"room_type": "Suite"}).json()["data"]
    in_maintenance = client.get("/api/rooms/all", params={"status": "maintenance"}).json()["data"]

    assert suites["total"] == 2
    assert [r["room_number"] for r in suites["rooms"]] == ["201", "202"]
    assert in_maintenance["total"] == 1


# ----------------- Availability -----------------
def test_availability_excludes_overlapping_bookings(client, guest, make_room, make_reservation):
    booked = make_room("101")
    make_room("102")
    make_reservation(booked, guest.id, date(2024, 1, 10), date(2024, 1, 13))

    assert _available_numbers(client, "2024-01-12", "2024-01-14") == ["102"]
    assert _available_numbers(client, "2024-01-13", "2024-01-15") == ["101", "102"]
    assert _available_numbers(client, "2024-01-08", "2024-01-10") == ["101", "102"]


def test_cancelled_bookings_do_not_block(client, guest, make_room, make_reservation):
    room = make_room("101")
    make_reservation(room, guest.id, date(2024, 1, 10), date(2024, 1, 13), status="cancelled")
    make_reservation(room, guest.id, date(2024, 1, 10), date(2024, 1, 13), status="checked-out")

    assert _available_numbers(client, "2024-01-11", "2024-01-12") == ["101"]


def test_availability_skips_rooms_not_available(client, make_room):
    make_room("101", status="maintenance")
    make_room("102", status="cleaning")
    make_room("103")

    assert _available_numbers(client, "2024-01-11", "2024-01-12") == ["103"]


def test_availability_static_filters(client, make_room):
    make_room("101", room_type="Single", max_occupancy=1)
    make_room("102", room_type="Double", max_occupancy=2)
    make_room("103", room_type="Suite", max_occupancy=4)

    assert _available_numbers(client, "2024-01-11", "2024-01-12", min_occupancy=2) == ["102", "103"]
    assert _available_numbers(client, "2024-01-11", "2024-01-12", room_type="Single") == ["101"]


def test_availability_reports_nights(client, make_room):
    make_room("101")

    data = client.get("/api/rooms/availability",
                      params={"check_in": "2024-01-10", "check_out": "2024-01-13"}).json()["data"]

    assert data["nights"] == 3


def test_availability_rejects_inverted_range(client):
    resp = client.get("/api/rooms/availability",
                      params={"check_in": "2024-01-13", "check_out": "2024-01-10"})

    assert resp.status_code == 400
    assert resp.json()["status_code"] == AppStatusCode.INVALID_DATE_RANGE


def test_find_available_rooms_directly(db, guest, make_room, make_reservation):
    first = make_room("101")
    make_room("102")
    make_reservation(first, guest.id, date(2024, 1, 10), date(2024, 1, 13), status="checked-in")

    rooms = rooms_crud.find_available_rooms(db, date(2024, 1, 12), date(2024, 1, 20))

    assert [room.room_number for room in rooms] == ["102"]


# ----------------- Status / delete -----------------
def test_maintenance_status_alerts_staff(client, db, housekeeping, receptionist, make_room):
    room = make_room("101")

    resp = client.put(f"/api/rooms/{room.id}/status", json={"status": "maintenance"},
                      headers=housekeeping.headers)

    assert resp.status_code == 200
    assert resp.json()["data"]["status"] == "maintenance"
    titles = [n.title for n in db.query(Notification).filter(Notification.user_id == receptionist.id)]
    assert titles == ["Room Under Maintenance"]


def test_guest_cannot_change_room_status(client, guest, make_room):
    room = make_room("101")

    resp = client.put(f"/api/rooms/{room.id}/status", json={"status": "cleaning"}, headers=guest.headers)

    assert resp.status_code == 403


def test_room_with_active_booking_cannot_be_deleted(client, admin, guest, make_room, make_reservation):
    room = make_room("101")
    make_reservation(room, guest.id, date(2024, 1, 10), date(2024, 1, 13))

    resp = client.delete(f"/api/rooms/{room.id}", headers=admin.headers)

    assert resp.status_code == 409


def test_deleted_room_disappears(client, admin, make_room):
    room = make_room("101")

    assert client.delete(f"/api/rooms/{room.id}", headers=admin.headers).status_code == 200

    assert client.get(f"/api/rooms/{room.id}").status_code == 404
    assert client.get("/api/rooms/all").json()["data"]["total"] == 0


def test_room_overview_counts_statuses(client, receptionist, make_room):
    make_room("101")
    make_room("102", status="occupied")
    make_room("103", status="occupied")

    data = client.get("/api/rooms/overview", headers=receptionist.headers).json()["data"]

    assert data["totalRooms"] == 3
    assert data["byStatus"]["occupied"] == 2
    assert data["byStatus"]["available"] == 1
    assert data["byStatus"]["maintenance"] == 0


def test_room_lookups(client):
    types = client.get("/api/rooms/type-lookup").json()["data"]
    statuses = client.get("/api/rooms/status-lookup").json()["data"]

    assert {t["id"] for t in types} == {"Single", "Double", "Suite", "Deluxe", "Presidential"}
    assert "maintenance" in {s["id"] for s in statuses}
