from datetime import date

from hotel_service.app.models.system.notifications import Notification


def _create(client, actor, **fields):
    payload = {"service_type": "room-service", "description": "Two coffees please", **fields}
    return client.post("/api/service-requests/", json=payload, headers=actor.headers)


def _titles(db, user_id):
    db.expire_all()
    return [n.title for n in db.query(Notification).filter(Notification.user_id == user_id)]


def test_request_is_linked_to_current_stay(client, db, guest, receptionist, make_room, make_reservation):
    room = make_room("101")
    make_reservation(room, guest.id, date(2024, 3, 1), date(2024, 3, 5), status="checked-out")
    stay = make_reservation(room, guest.id, date(2024, 3, 10), date(2024, 3, 12), status="checked-in")

    resp = _create(client, guest, priority="high")

    assert resp.status_code == 200
    data = resp.json()["data"]
    assert data["reservation_id"] == str(stay.id)
    assert data["room_id"] == str(room.id)
    assert data["status"] == "pending"
    assert data["priority"] == "high"
    assert _titles(db, receptionist.id) == ["New Service Request"]


def test_request_without_stay_has_no_room(client, guest):
    data = _create(client, guest).json()["data"]

    assert data["room_id"] is None
    assert data["reservation_id"] is None
    assert data["priority"] == "medium"


def test_guest_cannot_use_someone_elses_reservation(client, guest, other_guest, make_room, make_reservation):
    room = make_room("101")
    reservation = make_reservation(room, other_guest.id, date(2024, 3, 10), date(2024, 3, 12))

    resp = _create(client, guest, reservation_id=str(reservation.id))

    assert resp.status_code == 403


def test_guest_sees_only_own_requests(client, guest, other_guest, receptionist):
    _create(client, guest)
    _create(client, other_guest)

    assert client.get("/api/service-requests/all", headers=guest.headers).json()["data"]["total"] == 1
    assert client.get("/api/service-requests/all", headers=receptionist.headers).json()["data"]["total"] == 2


def test_guest_can_cancel_but_not_progress(client, guest):
    request_id = _create(client, guest).json()["data"]["id"]

    progressed = client.put("/api/service-requests/", json={"id": request_id, "status": "in-progress"},
                            headers=guest.headers)
    cancelled = client.put("/api/service-requests/", json={"id": request_id, "status": "cancelled"},
                           headers=guest.headers)

    assert progressed.status_code == 403
    assert cancelled.status_code == 200
    assert cancelled.json()["data"]["status"] == "cancelled"


def test_only_management_sets_cost(client, guest, receptionist, manager):
    request_id = _create(client, guest).json()["data"]["id"]

    denied = client.put("/api/service-requests/", json={"id": request_id, "cost": 30},
                        headers=receptionist.headers)
    allowed = client.put("/api/service-requests/", json={"id": request_id, "cost": 30, "assigned_to": str(receptionist.id)},
                         headers=manager.headers)

    assert denied.status_code == 403
    assert allowed.status_code == 200
    assert allowed.json()["data"]["cost"] == 30
    assert allowed.json()["data"]["assigned_to"] == str(receptionist.id)


def test_completion_is_stamped_and_final(client, db, guest, receptionist):
    request_id = _create(client, guest).json()["data"]["id"]

    done = client.put("/api/service-requests/", json={"id": request_id, "status": "completed"},
                      headers=receptionist.headers)
    reopened = client.put("/api/service-requests/", json={"id": request_id, "status": "in-progress"},
                          headers=receptionist.headers)

    assert done.json()["data"]["completed_at"] is not None
    assert reopened.status_code == 409
    assert _titles(db, guest.id) == ["Service Request Updated"]


def test_service_request_overview(client, guest, receptionist):
    first = _create(client, guest).json()["data"]["id"]
    _create(client, guest)
    client.put("/api/service-requests/", json={"id": first, "status": "completed"},
               headers=receptionist.headers)

    data = client.get("/api/service-requests/overview", headers=receptionist.headers).json()["data"]

    assert data["total"] == 2
    assert data["byStatus"]["completed"] == 1
    assert data["byStatus"]["pending"] == 1
