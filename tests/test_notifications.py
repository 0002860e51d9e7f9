import uuid

from hotel_service.app.crud.system.notifications_crud import create_notification


def _seed(db, user_id, count=3):
    return [create_notification(db, user_id, "system", f"Notice {i}", "Body") for i in range(count)]


def test_lists_own_notifications_with_unread_count(client, db, guest, other_guest):
    _seed(db, guest.id, 3)
    _seed(db, other_guest.id, 2)

    data = client.get("/api/notifications/all", headers=guest.headers).json()["data"]

    assert len(data["notifications"]) == 3
    assert data["unread_count"] == 3


def test_mark_one_and_all_as_read(client, db, guest):
    first, _, _ = _seed(db, guest.id, 3)

    resp = client.put(f"/api/notifications/{first.id}/read", headers=guest.headers)
    assert resp.json()["data"]["read"] is True

    unread = client.get("/api/notifications/all", params={"unread_only": True},
                        headers=guest.headers).json()["data"]
    assert len(unread["notifications"]) == 2
    assert unread["unread_count"] == 2

    assert client.put("/api/notifications/read-all", headers=guest.headers).json()["data"]["updated"] == 2
    assert client.get("/api/notifications/all", headers=guest.headers).json()["data"]["unread_count"] == 0


def test_cannot_touch_someone_elses_notification(client, db, guest, other_guest):
    notification = _seed(db, other_guest.id, 1)[0]

    assert client.put(f"/api/notifications/{notification.id}/read", headers=guest.headers).status_code == 403
    assert client.delete(f"/api/notifications/{notification.id}", headers=guest.headers).status_code == 403


def test_deleted_notification_is_hidden(client, db, guest):
    notification = _seed(db, guest.id, 1)[0]

    assert client.delete(f"/api/notifications/{notification.id}", headers=guest.headers).status_code == 200

    data = client.get("/api/notifications/all", headers=guest.headers).json()["data"]
    assert data["notifications"] == []
    assert client.put(f"/api/notifications/{notification.id}/read", headers=guest.headers).status_code == 404


def test_missing_notification_is_not_found(client, guest):
    assert client.put(f"/api/notifications/{uuid.uuid4()}/read", headers=guest.headers).status_code == 404
