from datetime import date


def _submit(client, actor, rating, category="overall", **fields):
    payload = {"rating": rating, "category": category, "comment": "Lovely stay", **fields}
    return client.post("/api/feedback/", json=payload, headers=actor.headers)


def _moderate(client, actor, feedback_id, **fields):
    return client.put("/api/feedback/", json={"id": feedback_id, **fields}, headers=actor.headers)


def test_guest_submits_feedback_for_own_stay(client, guest, make_room, make_reservation):
    room = make_room("101")
    reservation = make_reservation(room, guest.id, date(2024, 1, 10), date(2024, 1, 12), status="checked-out")

    resp = _submit(client, guest, 5, reservation_id=str(reservation.id))

    assert resp.status_code == 200
    assert resp.json()["data"]["status"] == "pending"


def test_feedback_on_someone_elses_stay_is_rejected(client, guest, other_guest, make_room, make_reservation):
    room = make_room("101")
    reservation = make_reservation(room, other_guest.id, date(2024, 1, 10), date(2024, 1, 12))

    assert _submit(client, guest, 4, reservation_id=str(reservation.id)).status_code == 403


def test_rating_must_be_one_to_five(client, guest):
    assert _submit(client, guest, 6).status_code == 422
    assert _submit(client, guest, 0).status_code == 422


def test_guest_cannot_moderate(client, guest):
    feedback_id = _submit(client, guest, 3).json()["data"]["id"]

    assert _moderate(client, guest, feedback_id, status="approved").status_code == 403


def test_public_feed_and_stats_use_approved_only(client, guest, manager):
    approved_five = _submit(client, guest, 5, "room").json()["data"]["id"]
    approved_three = _submit(client, guest, 3, "food").json()["data"]["id"]
    rejected = _submit(client, guest, 1, "food").json()["data"]["id"]
    _submit(client, guest, 2, "staff")

    _moderate(client, manager, approved_five, status="approved", response="Thank you!")
    _moderate(client, manager, approved_three, status="approved")
    _moderate(client, manager, rejected, status="rejected")

    public = client.get("/api/feedback/public").json()["data"]
    stats = client.get("/api/feedback/stats").json()["data"]

    assert public["total"] == 2
    assert stats["totalFeedback"] == 2
    assert stats["averageRating"] == 4.0
    assert stats["categoryAverages"]["room"] == 5.0
    assert stats["categoryAverages"]["food"] == 3.0
    assert stats["categoryAverages"]["staff"] == 0.0
    assert stats["ratingDistribution"] == {"1": 0, "2": 0, "3": 1, "4": 0, "5": 1}


def test_response_is_recorded(client, guest, manager):
    feedback_id = _submit(client, guest, 4).json()["data"]["id"]

    data = _moderate(client, manager, feedback_id, response="See you soon").json()["data"]

    assert data["response"] == "See you soon"
    assert data["responded_at"] is not None


def test_guest_lists_only_own_feedback(client, guest, other_guest, manager):
    _submit(client, guest, 4)
    _submit(client, other_guest, 2)

    assert client.get("/api/feedback/all", headers=guest.headers).json()["data"]["total"] == 1
    assert client.get("/api/feedback/all", headers=manager.headers).json()["data"]["total"] == 2
