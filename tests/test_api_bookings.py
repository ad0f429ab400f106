from datetime import date

from conftest import MONDAY, SUNDAY, WEDNESDAY, booking_payload
from salon.models.booking import Booking
from salon.scheduling import Admission


def book(client, service_id, **kwargs):
    return client.post("/api/bookings", json=booking_payload(service_id, **kwargs))


def test_create_booking(client, service_ids):
    response = book(client, service_ids["Herreklip"], start_time="09:00")
    assert response.status_code == 201
    body = response.json()
    assert body["status"] == "confirmed"
    assert body["start_time"] == "09:00"
    assert body["end_time"] == "09:30"
    assert body["service_name"] == "Herreklip"
    assert len(body["cancel_token"]) == 64
    # До записи 2 часа - клиент уже не может отменить
    assert body["can_cancel"] is False


def test_booked_slot_disappears_from_availability(client, service_ids):
    book(client, service_ids["Hårfarvning"], start_time="10:00")
    slots = client.get(
        "/api/availability",
        params={"date": MONDAY, "service_id": service_ids["Herreklip"]}
    ).json()["slots"]
    assert "10:00" not in slots and "10:30" not in slots
    assert "09:30" in slots and "11:00" in slots


def test_double_booking_rejected_adjacent_allowed(client, service_ids):
    haircut = service_ids["Herreklip"]
    assert book(client, haircut, start_time="10:00").status_code == 201

    response = book(client, haircut, start_time="10:00", customer_email="other@example.com")
    assert response.status_code == 400
    assert response.json()["detail"] == {"error": "This time slot is already booked", "reason": "already_booked"}

    assert book(client, haircut, start_time="10:30").status_code == 201


def test_overlapping_longer_service_rejected(client, service_ids):
    assert book(client, service_ids["Herreklip"], start_time="10:30").status_code == 201
    response = book(client, service_ids["Hårfarvning"], start_time="10:00")
    assert response.json()["detail"]["reason"] == "already_booked"


def test_business_rule_rejections(client, service_ids):
    haircut = service_ids["Herreklip"]
    cases = [
        ({"start_time": "08:30"}, "too_soon"),
        ({"date": SUNDAY, "start_time": "10:00"}, "closed_day"),
        ({"start_time": "16:45"}, "outside_working_hours"),
    ]
    for overrides, expected in cases:
        response = book(client, haircut, **overrides)
        assert response.status_code == 400, overrides
        assert response.json()["detail"]["reason"] == expected


def test_blocked_slot_rejected(admin_client, service_ids):
    admin_client.post("/api/blocked-slots", json={"date": MONDAY, "start_time": "12:00", "end_time": "13:00"})
    response = book(admin_client, service_ids["Herreklip"], start_time="12:30")
    assert response.json()["detail"]["reason"] == "slot_blocked"


def test_unknown_or_inactive_service_is_404(admin_client, service_ids):
    response = book(admin_client, 9999)
    assert response.status_code == 404
    assert response.json()["detail"]["reason"] == "service_not_found"

    admin_client.delete(f"/api/services/{service_ids['Styling']}")
    assert book(admin_client, service_ids["Styling"]).status_code == 404


def test_invalid_payload(client, service_ids):
    haircut = service_ids["Herreklip"]
    assert book(client, haircut, start_time="25:00").status_code == 422
    assert book(client, haircut, start_time="9:00").status_code == 422
    assert book(client, haircut, customer_email="not-an-email").status_code == 422
    assert book(client, haircut, customer_name="A").status_code == 422
    assert book(client, haircut, date="2030-02-30").status_code == 400


def test_race_lost_at_database_is_already_booked(client, service_ids, monkeypatch):
    haircut = service_ids["Herreklip"]
    assert book(client, haircut, start_time="10:00").status_code == 201

    # Проверка пропускает запись, как при одновременных запросах
    monkeypatch.setattr(
        "salon.services.bookings.decide_booking",
        lambda *args, **kwargs: Admission("10:00", "10:30")
    )
    response = book(client, haircut, start_time="10:00", customer_email="racer@example.com")
    assert response.status_code == 400
    assert response.json()["detail"]["reason"] == "already_booked"


def test_lookup_by_token(client, service_ids):
    created = book(client, service_ids["Herreklip"]).json()

    by_token = client.get(f"/api/bookings/{created['cancel_token']}")
    assert by_token.status_code == 200
    assert by_token.json()["id"] == created["id"]
    assert by_token.json()["cancel_token"] is None

    assert client.get("/api/bookings/unknown-token").status_code == 404
    assert client.get("/api/bookings/9999").status_code == 404


def test_customer_cancels_with_notice(client, service_ids):
    haircut = service_ids["Herreklip"]
    created = book(client, haircut, date=WEDNESDAY, start_time="10:00").json()
    assert created["can_cancel"] is True

    response = client.put(f"/api/bookings/{created['cancel_token']}", json={"status": "cancelled"})
    assert response.status_code == 200
    assert response.json()["status"] == "cancelled"

    again = client.put(f"/api/bookings/{created['cancel_token']}", json={"status": "cancelled"})
    assert again.status_code == 400
    assert again.json()["detail"]["reason"] == "not_confirmed"

    # Отменённая запись не занимает время
    assert book(client, haircut, date=WEDNESDAY, start_time="10:00").status_code == 201


def test_customer_cannot_cancel_within_24_hours(client, service_ids):
    created = book(client, service_ids["Herreklip"], start_time="12:00").json()
    response = client.put(f"/api/bookings/{created['cancel_token']}", json={"status": "cancelled"})
    assert response.status_code == 400
    assert response.json()["detail"]["error"] == "Cancellation not allowed within 24 hours of appointment"


def test_admin_cancels_any_time(admin_client, service_ids):
    created = book(admin_client, service_ids["Herreklip"], start_time="12:00").json()
    response = admin_client.put(f"/api/bookings/{created['id']}", json={"status": "cancelled"})
    assert response.status_code == 200
    assert response.json()["status"] == "cancelled"


def test_admin_delete_cancels(admin_client, service_ids):
    created = book(admin_client, service_ids["Herreklip"], start_time="12:00").json()
    assert admin_client.delete(f"/api/bookings/{created['id']}").status_code == 200
    assert admin_client.get(f"/api/bookings/{created['id']}").json()["status"] == "cancelled"
    assert admin_client.delete("/api/bookings/9999").status_code == 404


def test_completion_requires_admin(client, service_ids):
    created = book(client, service_ids["Herreklip"]).json()
    response = client.put(f"/api/bookings/{created['id']}", json={"status": "completed"})
    assert response.status_code == 401

    client.post("/api/admin/login", json={"password": "test-admin"})
    response = client.put(f"/api/bookings/{created['id']}", json={"status": "completed"})
    assert response.status_code == 200
    assert response.json()["status"] == "completed"

    cancel = client.put(f"/api/bookings/{created['id']}", json={"status": "cancelled"})
    assert cancel.json()["detail"]["reason"] == "not_confirmed"


def test_unknown_status_rejected(client, service_ids):
    created = book(client, service_ids["Herreklip"]).json()
    assert client.put(f"/api/bookings/{created['id']}", json={"status": "confirmed"}).status_code == 422


def test_admin_lists_bookings(client, service_ids):
    haircut = service_ids["Herreklip"]
    book(client, haircut, start_time="10:00")
    book(client, haircut, date=WEDNESDAY, start_time="11:00")

    assert client.get("/api/bookings").status_code == 401

    client.post("/api/admin/login", json={"password": "test-admin"})
    assert len(client.get("/api/bookings").json()) == 2

    on_monday = client.get("/api/bookings", params={"date": MONDAY}).json()
    assert [b["start_time"] for b in on_monday] == ["10:00"]

    assert client.get("/api/bookings", params={"status": "cancelled"}).json() == []


def test_logged_in_customer_is_attached(client, db, service_ids):
    client.post(
        "/api/auth/register",
        json={"email": "Maja@Example.com", "password": "secret1", "name": "Maja"}
    )
    created = book(client, service_ids["Herreklip"], customer_email="maja@example.com").json()

    booking = db.query(Booking).filter(Booking.id == created["id"]).one()
    assert booking.customer_id is not None
    assert booking.customer.email == "maja@example.com"
    assert booking.booking_date == date(2030, 6, 3)


def test_guest_cannot_reach_booking_by_id(client, service_ids):
    created = book(client, service_ids["Herreklip"], date=WEDNESDAY).json()

    assert client.get(f"/api/bookings/{created['id']}").status_code == 404
    response = client.put(f"/api/bookings/{created['id']}", json={"status": "cancelled"})
    assert response.status_code == 404

    client.post("/api/admin/login", json={"password": "test-admin"})
    by_admin = client.get(f"/api/bookings/{created['id']}").json()
    assert by_admin["status"] == "confirmed"
    assert by_admin["cancel_token"] == created["cancel_token"]


def test_owner_reaches_own_booking_by_id(client, service_ids):
    client.post(
        "/api/auth/register",
        json={"email": "maja@example.com", "password": "secret1", "name": "Maja"}
    )
    created = book(client, service_ids["Herreklip"], date=WEDNESDAY, customer_email="maja@example.com").json()

    own = client.get(f"/api/bookings/{created['id']}")
    assert own.status_code == 200
    assert own.json()["cancel_token"] is None

    response = client.put(f"/api/bookings/{created['id']}", json={"status": "cancelled"})
    assert response.status_code == 200
    assert response.json()["status"] == "cancelled"


def test_other_customer_cannot_reach_booking_by_id(client, service_ids):
    client.post(
        "/api/auth/register",
        json={"email": "maja@example.com", "password": "secret1", "name": "Maja"}
    )
    created = book(client, service_ids["Herreklip"], date=WEDNESDAY, customer_email="maja@example.com").json()
    client.post("/api/auth/logout")
    client.post(
        "/api/auth/register",
        json={"email": "ole@example.com", "password": "secret2", "name": "Ole"}
    )

    assert client.get(f"/api/bookings/{created['id']}").status_code == 404
    response = client.put(f"/api/bookings/{created['id']}", json={"status": "cancelled"})
    assert response.status_code == 404
