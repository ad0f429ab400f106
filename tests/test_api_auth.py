from datetime import date

from conftest import WEDNESDAY, booking_payload
from salon.models.booking import Booking
from salon.models.customer import Customer
from salon.services.bookings import generate_cancel_token

ACCOUNT = {"email": "Maja@Example.com", "password": "secret1", "name": "Maja Jensen", "phone": "+4511223344"}


def register(client, **overrides):
    return client.post("/api/auth/register", json={**ACCOUNT, **overrides})


def test_register_logs_in(client):
    response = register(client)
    assert response.status_code == 201
    assert response.json()["email"] == "maja@example.com"

    me = client.get("/api/auth/me").json()
    assert me["customer"]["name"] == "Maja Jensen"


def test_password_is_hashed(client, db):
    register(client)
    customer = db.query(Customer).filter(Customer.email == "maja@example.com").one()
    assert customer.password_hash != "secret1"


def test_duplicate_email_rejected(client):
    register(client)
    response = register(client, email="MAJA@example.com")
    assert response.status_code == 400
    assert response.json()["detail"] == "Email already registered"


def test_register_validation(client):
    assert register(client, password="123").status_code == 422
    assert register(client, email="nope").status_code == 422


def test_login_and_logout(client):
    register(client)
    client.post("/api/auth/logout")
    assert client.get("/api/auth/me").json() == {"customer": None}

    assert client.post("/api/auth/login", json={"email": "maja@example.com", "password": "wrong1"}).status_code == 401

    response = client.post("/api/auth/login", json={"email": "MAJA@example.com", "password": "secret1"})
    assert response.status_code == 200
    assert client.get("/api/auth/me").json()["customer"]["email"] == "maja@example.com"


def test_stale_session_is_cleared(client, db):
    register(client)
    db.query(Customer).delete()
    db.commit()

    assert client.get("/api/auth/me").json() == {"customer": None}


def test_customer_bookings_require_login(client):
    assert client.get("/api/customer/bookings").status_code == 401


def test_customer_bookings_split(client, db, salon, service_ids):
    haircut = service_ids["Herreklip"]
    # Гостевая запись на тот же email до регистрации
    guest = client.post(
        "/api/bookings",
        json=booking_payload(haircut, date=WEDNESDAY, start_time="11:00", customer_email="maja@example.com")
    )
    assert guest.status_code == 201

    register(client)
    client.post("/api/bookings", json=booking_payload(haircut, start_time="10:00", customer_email="maja@example.com"))

    db.add(Booking(
        salon_id=salon.id,
        service_id=haircut,
        customer_name="Maja Jensen",
        customer_email="maja@example.com",
        booking_date=date(2030, 5, 20),
        start_time="10:00",
        end_time="10:30",
        status="completed",
        cancel_token=generate_cancel_token()
    ))
    db.commit()

    body = client.get("/api/customer/bookings").json()
    assert [(b["date"], b["start_time"]) for b in body["upcoming"]] == [("2030-06-03", "10:00"), (WEDNESDAY, "11:00")]
    assert [b["status"] for b in body["past"]] == ["completed"]


def test_cancelled_bookings_are_past(client, service_ids):
    register(client)
    created = client.post(
        "/api/bookings",
        json=booking_payload(service_ids["Herreklip"], date=WEDNESDAY, customer_email="maja@example.com")
    ).json()
    client.put(f"/api/bookings/{created['cancel_token']}", json={"status": "cancelled"})

    body = client.get("/api/customer/bookings").json()
    assert body["upcoming"] == []
    assert body["past"][0]["status"] == "cancelled"


def test_admin_login(client):
    assert client.post("/api/admin/login", json={"password": "wrong"}).status_code == 401
    assert client.post("/api/admin/login", json={"password": "test-admin"}).status_code == 200
    assert client.get("/api/blocked-slots").status_code == 200

    client.post("/api/admin/logout")
    assert client.get("/api/blocked-slots").status_code == 401


def test_admin_and_customer_sessions_coexist(client):
    register(client)
    client.post("/api/admin/login", json={"password": "test-admin"})
    client.post("/api/admin/logout")
    assert client.get("/api/auth/me").json()["customer"] is not None
