from conftest import MONDAY, SATURDAY, SUNDAY


def test_weekly_schedule(client):
    response = client.get("/api/availability")
    assert response.status_code == 200
    rows = response.json()
    assert [r["day_of_week"] for r in rows] == list(range(7))
    assert rows[0]["is_available"] is False
    assert rows[1]["start_time"] == "09:00" and rows[1]["end_time"] == "17:00"
    assert rows[6]["start_time"] == "10:00" and rows[6]["end_time"] == "14:00"


def test_slots_for_open_day(client, service_ids):
    response = client.get("/api/availability", params={"date": MONDAY, "service_id": service_ids["Herreklip"]})
    assert response.status_code == 200
    body = response.json()
    assert body["date"] == MONDAY
    assert body["slots"][0] == "09:00"
    assert body["slots"][-1] == "16:30"
    assert len(body["slots"]) == 16
    assert "message" not in body


def test_slots_use_service_duration(client, service_ids):
    body = client.get("/api/availability", params={"date": MONDAY, "service_id": service_ids["Hårfarvning"]}).json()
    assert body["slots"][-1] == "16:00"
    assert len(body["slots"]) == 15


def test_unknown_service_falls_back_to_default_duration(client):
    body = client.get("/api/availability", params={"date": MONDAY, "service_id": 9999}).json()
    assert len(body["slots"]) == 16


def test_closed_day_message(client):
    body = client.get("/api/availability", params={"date": SUNDAY}).json()
    assert body["slots"] == []
    assert body["message"] == "Salon is closed on this day"


def test_saturday_hours(client):
    body = client.get("/api/availability", params={"date": SATURDAY}).json()
    assert body["slots"] == ["10:00", "10:30", "11:00", "11:30", "12:00", "12:30", "13:00", "13:30"]


def test_malformed_date(client):
    assert client.get("/api/availability", params={"date": "03-06-2030"}).status_code == 422
    assert client.get("/api/availability", params={"date": "2030-02-30"}).status_code == 400


def test_next_available(client, service_ids):
    response = client.get("/api/availability/next", params={"service_id": service_ids["Herreklip"], "limit": 3})
    assert response.status_code == 200
    assert response.json() == [
        {"date": MONDAY, "time": "09:00", "day_name": "Monday"},
        {"date": MONDAY, "time": "09:30", "day_name": "Monday"},
        {"date": MONDAY, "time": "10:00", "day_name": "Monday"},
    ]


def test_next_available_default_limit(client):
    assert len(client.get("/api/availability/next").json()) == 5


def test_update_availability_requires_admin(client):
    payload = {"day_of_week": 0, "start_time": "10:00", "end_time": "12:00", "is_available": True}
    assert client.put("/api/availability", json=payload).status_code == 401


def test_admin_opens_sunday(admin_client):
    payload = {"day_of_week": 0, "start_time": "10:00", "end_time": "12:00", "is_available": True}
    response = admin_client.put("/api/availability", json=payload)
    assert response.status_code == 200
    assert response.json()["is_available"] is True

    body = admin_client.get("/api/availability", params={"date": SUNDAY}).json()
    assert body["slots"] == ["10:00", "10:30", "11:00", "11:30"]
    assert len(admin_client.get("/api/availability").json()) == 7


def test_admin_closes_monday(admin_client):
    payload = {"day_of_week": 1, "start_time": "09:00", "end_time": "17:00", "is_available": False}
    assert admin_client.put("/api/availability", json=payload).status_code == 200
    assert admin_client.get("/api/availability", params={"date": MONDAY}).json()["slots"] == []


def test_invalid_availability_update(admin_client):
    reversed_hours = {"day_of_week": 1, "start_time": "17:00", "end_time": "09:00"}
    assert admin_client.put("/api/availability", json=reversed_hours).status_code == 400

    bad_day = {"day_of_week": 7, "start_time": "09:00", "end_time": "17:00"}
    assert admin_client.put("/api/availability", json=bad_day).status_code == 422

    bad_time = {"day_of_week": 1, "start_time": "24:00", "end_time": "25:00"}
    assert admin_client.put("/api/availability", json=bad_time).status_code == 422
