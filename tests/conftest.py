import os

# Настройки должны быть выставлены до первого импорта salon.*
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["ADMIN_PASSWORD"] = "test-admin"
os.environ["ENVIRONMENT"] = "test"

from datetime import datetime  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from salon.database import get_db, init_db  # noqa: E402
from salon.main import app  # noqa: E402
from salon.models.service import Service  # noqa: E402
from salon.routes.deps import get_now  # noqa: E402
from salon.seed import seed_defaults  # noqa: E402

# Понедельник, рабочий день 09:00-17:00
NOW = datetime(2030, 6, 3, 7, 0)
MONDAY = "2030-06-03"
WEDNESDAY = "2030-06-05"
SATURDAY = "2030-06-08"
SUNDAY = "2030-06-09"


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool
    )
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def salon(db):
    return seed_defaults(db, with_services=True)


@pytest.fixture
def client(session_factory, salon):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_now] = lambda: NOW
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def admin_client(client):
    response = client.post("/api/admin/login", json={"password": "test-admin"})
    assert response.status_code == 200
    return client


@pytest.fixture
def service_ids(db, salon):
    """Имя услуги -> id"""
    return {s.name: s.id for s in db.query(Service).filter(Service.salon_id == salon.id)}


def booking_payload(service_id, date=MONDAY, start_time="10:00", **overrides):
    payload = {
        "service_id": service_id,
        "date": date,
        "start_time": start_time,
        "customer_name": "Anna Hansen",
        "customer_email": "anna@example.com",
        "customer_phone": "+4512345678",
    }
    payload.update(overrides)
    return payload
