import os

# Must be set before the application settings are first loaded
os.environ["TESTING"] = "1"
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("TEST_DATABASE_URL", "sqlite:///./test.db")
os.environ.setdefault("BCRYPT_ROUNDS", "4")

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from medibook.main import app  # noqa: E402
from medibook.core.config import settings  # noqa: E402
from medibook.core.database import Base, SessionLocal, engine, init_db  # noqa: E402


# Test data
doctor_data = {
    "name": "Dr. A",
    "email": "a@x.com",
    "password": "pw",
    "specialty": "Cardio",
    "experience": 5,
    "location": "NYC",
    "availability": [{"day": "Mon", "startTime": "09:00", "endTime": "10:00"}],
}

patient_data = {
    "name": "Bob",
    "email": "b@x.com",
    "password": "secret",
    "age": 42,
    "gender": "male",
    "phone": "555-0100",
    "address": "1 Main St",
}


class FakeSMTP:
    """Stands in for smtplib.SMTP and records every sent message."""
    sent = []
    fail = False

    def __init__(self, host, port, timeout=None):
        self.host = host
        self.port = port

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        return False

    def starttls(self):
        pass

    def login(self, user, password):
        pass

    def send_message(self, message):
        if FakeSMTP.fail:
            raise OSError("relay unreachable")
        FakeSMTP.sent.append(message)


@pytest.fixture(scope="function")
def test_db():
    # Create tables
    init_db()
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db(test_db):
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(test_db):
    with TestClient(app, base_url="http://testserver") as test_client:
        yield test_client


@pytest.fixture
def smtp(monkeypatch):
    """Route notifications to FakeSMTP and return the list of sent messages."""
    FakeSMTP.sent = []
    FakeSMTP.fail = False
    monkeypatch.setattr(settings, "SMTP_HOST", "smtp.test")
    monkeypatch.setattr(settings, "MAIL_FROM", "clinic@example.com")
    monkeypatch.setattr("medibook.services.notification_service.smtplib.SMTP", FakeSMTP)
    yield FakeSMTP
    FakeSMTP.fail = False


# Helpers
def register_doctor(client, **overrides):
    payload = {**doctor_data, **overrides}
    response = client.post("/api/registerDoctor", json=payload)
    assert response.status_code == 201, response.json()
    return response.json()["doctor"]


def register_patient(client, **overrides):
    payload = {**patient_data, **overrides}
    response = client.post("/api/registerPatient", json=payload)
    assert response.status_code == 201, response.json()
    return response.json()["patient"]


def login(client, role, email, password):
    path = "/api/loginDoctor" if role == "doctor" else "/api/loginPatient"
    response = client.post(path, json={"email": email, "password": password})
    assert response.status_code == 200, response.json()
    return response.json()["token"]


def auth_headers(token):
    return {"Authorization": f"Bearer {token}"}
