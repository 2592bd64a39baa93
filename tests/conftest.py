from datetime import date, timedelta

import pytest
from fastapi.testclient import TestClient
from pydantic import TypeAdapter

from leave_tracker.config import Settings
from leave_tracker.main import create_app
from leave_tracker.schemas.user import RegistrationDraft
from leave_tracker.services.identity import register_user

_drafts = TypeAdapter(RegistrationDraft)

PASSWORD = "secret123"


def student_data(n=1, department="CSE", **overrides):
    data = {
        "role": "student",
        "name": f"Student {n}",
        "email": f"student{n}@college.edu",
        "password": PASSWORD,
        "department": department,
        "phone": f"98765{n:05d}",
        "roll_number": f"{department}{n:04d}",
        "semester": 3,
    }
    data.update(overrides)
    return data


def faculty_data(n=1, department="CSE", **overrides):
    data = {
        "role": "faculty",
        "name": f"Faculty {n}",
        "email": f"faculty{n}@college.edu",
        "password": PASSWORD,
        "department": department,
        "phone": f"91234{n:05d}",
        "employee_id": f"EMP{n:03d}",
    }
    data.update(overrides)
    return data


def admin_data(**overrides):
    data = {
        "role": "admin",
        "name": "Admin User",
        "email": "admin@college.edu",
        "password": PASSWORD,
        "department": "CSE",
        "phone": "9000000000",
    }
    data.update(overrides)
    return data


def leave_data(start_in=5, days=3, **overrides):
    start = date.today() + timedelta(days=start_in)
    data = {
        "leave_type": "medical",
        "start_date": start.isoformat(),
        "end_date": (start + timedelta(days=days - 1)).isoformat(),
        "reason": "Fever and rest advised by doctor",
    }
    data.update(overrides)
    return data


@pytest.fixture
def settings():
    return Settings(
        database_url="sqlite://",
        secret_key="test-secret-key",
        password_hash_iterations=1000,
        environment="test",
        log_level="WARNING",
    )


@pytest.fixture
def app(settings):
    return create_app(settings)


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def db(app):
    session = app.state.session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def make_user(db, settings):
    """Create an identity directly through the registration service."""
    def _make_user(data):
        return register_user(db, _drafts.validate_python(data), settings)
    return _make_user


@pytest.fixture
def login(client):
    """Log in over HTTP and return ready-to-use auth headers."""
    def _login(data):
        response = client.post(
            "/api/auth/login",
            json={"email": data["email"], "password": data["password"], "role": data["role"]},
        )
        assert response.status_code == 200, response.text
        return {"Authorization": f"Bearer {response.json()['token']}"}
    return _login
