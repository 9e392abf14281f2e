"""
Pytest configuration: an in-memory Mongo store injected into the app
"""
import os

os.environ.setdefault("SECRET_KEY", "test-secret-key")

import pytest
from fastapi.testclient import TestClient
from mongomock_motor import AsyncMongoMockClient

from database.DB import Database
from main import create_app


EVENT_PAYLOAD = {
    "title": "Beach Cleanup Drive",
    "description": "Collect plastic waste along the shoreline.",
    "eventType": "beach-clean",
    "location": {"address": "Clifton Beach", "city": "Karachi"},
    "date": "2030-01-15",
    "startTime": "07:00",
    "endTime": "11:00",
    "volunteersNeeded": 5,
    "requirements": "Comfortable shoes",
}


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def database():
    return Database(database_name="test_ngo_volunteer_hub", client=AsyncMongoMockClient())


@pytest.fixture
async def store(database):
    """A connected store handle for service-level tests"""
    database.connect()
    await database.ensure_indexes()
    return database


@pytest.fixture
def client(database):
    """Create a test client"""
    with TestClient(create_app(database)) as test_client:
        yield test_client


def register_user(client, email, role, **extra):
    payload = {"name": email.split("@")[0], "email": email, "password": "password123", "role": role}
    if role == "ngo":
        payload["organizationName"] = f"{email.split('@')[0]} Foundation"
    payload.update(extra)
    response = client.post("/api/auth/register", json=payload)
    assert response.status_code == 201, response.text
    body = response.json()
    return {
        "id": body["data"]["_id"],
        "role": role,
        "headers": {"Authorization": f"Bearer {body['token']}"},
    }


def create_event(client, ngo, **overrides):
    payload = dict(EVENT_PAYLOAD, **overrides)
    response = client.post("/api/events", json=payload, headers=ngo["headers"])
    assert response.status_code == 201, response.text
    return response.json()["data"]


def register_for(client, volunteer, event_id, message=None):
    payload = {"eventId": event_id}
    if message is not None:
        payload["message"] = message
    return client.post("/api/registrations", json=payload, headers=volunteer["headers"])


@pytest.fixture
def ngo(client):
    return register_user(client, "ngo1@example.com", "ngo")


@pytest.fixture
def other_ngo(client):
    return register_user(client, "ngo2@example.com", "ngo")


@pytest.fixture
def volunteer(client):
    return register_user(client, "volunteer1@example.com", "volunteer",
                         phone="+92-333-1111111", skills=["First Aid"], availability="weekends")


@pytest.fixture
def volunteer2(client):
    return register_user(client, "volunteer2@example.com", "volunteer")
