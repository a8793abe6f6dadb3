import asyncio
import os
import shutil
import tempfile
from pathlib import Path

# must be set before the app module is imported: it mounts UPLOAD_DIR at /uploads
UPLOAD_ROOT = Path(tempfile.mkdtemp(prefix="incident-hub-uploads-"))
os.environ["UPLOAD_DIR"] = str(UPLOAD_ROOT)

import httpx
import pytest
from fastapi.testclient import TestClient
from mongomock_motor import AsyncMongoMockClient

from incident_hub.api.deps import get_maps_client, get_profile_cache
from incident_hub.core.config import Settings, get_settings
from incident_hub.db.session import get_db
from incident_hub.main import app
from incident_hub.models.common import new_id, utcnow
from incident_hub.services.maps_client import GoogleMapsClient
from incident_hub.services.profile_cache import ProfileCache


def run(coro):
    return asyncio.run(coro)


class FakeMaps:
    """
    Stand-in for the Google endpoints, served through httpx.MockTransport.
    Tests tweak the canned responses and read `calls` afterwards.
    """

    def __init__(self):
        self.geolocation = (200, {"location": {"lat": 51.5074, "lng": -0.1278}, "accuracy": 1200})
        self.geocode = (200, {"status": "OK", "results": [{"formatted_address": "10 Downing St, London"}]})
        self.calls = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.calls.append(request)
        if "geolocate" in request.url.path:
            status, body = self.geolocation
        else:
            status, body = self.geocode
        if isinstance(body, Exception):
            raise body
        return httpx.Response(status, json=body)

    @property
    def transport(self):
        return httpx.MockTransport(self.handler)

    def calls_to(self, fragment):
        return [c for c in self.calls if fragment in c.url.path]


@pytest.fixture
def db():
    return AsyncMongoMockClient()["incident_hub_test"]


@pytest.fixture
def settings():
    # same directory the app serves, emptied for every test
    shutil.rmtree(UPLOAD_ROOT, ignore_errors=True)
    UPLOAD_ROOT.mkdir(parents=True, exist_ok=True)
    return Settings(
        mongo_db="incident_hub_test",
        upload_dir=str(UPLOAD_ROOT),
        public_base_url="http://testserver",
        google_maps_api_key=None,
        device_timeout_seconds=0.5,
    )


@pytest.fixture
def fake_maps():
    return FakeMaps()


@pytest.fixture
def cache():
    return ProfileCache()


@pytest.fixture
def client(db, settings, fake_maps, cache):
    app.dependency_overrides[get_db] = lambda: db
    app.dependency_overrides[get_settings] = lambda: settings
    app.dependency_overrides[get_profile_cache] = lambda: cache
    maps_settings = settings.model_copy(update={"google_maps_api_key": "test-key"})
    app.dependency_overrides[get_maps_client] = lambda: GoogleMapsClient(
        maps_settings, transport=fake_maps.transport
    )
    yield TestClient(app)
    app.dependency_overrides.clear()


def register(client, email="citizen@example.com", password="secret123"):
    r = client.post("/auth/register", json={"email": email, "password": password})
    assert r.status_code == 201, r.text
    data = r.json()
    return data["principal_id"], {"Authorization": f"Bearer {data['token']}"}


def onboard(client, headers, role="Citizen", name="Dana"):
    r = client.post(
        "/profiles",
        json={"name": name, "age": 34, "gender": "female", "profession": "teacher", "role": role},
        headers=headers,
    )
    assert r.status_code == 201, r.text
    return r.json()


@pytest.fixture
def citizen(client):
    principal_id, headers = register(client)
    onboard(client, headers)
    return principal_id, headers


def seed_report(db, latitude=None, longitude=None, **fields):
    """Insert a report row directly, bypassing the submission flow."""
    now = utcnow()
    doc = {
        "_id": new_id(),
        "profile_id": "someone-else",
        "location_string": "Somewhere",
        "description": "Pothole",
        "latitude": latitude,
        "longitude": longitude,
        "address": None,
        "photo_urls": [],
        "status": "pending",
        "created_at": now,
        "updated_at": now,
    }
    doc.update(fields)
    run(db.reports.insert_one(doc))
    return doc
