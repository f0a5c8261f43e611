from __future__ import annotations

import copy
import json

import httpx
import pytest
from fastapi.testclient import TestClient

from portal.dependencies import get_fixture_store, get_storage
from portal.main import app
from portal.schemas.session import PortalSession
from portal.schemas.user import UserRole
from portal.services.fixtures import FixtureStore
from portal.services.overlay import OverlayStore
from portal.services.session import SessionState
from portal.services.storage import MemoryStorage

FIXTURES_BASE_URL = "http://fixtures.test/data/"

SEED: dict[str, object] = {
    "properties.json": [
        {"id": "P-001", "name": "Pine Hollow", "address": "1 Forest Rd", "timezone": "America/Denver"},
        {"id": "P-002", "name": "Lakeside", "address": "9 Shore Dr", "timezone": "America/Denver"},
    ],
    "cabins.json": [
        {"id": "C-014", "propertyId": "P-001", "name": "Cabin 14", "status": "Active"},
        {"id": "C-015", "propertyId": "P-001", "name": "Cabin 15", "status": "Active"},
        {"id": "C-016", "propertyId": "P-001", "name": "Cabin 16", "status": "Active"},
        {"id": "C-101", "propertyId": "P-002", "name": "Cabin 101", "status": "Maintenance"},
    ],
    "users.json": [
        {"id": "U-1001", "email": "rita@example.com", "name": "Rita Renter", "role": "Renter",
         "propertyIds": ["P-001"], "cabinId": "C-014"},
        {"id": "U-1002", "email": "ray@example.com", "name": "Ray Renter", "role": "Renter",
         "propertyIds": ["P-001"], "cabinId": "C-015", "isActive": True},
        {"id": "U-1003", "email": "old@example.com", "name": "Former Renter", "role": "Renter",
         "propertyIds": ["P-001"], "cabinId": "C-016", "isActive": False},
        {"id": "U-2001", "email": "sam@example.com", "name": "Sam Staff", "role": "Staff",
         "propertyIds": ["P-001", "P-002"], "cabinId": None},
        {"id": "U-9001", "email": "ada@example.com", "name": "Ada Admin", "role": "Admin",
         "propertyIds": ["P-001", "P-002"], "cabinId": None},
    ],
    "tickets.json": [
        {"id": "T-001", "propertyId": "P-001", "cabinId": "C-014", "createdByUserId": "U-1001",
         "assignedToUserId": None, "category": "Plumbing", "subcategory": "Leak", "priority": "High",
         "status": "Open", "description": "Kitchen sink drips",
         "createdAt": "2025-01-02T10:00:00.000Z", "updatedAt": "2025-01-02T10:00:00.000Z"},
        {"id": "T-002", "propertyId": "P-001", "cabinId": "C-015", "createdByUserId": "U-1002",
         "assignedToUserId": "U-2001", "category": "HVAC", "subcategory": "Heating", "priority": "Urgent",
         "status": "In Progress", "description": "No heat",
         "createdAt": "2025-01-03T08:00:00.000Z", "updatedAt": "2025-01-04T08:00:00.000Z"},
        {"id": "T-003", "propertyId": "P-001", "cabinId": "C-014", "createdByUserId": "U-1001",
         "assignedToUserId": "U-2001", "category": "Electrical", "subcategory": "Outlet", "priority": "Low",
         "status": "Resolved", "description": "Dead outlet",
         "createdAt": "2024-12-01T08:00:00.000Z", "updatedAt": "2024-12-05T08:00:00.000Z"},
    ],
    "notices.json": [
        {"id": "N-001", "propertyId": "P-001", "title": "Quiet hours", "bodyMarkdown": "10pm-7am",
         "startsAt": "2025-01-01T00:00:00.000Z", "endsAt": "2099-01-01T00:00:00.000Z", "isPinned": True},
        {"id": "N-002", "propertyId": "P-001", "title": "Snow removal", "bodyMarkdown": "Move cars",
         "startsAt": "2025-01-10T00:00:00.000Z", "endsAt": "2025-02-01T00:00:00.000Z", "isPinned": False},
        {"id": "N-003", "propertyId": "P-002", "title": "Dock closed", "bodyMarkdown": "Repairs",
         "startsAt": "2025-01-05T00:00:00.000Z", "endsAt": "2099-01-01T00:00:00.000Z", "isPinned": False},
    ],
    "outages.json": [
        {"id": "O-001", "propertyId": "P-001", "title": "Water shutoff", "bodyMarkdown": "Main repair",
         "startsAt": "2025-01-01T00:00:00.000Z", "endsAt": "2099-01-01T00:00:00.000Z", "status": "Active"},
        {"id": "O-002", "propertyId": "P-002", "title": "Power work", "bodyMarkdown": "Transformer",
         "startsAt": "2025-03-01T00:00:00.000Z", "endsAt": "2025-03-02T00:00:00.000Z", "status": "Planned"},
    ],
    "community.json": {
        "threads": [
            {"id": "TH-001", "propertyId": "P-001", "createdByUserId": "U-9001", "title": "Welcome",
             "bodyMarkdown": "Say hi", "isPinned": True, "isLocked": False,
             "createdAt": "2024-12-01T00:00:00.000Z", "updatedAt": "2024-12-01T00:00:00.000Z"},
            {"id": "TH-002", "propertyId": "P-001", "createdByUserId": "U-1002", "title": "Lost cat",
             "bodyMarkdown": "Grey tabby", "isPinned": False,
             "createdAt": "2025-01-05T00:00:00.000Z", "updatedAt": "2025-01-06T00:00:00.000Z"},
            {"id": "TH-003", "propertyId": "P-001", "createdByUserId": "U-1001", "title": "Firewood",
             "bodyMarkdown": "Anyone selling?", "isPinned": False, "isLocked": False,
             "createdAt": "2025-01-01T00:00:00.000Z", "updatedAt": "2025-01-02T00:00:00.000Z"},
            {"id": "TH-010", "propertyId": "P-002", "createdByUserId": "U-9001", "title": "Lake rules",
             "bodyMarkdown": "No motors", "isPinned": False, "isLocked": True,
             "createdAt": "2025-01-01T00:00:00.000Z", "updatedAt": "2025-01-01T00:00:00.000Z"},
        ],
        "replies": [
            {"id": "RP-002", "threadId": "TH-001", "createdByUserId": "U-1002", "bodyMarkdown": "Hello!",
             "createdAt": "2024-12-03T00:00:00.000Z"},
            {"id": "RP-001", "threadId": "TH-001", "createdByUserId": "U-1001", "bodyMarkdown": "Hi all",
             "createdAt": "2024-12-02T00:00:00.000Z"},
        ],
    },
    "kb.json": [
        {"id": "KB-001", "propertyId": "P-001", "title": "Reset breaker", "symptoms": "No power",
         "stepsMarkdown": "1. Open panel", "tags": ["electrical"], "createdByUserId": "U-2001", "upvotes": 3,
         "createdAt": "2024-11-01T00:00:00.000Z", "updatedAt": "2024-11-01T00:00:00.000Z"},
        {"id": "KB-002", "propertyId": "P-002", "title": "Dock lights", "symptoms": "Dark dock",
         "stepsMarkdown": "1. Flip switch", "tags": [], "createdByUserId": "U-2001", "upvotes": 0,
         "createdAt": "2024-11-01T00:00:00.000Z", "updatedAt": "2024-11-01T00:00:00.000Z"},
    ],
}


def seed_handler(request: httpx.Request) -> httpx.Response:
    filename = request.url.path.rsplit("/", 1)[-1]
    if filename not in SEED:
        return httpx.Response(404, text="Not Found")
    return httpx.Response(200, content=json.dumps(SEED[filename]), headers={"Content-Type": "application/json"})


def make_fixture_store(handler=seed_handler, retries: int = 1) -> FixtureStore:
    client = httpx.Client(transport=httpx.MockTransport(handler))
    return FixtureStore(FIXTURES_BASE_URL, client=client, retries=retries)


def seed_copy(filename: str):
    return copy.deepcopy(SEED[filename])


@pytest.fixture
def storage() -> MemoryStorage:
    return MemoryStorage()


@pytest.fixture
def overlays(storage) -> OverlayStore:
    return OverlayStore(storage)


@pytest.fixture
def session_state(storage) -> SessionState:
    return SessionState(storage)


@pytest.fixture
def fixtures():
    store = make_fixture_store()
    yield store
    store.close()


@pytest.fixture
def act_as(session_state):
    """Switch the simulated session: act_as("Renter", "U-1001", cabin_id="C-014")."""

    def _act_as(role: str, user_id: str, property_id: str = "P-001", cabin_id: str | None = None) -> PortalSession:
        return session_state.set(
            PortalSession(role=UserRole(role), user_id=user_id, property_id=property_id, cabin_id=cabin_id)
        )

    return _act_as


@pytest.fixture
def client(storage, fixtures):
    app.dependency_overrides[get_storage] = lambda: storage
    app.dependency_overrides[get_fixture_store] = lambda: fixtures
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
