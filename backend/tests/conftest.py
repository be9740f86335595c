import sys
from pathlib import Path

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

# backend/ modules import each other by top-level name
BACKEND_ROOT = Path(__file__).resolve().parents[1]
if str(BACKEND_ROOT) not in sys.path:
    sys.path.insert(0, str(BACKEND_ROOT))

from main import app, get_current_user_id, get_store
from services import bookings
from store import MemoryStore

ME = "alex"


def make_user(uid, name, friends=(), vibe="exploring"):
    return {
        "id": uid,
        "name": name,
        "avatarUrl": f"/media/{uid}.jpg",
        "vibeStatus": vibe,
        "friends": list(friends),
    }


def make_venue(vid, name, vtype="Bar", vibe="Chill"):
    return {
        "id": vid,
        "name": name,
        "type": vtype,
        "vibe": vibe,
        "description": f"{name} description",
        "location": {"address": "1 Main St", "distance": "0.5 mi", "lat": 40.7, "lng": -74.0},
        "mediaUrl": f"/media/{vid}.mp4",
        "thumbnailUrl": f"/media/{vid}.jpg",
    }


def make_interest(iid, user_id, venue_id, created="2026-10-01T00:00:00.000Z"):
    return {"id": iid, "userId": user_id, "venueId": venue_id, "createdAt": created}


def make_invite(iid, venue_id, from_id, to_id, status="pending", created="2026-10-01T00:00:00.000Z"):
    return {
        "id": iid,
        "venueId": venue_id,
        "fromUserId": from_id,
        "toUserId": to_id,
        "status": status,
        "proposedTime": "2026-10-20T21:00:00.000Z",
        "createdAt": created,
    }


@pytest.fixture
def seed():
    """alex is the current user; bob and cara are friends; dan and eve are not."""
    return {
        "users": [
            make_user(ME, "Alex", friends=["bob", "cara"], vibe="ready_to_mingle"),
            make_user("bob", "Bob", friends=[ME]),
            make_user("cara", "Cara", friends=[ME]),
            make_user("dan", "Dan"),
            make_user("eve", "Eve"),
        ],
        "venues": [
            make_venue("v1", "Blue Note", vtype="Jazz Club", vibe="Intimate"),
            make_venue("v2", "Smoke", vtype="Jazz Club", vibe="Smoky"),
            make_venue("v3", "Rooftop 99", vtype="Rooftop Bar", vibe="Vibrant"),
        ],
        "interests": [
            make_interest("i1", "bob", "v1"),
            make_interest("i2", "cara", "v1"),
            make_interest("i3", "dan", "v1"),
            make_interest("i4", ME, "v2"),
        ],
        "invites": [],
        "bookings": [],
    }


@pytest.fixture
def store(seed):
    return MemoryStore(seed)


@pytest.fixture
def no_booking_delay(monkeypatch):
    monkeypatch.setattr(bookings, "SIMULATED_DELAY_S", (0.0, 0.0))


@pytest_asyncio.fixture
async def api_client(store, no_booking_delay):
    app.dependency_overrides[get_store] = lambda: store
    app.dependency_overrides[get_current_user_id] = lambda: ME
    transport = ASGITransport(app=app)
    try:
        async with AsyncClient(transport=transport, base_url="http://testserver") as client:
            yield client
    finally:
        app.dependency_overrides.clear()
