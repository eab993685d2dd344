"""Pytest configuration and fixtures."""

from types import SimpleNamespace
from typing import Dict, List, Optional

import pytest

from blockforge import create_app
from blockforge.extensions import db
from blockforge.models.user import User
from blockforge.rendering.assets import AssetKind, AssetMetadata

START_TIME = 1_700_000_000


@pytest.fixture
def app():
    """Application bound to an in-memory database."""
    app = create_app("testing")

    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


def make_user(email, role, password="secret-password", **kwargs):
    user = User(email=email, role=role, **kwargs)
    user.set_password(password)
    db.session.add(user)
    db.session.commit()
    return user


@pytest.fixture
def admin_user(app):
    return make_user("admin@example.com", "admin", display_name="Admin")


@pytest.fixture
def editor_user(app):
    return make_user("editor@example.com", "editor")


def login(client, email, password="secret-password"):
    response = client.post("/api/v1/auth/login", json={"email": email, "password": password})
    assert response.status_code == 200, response.get_json()
    return response.get_json()


@pytest.fixture
def admin_headers(client, admin_user):
    tokens = login(client, admin_user.email)
    return {"Authorization": f"Bearer {tokens['access_token']}"}


@pytest.fixture
def editor_headers(client, editor_user):
    tokens = login(client, editor_user.email)
    return {"Authorization": f"Bearer {tokens['access_token']}"}


# ----------------------------------------------------------------------
# Time
# ----------------------------------------------------------------------
class FakeClock:
    """Wall clock that only moves when told to."""

    def __init__(self, now=START_TIME):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, seconds=1):
        self.now += seconds
        return self.now


@pytest.fixture
def clock(monkeypatch):
    """Snapshot timestamps come from this clock instead of time.time()."""
    fake = FakeClock()
    monkeypatch.setattr("blockforge.versioning.store.time", SimpleNamespace(time=fake))
    return fake


class FakeTimer:
    def __init__(self, when, callback):
        self.when = when
        self.callback = callback
        self.cancelled = False

    def cancel(self):
        self.cancelled = True


class FakeScheduler:
    """Deterministic stand-in for the event loop's call_later."""

    def __init__(self):
        self.now = 0.0
        self.timers: List[FakeTimer] = []

    def call_later(self, delay, callback):
        timer = FakeTimer(self.now + delay, callback)
        self.timers.append(timer)
        return timer

    @property
    def pending(self):
        return [timer for timer in self.timers if not timer.cancelled]

    def advance(self, seconds):
        target = self.now + seconds
        while True:
            due = [t for t in self.pending if t.when <= target]
            if not due:
                break
            timer = min(due, key=lambda t: t.when)
            self.timers.remove(timer)
            self.now = timer.when
            timer.callback()
        self.now = target


@pytest.fixture
def scheduler():
    return FakeScheduler()


# ----------------------------------------------------------------------
# Assets
# ----------------------------------------------------------------------
class FakeAssetLookup:
    def __init__(self, items: Optional[Dict[int, AssetMetadata]] = None):
        self.items = dict(items or {})
        self.calls = []

    async def resolve(self, kind, asset_id, *, types=()):
        self.calls.append((kind, asset_id, tuple(types)))
        return self.items.get(asset_id)

    async def search(self, query, *, post_types=("global_blocks",), limit=20):
        return [
            item for item in self.items.values()
            if item.kind is AssetKind.POST and query.lower() in item.title.lower()
        ][:limit]


def image(asset_id, title="Image"):
    return AssetMetadata(
        id=asset_id,
        kind=AssetKind.MEDIA,
        title=title,
        url=f"/uploads/{asset_id}.jpg",
        filename=f"{asset_id}.jpg",
        mime_type="image/jpeg",
    )


@pytest.fixture
def asset_lookup():
    return FakeAssetLookup({12: image(12, "Logo")})
