# conftest.py
import os
import tempfile
from datetime import datetime, timezone

import pytest

_tmp = tempfile.mkdtemp(prefix="menuboard-test-")
os.environ.setdefault("APP_SECRET", "test-secret-" + "x" * 32)
os.environ.setdefault("DB_URL", f"sqlite:///{_tmp}/menuboard.db")
os.environ["TZ"] = "UTC"
os.environ.setdefault("LOG_LEVEL", "WARNING")

from fastapi.testclient import TestClient  # noqa: E402

from menuboard.bootstrap import ensure_admin  # noqa: E402
from menuboard.db import Base, SessionLocal, engine  # noqa: E402
from menuboard.deps import get_clock  # noqa: E402
from menuboard.main import app  # noqa: E402
from menuboard.services.clock import FixedClock  # noqa: E402

ADMIN_EMAIL = "admin@quintal.test"
ADMIN_PASSWORD = "admin"

@pytest.fixture(autouse=True)
def fresh_db():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    with SessionLocal() as db:
        ensure_admin(db, ADMIN_EMAIL, ADMIN_PASSWORD)
    yield

@pytest.fixture
def clock():
    # Monday 2024-01-15 12:00 UTC
    c = FixedClock(datetime(2024, 1, 15, 12, 0, tzinfo=timezone.utc))
    app.dependency_overrides[get_clock] = lambda: c
    yield c
    app.dependency_overrides.pop(get_clock, None)

@pytest.fixture
def client(clock):
    with TestClient(app) as c:
        yield c

def login(client, email, password):
    r = client.post("/auth/login", json={"email": email, "password": password})
    assert r.status_code == 200, f"/auth/login failed: {r.text}"
    return {"Authorization": f"Bearer {r.json()['access_token']}"}

@pytest.fixture
def auth_headers(client):
    return login(client, ADMIN_EMAIL, ADMIN_PASSWORD)
