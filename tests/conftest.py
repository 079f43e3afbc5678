"""Shared pytest fixtures for the MoodMate API."""

from __future__ import annotations

import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

# Ensure the application package is importable during tests.
PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from moodmate.main import create_app  # noqa: E402
from moodmate.storage import Stores  # noqa: E402

TEST_PREDICT_URL = "http://predict.test/predict"


class FakeClock:
    """Return strictly increasing ISO timestamps, one second apart."""

    def __init__(self) -> None:
        self._now = datetime(2024, 1, 1, tzinfo=timezone.utc)

    def __call__(self) -> str:
        self._now += timedelta(seconds=1)
        return self._now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


@pytest.fixture
def data_dir(tmp_path: Path) -> Path:
    return tmp_path / "data"


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def stores(data_dir: Path, clock: FakeClock) -> Stores:
    return Stores(data_dir, clock=clock).load()


@pytest.fixture
def make_app(data_dir: Path):
    """Build an app over the given stores, as a fresh process would."""

    def _make_app(app_stores: Stores):
        return create_app(
            {
                "TESTING": True,
                "DATA_DIR": str(data_dir),
                "BCRYPT_LOG_ROUNDS": 4,
                "PREDICT_URL": TEST_PREDICT_URL,
                "PREDICT_TIMEOUT_SECONDS": 2.5,
            },
            stores=app_stores,
        )

    return _make_app


@pytest.fixture
def app(make_app, stores: Stores):
    return make_app(stores)


@pytest.fixture
def client(app):
    return app.test_client()


def register_and_login(client, email="ana@example.com", password="secret123", name="Ana"):
    client.post("/api/auth/register", json={"name": name, "email": email, "password": password})
    resp = client.post("/api/auth/login", json={"email": email, "password": password})
    assert resp.status_code == 200, resp.get_json()
    return {"X-Session-ID": resp.get_json()["data"]["sessionId"]}


@pytest.fixture
def login(client):
    """Register (if needed) and log in a user, returning request headers."""

    def _login(email="ana@example.com", password="secret123", name="Ana"):
        return register_and_login(client, email=email, password=password, name=name)

    return _login
