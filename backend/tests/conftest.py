"""
Test configuration and fixtures for the demo bank backend tests.
"""
import os

# Set test environment BEFORE any imports
os.environ["ENVIRONMENT"] = "test"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["SEED_DEMO_DATA"] = "false"
os.environ.setdefault("SESSION_SECRET", "test-session-secret-key-for-testing-only-0123456789")

from datetime import datetime, timedelta
from decimal import Decimal
from typing import Dict

import pytest
from fastapi.testclient import TestClient

from demobank.client import ApiClient
from demobank.database import Store
from demobank.main import create_app
from demobank.models import Account
from demobank.seed import DEMO_EMAIL, DEMO_PASSWORD, seed_database
from demobank.services import auth_service


class FakeClock:
    """Controllable clock handed to the store."""

    def __init__(self, start: datetime):
        self.current = start

    def __call__(self) -> datetime:
        return self.current

    def advance(self, **kwargs) -> datetime:
        self.current = self.current + timedelta(**kwargs)
        return self.current


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(datetime(2024, 1, 1, 12, 0, 0))


@pytest.fixture
def store(clock):
    """Fresh, empty in-memory store."""
    store = Store("sqlite://", clock=clock)
    yield store
    store.dispose()


@pytest.fixture
def seeded_store(store, clock):
    with store.session() as db:
        seed_database(db, now=clock())
    return store


@pytest.fixture
def db(store):
    with store.session() as session:
        yield session


@pytest.fixture
def app(seeded_store):
    return create_app(store=seeded_store)


@pytest.fixture
def client(app) -> TestClient:
    """Synchronous test client around an app with demo data."""
    return TestClient(app)


@pytest.fixture
def api_client(seeded_store) -> ApiClient:
    return ApiClient(store=seeded_store)


@pytest.fixture
def demo_credentials() -> Dict[str, str]:
    return {"email": DEMO_EMAIL, "password": DEMO_PASSWORD}


@pytest.fixture
def demo_token(client, demo_credentials) -> str:
    response = client.post("/auth/login", json=demo_credentials)
    assert response.status_code == 200
    return response.json()["token"]


@pytest.fixture
def auth_headers(demo_token) -> Dict[str, str]:
    return {"Authorization": f"Bearer {demo_token}"}


@pytest.fixture
def funded_user(db):
    """A registered user whose default account holds exactly 100.00, plus a second internal account."""
    result = auth_service.register(db, "alice@example.com", "s3cret-pass", "Alice")
    user = auth_service.require_auth(db, result["token"])
    source = db.query(Account).filter(Account.user_id == user.id).one()
    source.balance = Decimal("100.00")
    destination = Account(
        id="acct-dest",
        user_id=user.id,
        name="Alice Savings",
        number="5555000011",
        balance=Decimal("50.00"),
        currency="USD",
    )
    db.add(destination)
    db.commit()
    return {"user": user, "token": result["token"], "source": source, "destination": destination}
