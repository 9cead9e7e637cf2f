"""Pytest fixtures for testing"""

import os

# Point settings at SQLite before the application modules read them
os.environ.setdefault("DATABASE_URL", "sqlite:///./test.db")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret")

import pytest
from typing import Generator
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from loanwise.api.main import create_app
from loanwise.api.dependencies import get_bill_store, get_risk_scorer
from loanwise.infrastructure.database.models import Base
from loanwise.infrastructure.database.seed import seed_reference_data
from loanwise.infrastructure.database.session import get_db
from loanwise.infrastructure.uploads import BillFileStore


# Test database
TEST_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# floor(0.5 * 40) + 60 = 80 -> approved
APPROVING_SIGNAL = 0.5
# floor(0.125 * 40) + 60 = 65 -> rejected
REJECTING_SIGNAL = 0.125


class StubRiskScorer:
    """Deterministic scorer; tests set .signal to steer the decision"""

    def __init__(self, signal: float = APPROVING_SIGNAL):
        self.signal = signal
        self.draws = 0

    def draw(self) -> float:
        self.draws += 1
        return self.signal


@pytest.fixture
def db() -> Generator[Session, None, None]:
    """Create test database with reference data and yield a session"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    seed_reference_data(db)
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def risk_scorer() -> StubRiskScorer:
    return StubRiskScorer()


@pytest.fixture
def client(db: Session, risk_scorer: StubRiskScorer, tmp_path) -> TestClient:
    """Create FastAPI test client with test database and stub scorer"""
    app = create_app(seed_on_startup=False)

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_risk_scorer] = lambda: risk_scorer
    app.dependency_overrides[get_bill_store] = lambda: BillFileStore(upload_dir=str(tmp_path / "uploads"))
    return TestClient(app)


def register_user(client: TestClient, username: str = "asha", email: str = "asha@example.com") -> dict:
    """Register a user and return the auth response body"""
    response = client.post(
        "/api/auth/register",
        json={
            "username": username,
            "email": email,
            "password": "s3cret-pass",
            "first_name": "Asha",
            "last_name": "Rao",
            "phone": "9876543210",
        },
    )
    assert response.status_code == 201, response.text
    return response.json()


@pytest.fixture
def auth_headers(client: TestClient) -> dict:
    """Authorization header for a freshly registered user"""
    token = register_user(client)["token"]
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def bank_id(client: TestClient) -> int:
    return client.get("/api/banks").json()[0]["id"]


@pytest.fixture
def register(client: TestClient):
    """Register additional users: register(username=..., email=...)"""

    def _register(**kwargs) -> dict:
        return register_user(client, **kwargs)

    return _register
