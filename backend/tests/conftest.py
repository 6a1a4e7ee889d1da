"""Shared test fixtures."""

import os

os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ["GEMINI_API_KEY"] = ""
os.environ["GOOGLE_CLIENT_ID"] = ""
os.environ["GOOGLE_CLIENT_SECRET"] = ""
os.environ["JWT_SECRET"] = "test-secret"
os.environ["RATE_LIMIT_ENABLED"] = "false"

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from fastapi.testclient import TestClient
from datetime import datetime
from decimal import Decimal
import uuid

from finance_dashboard.auth.tokens import issue_token
from finance_dashboard.config import settings
from finance_dashboard.database import Base, get_db
from finance_dashboard.dependencies import get_ai_client
from finance_dashboard.main import app
from finance_dashboard.models.transaction import Transaction, TransactionType
from finance_dashboard.models.user import User, default_preferences


class FakeAIClient:
    """Stands in for AIClient; returns canned responses or raises."""

    def __init__(self, response=None, error=None, configured=True):
        self.response = response
        self.error = error
        self.configured = configured
        self.calls = []

    @property
    def is_configured(self):
        return self.configured

    async def complete(self, system_prompt, user_prompt, temperature=0.1, max_tokens=1000, json_mode=False):
        self.calls.append({"system_prompt": system_prompt, "user_prompt": user_prompt})
        if self.error:
            raise self.error
        return self.response


@pytest.fixture(scope="function")
def db_session():
    """Create a fresh database for each test using in-memory SQLite."""
    # Use StaticPool to ensure all connections use the same in-memory database
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    Base.metadata.create_all(bind=engine)

    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSessionLocal()

    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def ai_client():
    """No model configured unless a test swaps in its own fake."""
    return FakeAIClient(configured=False)


@pytest.fixture(scope="function")
def client(db_session, ai_client):
    """Create a test client with database and AI client overrides."""
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_ai_client] = lambda: ai_client
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def make_user(db_session, email="alex@example.com", google_id="google-1"):
    user = User(
        id=str(uuid.uuid4()),
        google_id=google_id,
        email=email,
        name="Alex",
        preferences=default_preferences(),
    )
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


def make_transaction(db_session, owner, amount, txn_type, category, when, description="Test"):
    txn = Transaction(
        id=str(uuid.uuid4()),
        owner_id=owner.id,
        description=description,
        amount=Decimal(str(amount)),
        type=txn_type,
        category=category,
        date=when,
        tags=[],
    )
    db_session.add(txn)
    db_session.commit()
    db_session.refresh(txn)
    return txn


@pytest.fixture
def user(db_session):
    return make_user(db_session)


@pytest.fixture
def other_user(db_session):
    return make_user(db_session, email="sam@example.com", google_id="google-2")


@pytest.fixture
def auth_headers(user):
    return {"Authorization": f"Bearer {issue_token(user, settings)}"}


@pytest.fixture
def other_auth_headers(other_user):
    return {"Authorization": f"Bearer {issue_token(other_user, settings)}"}


@pytest.fixture
def sample_transaction(db_session, user):
    return make_transaction(
        db_session, user, "50.00", TransactionType.expense, "Groceries",
        datetime(2024, 1, 15, 12, 0), description="Whole Foods run",
    )
