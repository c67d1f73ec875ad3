import os
from datetime import datetime, timedelta, timezone

TEST_JWT_SECRET = "test-secret-key-for-session-tokens-0123456789"

# Settings are read at import time, so the environment is prepared first
os.environ["APP_ENV"] = "test"
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["AUTH_JWT_KEY"] = TEST_JWT_SECRET
os.environ["AUTH_JWT_ALGORITHMS"] = '["HS256"]'
os.environ["GEMINI_API_KEY"] = ""
os.environ["WHATSAPP_VERIFY_TOKEN"] = "verify-me"

import jwt
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from finance_dashboard.core.database import Base
from finance_dashboard.core.dependencies import get_db
from finance_dashboard.main import app
from finance_dashboard.models.user import User

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def make_token(sub, expires_in=timedelta(hours=1), **claims):
    payload = {"sub": sub, "exp": datetime.now(timezone.utc) + expires_in, **claims}
    return jwt.encode(payload, TEST_JWT_SECRET, algorithm="HS256")


def auth_header(sub, **claims):
    return {"Authorization": f"Bearer {make_token(sub, **claims)}"}


@pytest.fixture()
def db():
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture()
def client(db):
    def override_get_db():
        session = TestingSessionLocal()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture()
def make_user(db):
    """Insert a user row and return it with matching auth headers."""
    def _make_user(sub="user_alice", email=None, **fields):
        user = User(clerk_user_id=sub, email=email or f"{sub}@example.com", name=sub, **fields)
        db.add(user)
        db.commit()
        db.refresh(user)
        return user, auth_header(sub, email=user.email)

    return _make_user


@pytest.fixture()
def user(make_user):
    return make_user("user_alice")


@pytest.fixture()
def headers(user):
    return user[1]
