import os

# Point settings at SQLite before the app is imported
os.environ.setdefault("DATABASE_URL", "sqlite:///./test.db")
os.environ.setdefault("SECRET_KEY", "test-secret-key")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app import models
from app.main import app
from app.api import deps
from app.db.base import Base
from app.core.monitoring import metrics
from app.core.rate_limit import RateLimiter
from app.core.security import create_access_token, get_password_hash

engine = create_engine(
    "sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

def override_get_db():
    try:
        db = TestingSessionLocal()
        yield db
    finally:
        db.close()

app.dependency_overrides[deps.get_db] = override_get_db

@pytest.fixture(autouse=True)
def setup_database():
    Base.metadata.create_all(bind=engine)
    metrics.reset()
    yield
    Base.metadata.drop_all(bind=engine)

@pytest.fixture
def rate_limiter():
    limiter = RateLimiter(limit=60, window_seconds=60)
    app.dependency_overrides[deps.get_tracking_rate_limiter] = lambda: limiter
    yield limiter
    app.dependency_overrides.pop(deps.get_tracking_rate_limiter, None)

@pytest.fixture
def client(rate_limiter):
    return TestClient(app)

@pytest.fixture
def db():
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()

@pytest.fixture
def second_db():
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()

def make_user(db, email, role, display_name=None, handle=None):
    user = models.User(
        email=email,
        password_hash=get_password_hash("password123"),
        display_name=display_name or email.split("@")[0],
        role=role,
        handle=handle,
        is_active=True,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user

def auth_headers(user):
    return {"Authorization": f"Bearer {create_access_token(user.id)}"}

@pytest.fixture
def host(db):
    return make_user(db, "host@example.com", models.UserRole.HOST, display_name="Seaside Cabins")

@pytest.fixture
def creator(db):
    return make_user(db, "creator@example.com", models.UserRole.CREATOR, display_name="Travel Tess", handle="tess")

@pytest.fixture
def other_host(db):
    return make_user(db, "other-host@example.com", models.UserRole.HOST)

@pytest.fixture
def host_headers(host):
    return auth_headers(host)

@pytest.fixture
def creator_headers(creator):
    return auth_headers(creator)

@pytest.fixture
def other_host_headers(other_host):
    return auth_headers(other_host)
