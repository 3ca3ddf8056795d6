"""Pytest configuration and fixtures."""

import os
import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

# Add app to path for imports
app_path = Path(__file__).parent.parent / "app"
if str(app_path) not in sys.path:
    sys.path.insert(0, str(app_path))

# Set test environment
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("EMAIL_ENABLED", "false")
os.environ.setdefault("CLOUDINARY_CLOUD_NAME", "demo-cloud")
os.environ.setdefault("CLOUDINARY_API_KEY", "1234567890")
os.environ.setdefault("CLOUDINARY_API_SECRET", "test-api-secret")
os.environ.setdefault("LOG_LEVEL", "WARNING")

from config import get_settings
from database.init import Base, get_db
import database.models  # noqa: F401
from enums.user_role import UserRole
from main import app
from schemas.auth_schema import RegisterRequest
from services.auth_service import create_user
from services.email_service import get_email_service
from utils.dependencies import create_access_token

PASSWORD = "secret123"


class RecordingEmailService:
    """Stands in for the mailer and keeps what would have been sent."""

    def __init__(self):
        self.sent = []

    async def send_email(self, to_email, subject, body):
        self.sent.append({"to": to_email, "subject": subject, "body": body})

    async def send_new_password_email(self, email, new_password):
        self.sent.append({"to": email, "password": new_password})


@pytest.fixture
def engine():
    """A fresh in-memory database per test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db_session(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def email_outbox():
    return RecordingEmailService()


@pytest.fixture
def client(session_factory, email_outbox):
    """TestClient whose requests use the per-test database."""

    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_email_service] = lambda: email_outbox
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def make_user(db, email, role=UserRole.USER, name="Test User", password=PASSWORD):
    payload = RegisterRequest(name=name, email=email, phone="5551234", password=password)
    return create_user(payload, db, role=role)


def headers_for(user):
    token = create_access_token(user, get_settings())
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def create_account(db_session):
    """Factory for extra users: `create_account(email, role=UserRole.USER)`."""

    def _create(email, role=UserRole.USER, name="Test User"):
        return make_user(db_session, email, role=role, name=name)

    return _create


@pytest.fixture
def auth_headers():
    return headers_for


@pytest.fixture
def admin(db_session):
    return make_user(db_session, "admin@example.com", role=UserRole.ADMIN, name="Admin")


@pytest.fixture
def user(db_session):
    return make_user(db_session, "buyer@example.com", name="Buyer")


@pytest.fixture
def admin_headers(admin):
    return headers_for(admin)


@pytest.fixture
def user_headers(user):
    return headers_for(user)


@pytest.fixture
def land_payload():
    return {
        "title": "Riverside plot",
        "location": "Lekki, Lagos",
        "price": 25000,
        "size": "600 sqm",
        "description": "Dry land close to the river",
        "type": "Residential",
        "features": ["Fenced", "Gated estate"],
    }


@pytest.fixture
def house_payload():
    return {
        "title": "Four bedroom duplex",
        "location": "Ikoyi, Lagos",
        "price": 180000,
        "size": "450 sqm",
        "description": "Detached duplex with a pool",
        "propertyType": "Detached",
        "bedrooms": 4,
        "bathrooms": 5,
        "hasPool": True,
    }


@pytest.fixture
def apartment_payload():
    return {
        "title": "Two bedroom flat",
        "location": "Yaba, Lagos",
        "price": 60000,
        "size": "120 sqm",
        "description": "Serviced flat near the university",
        "bedrooms": 2,
        "bathrooms": 2,
        "floor": 3,
        "unit": "3B",
        "buildingAmenities": ["Gym"],
    }
