import os

# must be set before homeservices builds its settings and module engine
os.environ["DATABASE_URL"] = "sqlite://"
os.environ.setdefault("JWT_SECRET", "test-secret")
os.environ.setdefault("ENVIRONMENT", "test")

import itertools  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from homeservices.api.deps import get_identity_provider, get_otp_sender  # noqa: E402
from homeservices.core.config import Settings, get_settings  # noqa: E402
from homeservices.core.policy import Actor  # noqa: E402
from homeservices.core.security import PasswordHasher, TokenService  # noqa: E402
from homeservices.db import models  # noqa: E402,F401
from homeservices.db.base import Base, get_db  # noqa: E402
from homeservices.db.models import Booking, BookingStatus, Role, Service, User  # noqa: E402
from homeservices.main import app  # noqa: E402


class RecordingOtpSender:
    """Captures every code instead of mailing it."""

    def __init__(self):
        self.sent = []
        self.fail = False

    def send_otp_email(self, address, code, ttl_minutes):
        if self.fail:
            raise ConnectionError("SMTP unavailable")
        self.sent.append((address, code, ttl_minutes))

    def last_code_for(self, address):
        for sent_to, code, _ in reversed(self.sent):
            if sent_to == address:
                return code
        return None


class FakeIdentityProvider:
    def __init__(self):
        self._ids = itertools.count(1)
        self.accounts = {}

    def create_user(self, email, password, full_name):
        uid = f"uid-{next(self._ids)}"
        self.accounts[email] = (password, uid)
        return uid

    def sign_in(self, email, password):
        stored = self.accounts.get(email)
        if stored and stored[0] == password:
            return stored[1]
        return None


@pytest.fixture
def settings():
    return Settings(jwt_secret="test-secret", password_hash_rounds=4, otp_hash_rounds=4)


@pytest.fixture
def engine():
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
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def sender():
    return RecordingOtpSender()


@pytest.fixture
def identity():
    return FakeIdentityProvider()


@pytest.fixture
def hasher(settings):
    return PasswordHasher(settings.password_hash_rounds)


@pytest.fixture
def tokens(settings):
    return TokenService(settings)


@pytest.fixture
def client(session_factory, settings, sender, identity):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_settings] = lambda: settings
    app.dependency_overrides[get_otp_sender] = lambda: sender
    app.dependency_overrides[get_identity_provider] = lambda: identity
    # no context manager: startup would create tables on the module engine
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(db, hasher):
    counter = itertools.count(1)

    def _make_user(role=Role.USER, email=None, password="secret-pass", verified=True, full_name="Test User"):
        n = next(counter)
        user = User(
            external_uid=f"seed-{n}",
            email=email or f"{role.value}{n}@example.com",
            password_hash=hasher.hash(password),
            full_name=full_name,
            role=role,
            is_email_verified=verified,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _make_user


@pytest.fixture
def make_service(db):
    def _make_service(provider=None, name="Deep Cleaning", price=500.0, **extra):
        service = Service(provider_id=provider.id if provider else None, name=name, price=price, **extra)
        db.add(service)
        db.commit()
        db.refresh(service)
        return service

    return _make_service


@pytest.fixture
def make_booking(db):
    def _make_booking(customer, service, status=BookingStatus.UPCOMING, price=None):
        booking = Booking(
            user_id=customer.id,
            service_id=service.id,
            date="2025-01-15",
            time="10:00",
            address="12 Baker Street",
            price=service.price if price is None else price,
            status=status,
        )
        db.add(booking)
        db.commit()
        db.refresh(booking)
        return booking

    return _make_booking


@pytest.fixture
def as_actor():
    def _as_actor(user):
        return Actor(user_id=user.id, email=user.email, role=user.role)

    return _as_actor


@pytest.fixture
def auth_headers(tokens):
    def _auth_headers(user):
        token = tokens.issue_access_token(user.id, user.email, user.role)
        return {"Authorization": f"Bearer {token}"}

    return _auth_headers
