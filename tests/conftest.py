import os
from dataclasses import replace
from datetime import datetime, timedelta, timezone
from itertools import count
from typing import Dict, List, Optional, Tuple

os.environ.setdefault("MONGODB_URI", "mongodb://localhost:27017/restaurant-test")
os.environ.setdefault("SMTP_USERNAME", "mailer@example.com")
os.environ.setdefault("SMTP_PASSWORD", "smtp-test-password")
os.environ.setdefault("BCRYPT_ROUNDS", "4")

import pytest
from fastapi.testclient import TestClient

from restaurant_backend.core.app_factory import create_application
from restaurant_backend.core.config import Settings
from restaurant_backend.core.container import build_container
from restaurant_backend.domain.errors import (
    EmailAlreadyRegisteredError,
    NotificationError,
    UpstreamError,
)
from restaurant_backend.domain.models import ContactMessage, Identity


class FakeClock:
    def __init__(self, start: datetime) -> None:
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


class InMemoryIdentityRepository:
    """Dictionary-backed store with the same conditional update rules as MongoDB."""

    def __init__(self) -> None:
        self.records: Dict[str, Identity] = {}
        self.fail_with: Optional[Exception] = None
        self._ids = count(1)

    async def get_by_email(self, email: str) -> Optional[Identity]:
        self._maybe_fail()
        identity = self.records.get(email)
        return replace(identity) if identity else None

    async def create(self, *, full_name, username, email, phone, address, password_hash) -> Identity:
        self._maybe_fail()
        if email in self.records:
            raise EmailAlreadyRegisteredError(email)
        identity = Identity(
            id=str(next(self._ids)),
            full_name=full_name,
            username=username,
            email=email,
            phone=phone,
            address=address,
            password_hash=password_hash,
            created_at=datetime(2024, 1, 1, tzinfo=timezone.utc),
        )
        self.records[email] = identity
        return replace(identity)

    async def store_otp(self, email, *, code, expires_at, cooldown_until, now) -> Optional[Identity]:
        self._maybe_fail()
        identity = self.records.get(email)
        if identity is None:
            return None
        if identity.otp_cooldown_until is not None and identity.otp_cooldown_until > now:
            return None
        identity.otp_code = code
        identity.otp_expires_at = expires_at
        identity.otp_cooldown_until = cooldown_until
        return replace(identity)

    async def clear_otp(self, email: str) -> None:
        self._maybe_fail()
        identity = self.records.get(email)
        if identity is not None:
            identity.otp_code = None
            identity.otp_expires_at = None
            identity.otp_cooldown_until = None

    async def update_password(self, email: str, password_hash: str) -> Optional[Identity]:
        self._maybe_fail()
        identity = self.records.get(email)
        if identity is None:
            return None
        identity.password_hash = password_hash
        identity.otp_code = None
        identity.otp_expires_at = None
        identity.otp_cooldown_until = None
        return replace(identity)

    def _maybe_fail(self) -> None:
        if self.fail_with is not None:
            raise self.fail_with


class InMemoryContactRepository:
    def __init__(self) -> None:
        self.messages: List[ContactMessage] = []
        self.fail = False

    async def save_message(self, name, email, message) -> ContactMessage:
        if self.fail:
            raise UpstreamError("Failed to save contact message")
        saved = ContactMessage(
            id=str(len(self.messages) + 1),
            name=name,
            email=email,
            message=message,
            created_at=datetime(2024, 1, 1, tzinfo=timezone.utc),
        )
        self.messages.append(saved)
        return saved


class RecordingNotifier:
    def __init__(self) -> None:
        self.outbox: List[Tuple[str, str, int]] = []
        self.fail = False

    async def send_otp_email(self, to_email: str, code: str, expires_in_minutes: int) -> None:
        if self.fail:
            raise NotificationError(f"Failed to send email to {to_email}")
        self.outbox.append((to_email, code, expires_in_minutes))

    @property
    def last_code(self) -> str:
        return self.outbox[-1][1]


@pytest.fixture()
def settings(monkeypatch):
    monkeypatch.delenv("PASSWORD_RESET_ENABLED", raising=False)
    monkeypatch.delenv("OTP_EXPIRY_MINUTES", raising=False)
    monkeypatch.delenv("OTP_COOLDOWN_SECONDS", raising=False)
    return Settings()


@pytest.fixture()
def clock():
    return FakeClock(datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc))


@pytest.fixture()
def identities():
    return InMemoryIdentityRepository()


@pytest.fixture()
def contacts():
    return InMemoryContactRepository()


@pytest.fixture()
def notifier():
    return RecordingNotifier()


@pytest.fixture()
def container(settings, identities, contacts, notifier, clock):
    return build_container(
        settings,
        identity_repository=identities,
        contact_repository=contacts,
        notifier=notifier,
        clock=clock,
    )


@pytest.fixture()
def app(container):
    return create_application(container=container)


@pytest.fixture()
def client(app):
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture()
def register_user(client):
    def _register_user(email: str = "alice@example.com", password: str = "Password123!"):
        response = client.post(
            "/register",
            json={
                "fullName": "Alice Doe",
                "username": "alice",
                "email": email,
                "phone": "+1 555 0100",
                "address": "1 Main Street",
                "password": password,
            },
        )
        assert response.status_code == 201
        return response

    return _register_user
