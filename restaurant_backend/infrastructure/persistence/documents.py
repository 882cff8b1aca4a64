"""Beanie documents stored in MongoDB."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from beanie import Document, Indexed
from pydantic import Field


def _utcnow() -> datetime:
    return datetime.now(tz=timezone.utc)


class IdentityDocument(Document):
    full_name: str
    username: str
    email: Indexed(str, unique=True)
    phone: str
    address: str
    password_hash: str
    otp_code: Optional[str] = None
    otp_expires_at: Optional[datetime] = None
    otp_cooldown_until: Optional[datetime] = None
    created_at: datetime = Field(default_factory=_utcnow)

    class Settings:
        name = "users"


class ContactMessageDocument(Document):
    name: Optional[str] = None
    email: Optional[str] = None
    message: Optional[str] = None
    created_at: datetime = Field(default_factory=_utcnow)

    class Settings:
        name = "contacts"


DOCUMENT_MODELS = [IdentityDocument, ContactMessageDocument]
