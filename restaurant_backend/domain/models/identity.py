"""Identity domain model for registered restaurant customers."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(slots=True)
class Identity:
    """
    Registered account together with its one-time code state.

    Attributes:
        id: Document identifier
        full_name: Display name
        username: Chosen username (not unique)
        email: Normalized email address (unique key)
        phone: Contact phone number
        address: Delivery address
        password_hash: bcrypt hash of the password
        otp_code: Active six digit code, if any
        otp_expires_at: Instant at which the active code stops being valid
        otp_cooldown_until: Instant before which no new code may be issued
        created_at: Registration timestamp
    """

    id: str
    full_name: str
    username: str
    email: str
    phone: str
    address: str
    password_hash: str
    otp_code: Optional[str] = None
    otp_expires_at: Optional[datetime] = None
    otp_cooldown_until: Optional[datetime] = None
    created_at: Optional[datetime] = None

    @property
    def has_active_code(self) -> bool:
        return self.otp_code is not None and self.otp_expires_at is not None

    def __repr__(self) -> str:
        return f"<Identity id={self.id} email={self.email}>"


def normalize_email(email: str) -> str:
    """Lookup and uniqueness key for an email address."""
    return (email or "").strip().lower()
