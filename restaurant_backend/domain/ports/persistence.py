from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol

from ..models import ContactMessage, Identity


class IdentityRepository(Protocol):
    """Abstract storage for registered identities, keyed by normalized email."""

    async def get_by_email(self, email: str) -> Optional[Identity]:
        ...

    async def create(
        self,
        *,
        full_name: str,
        username: str,
        email: str,
        phone: str,
        address: str,
        password_hash: str,
    ) -> Identity:
        ...

    async def store_otp(
        self,
        email: str,
        *,
        code: str,
        expires_at: datetime,
        cooldown_until: datetime,
        now: datetime,
    ) -> Optional[Identity]:
        """Write the code only if no cooldown is running at ``now``.

        Returns the updated identity, or None when nothing matched (unknown
        email or cooldown still active).
        """
        ...

    async def clear_otp(self, email: str) -> None:
        ...

    async def update_password(self, email: str, password_hash: str) -> Optional[Identity]:
        """Replace the hash and drop all one-time code state in one update."""
        ...


class ContactRepository(Protocol):
    """Abstract storage for contact form submissions."""

    async def save_message(
        self,
        name: Optional[str],
        email: Optional[str],
        message: Optional[str],
    ) -> ContactMessage:
        ...


class Notifier(Protocol):
    """Outbound delivery of one-time codes."""

    async def send_otp_email(self, to_email: str, code: str, expires_in_minutes: int) -> None:
        ...
