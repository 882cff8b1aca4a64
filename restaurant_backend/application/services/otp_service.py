from __future__ import annotations

import logging
import math
import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

from ...domain.errors import (
    AccountNotFoundError,
    InvalidOtpError,
    NotificationError,
    OtpExpiredError,
    OtpThrottledError,
)
from ...domain.models import Identity, normalize_email
from ...domain.ports.persistence import IdentityRepository, Notifier

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]

OTP_LENGTH = 6


def utcnow() -> datetime:
    return datetime.now(tz=timezone.utc)


@dataclass(slots=True)
class OtpIssue:
    email: str
    expires_at: datetime
    cooldown_seconds: int


class OtpService:
    """Issues and checks the six digit codes used by the password reset flow.

    Expiry is evaluated when a code is read; nothing sweeps stale codes.
    """

    def __init__(
        self,
        identity_repository: IdentityRepository,
        notifier: Notifier,
        *,
        expiry_minutes: int = 5,
        cooldown_seconds: int = 60,
        clock: Clock = utcnow,
    ) -> None:
        self._identities = identity_repository
        self._notifier = notifier
        self._expiry = timedelta(minutes=expiry_minutes)
        self._expiry_minutes = expiry_minutes
        self._cooldown = timedelta(seconds=cooldown_seconds)
        self._cooldown_seconds = cooldown_seconds
        self._clock = clock

    @property
    def cooldown_seconds(self) -> int:
        return self._cooldown_seconds

    async def issue(self, email: str) -> OtpIssue:
        email_clean = normalize_email(email)
        identity = await self._identities.get_by_email(email_clean)
        if not identity:
            raise AccountNotFoundError(email_clean)

        now = self._clock()
        self._ensure_cooled_down(identity, now)

        code = generate_code()
        expires_at = now + self._expiry
        stored = await self._identities.store_otp(
            email_clean,
            code=code,
            expires_at=expires_at,
            cooldown_until=now + self._cooldown,
            now=now,
        )
        if stored is None:
            # Another request issued a code between the read and the write.
            current = await self._identities.get_by_email(email_clean)
            if current is None:
                raise AccountNotFoundError(email_clean)
            self._ensure_cooled_down(current, now)
            raise OtpThrottledError(self._cooldown_seconds)

        try:
            await self._notifier.send_otp_email(email_clean, code, self._expiry_minutes)
        except NotificationError:
            await self._identities.clear_otp(email_clean)
            raise

        logger.info("Issued one-time code for %s", email_clean)
        return OtpIssue(email=email_clean, expires_at=expires_at, cooldown_seconds=self._cooldown_seconds)

    async def validate(self, email: str, code: str) -> Identity:
        """Check a candidate code without consuming it."""
        email_clean = normalize_email(email)
        identity = await self._identities.get_by_email(email_clean)
        if not identity:
            raise InvalidOtpError("Invalid OTP")
        self.check_code(identity, code)
        return identity

    def check_code(self, identity: Identity, code: Optional[str] = None) -> None:
        """Raise unless ``identity`` holds an unexpired code matching ``code``.

        With ``code`` left as None only the presence and freshness of the
        stored code are checked.
        """
        if not identity.has_active_code:
            raise InvalidOtpError("Invalid OTP")
        if code is not None and not secrets.compare_digest(
            identity.otp_code.encode("utf-8"), code.encode("utf-8")
        ):
            logger.info("Rejected one-time code for %s", identity.email)
            raise InvalidOtpError("Invalid OTP")
        if self._clock() >= identity.otp_expires_at:
            raise OtpExpiredError("OTP has expired")

    def _ensure_cooled_down(self, identity: Identity, now: datetime) -> None:
        if identity.otp_cooldown_until and identity.otp_cooldown_until > now:
            remaining = math.ceil((identity.otp_cooldown_until - now).total_seconds())
            logger.info("One-time code for %s throttled for %s more seconds", identity.email, remaining)
            raise OtpThrottledError(remaining)


def generate_code() -> str:
    """Uniformly random fixed-width decimal code; leading zeros are kept."""
    return f"{secrets.randbelow(10 ** OTP_LENGTH):0{OTP_LENGTH}d}"
