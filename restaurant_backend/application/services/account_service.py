"""Service for registration, login and password reset."""

from __future__ import annotations

import logging
from typing import Optional

from ...domain.errors import (
    AccountNotFoundError,
    EmailAlreadyRegisteredError,
    InvalidCredentialsError,
)
from ...domain.models import Identity, normalize_email
from ...domain.ports.persistence import IdentityRepository
from ...services.password_hasher import PasswordHasher
from .otp_service import OtpService

logger = logging.getLogger(__name__)


class AccountService:
    """Manages identities: registration, credential checks and password resets."""

    def __init__(
        self,
        identity_repository: IdentityRepository,
        password_hasher: PasswordHasher,
        otp_service: Optional[OtpService] = None,
    ) -> None:
        self._identities = identity_repository
        self._hasher = password_hasher
        self._otp = otp_service

    async def register(
        self,
        *,
        full_name: str,
        username: str,
        email: str,
        phone: str,
        address: str,
        password: str,
    ) -> Identity:
        """
        Register a new identity.

        Args:
            full_name: Display name
            username: Chosen username
            email: Email address, normalized before use
            phone: Contact phone number
            address: Delivery address
            password: Plain text password

        Returns:
            The stored identity, without one-time code state

        Raises:
            EmailAlreadyRegisteredError: If the normalized email is taken
        """
        email_clean = normalize_email(email)
        if await self._identities.get_by_email(email_clean):
            raise EmailAlreadyRegisteredError(email_clean)

        password_hash = await self._hasher.hash_async(password)
        identity = await self._identities.create(
            full_name=full_name,
            username=username,
            email=email_clean,
            phone=phone,
            address=address,
            password_hash=password_hash,
        )
        logger.info("Registered account %s", email_clean)
        return identity

    async def authenticate(self, email: str, password: str) -> Identity:
        """
        Check an email and password pair.

        Raises:
            InvalidCredentialsError: For an unknown email and for a wrong
                password alike
        """
        email_clean = normalize_email(email)
        identity = await self._identities.get_by_email(email_clean)
        password_hash = identity.password_hash if identity else None

        valid = await self._hasher.verify_async(password, password_hash)
        if identity is None or not valid:
            logger.info("Failed login attempt for %s", email_clean)
            raise InvalidCredentialsError("Invalid email or password")

        return identity

    async def reset_password(self, email: str, password: str, otp: Optional[str] = None) -> Identity:
        """
        Replace the password of an identity holding an active reset code.

        The new hash and the cleared code fields are written in one update,
        so the code cannot be used again afterwards.

        Args:
            email: Email address, normalized before use
            password: New plain text password
            otp: Code to match against the stored one; when omitted the
                stored code only has to be present and unexpired

        Raises:
            AccountNotFoundError: If no identity has this email
            InvalidOtpError: If no code is active or ``otp`` does not match
            OtpExpiredError: If the active code has expired
        """
        if self._otp is None:
            raise RuntimeError("Password reset is not enabled.")

        email_clean = normalize_email(email)
        identity = await self._identities.get_by_email(email_clean)
        if not identity:
            raise AccountNotFoundError(email_clean)

        self._otp.check_code(identity, otp)

        password_hash = await self._hasher.hash_async(password)
        updated = await self._identities.update_password(email_clean, password_hash)
        if not updated:
            raise AccountNotFoundError(email_clean)

        logger.info("Password reset for %s", email_clean)
        return updated
