"""Repository for Identity persistence."""

from datetime import datetime
from typing import Optional

from beanie import UpdateResponse
from beanie.operators import Eq, Or, Set
from pymongo.errors import DuplicateKeyError

from restaurant_backend.domain.errors import EmailAlreadyRegisteredError
from restaurant_backend.domain.models import Identity
from restaurant_backend.infrastructure.persistence.documents import IdentityDocument
from restaurant_backend.infrastructure.persistence.mongo import (
    MongoPersistence,
    ensure_utc,
    translate_errors,
)


class MongoIdentityRepository:
    """Repository for managing Identity records in MongoDB."""

    def __init__(self, persistence: MongoPersistence):
        self.persistence = persistence

    async def get_by_email(self, email: str) -> Optional[Identity]:
        """Get identity by normalized email."""
        await self.persistence.ensure_ready()
        with translate_errors("load identity"):
            document = await IdentityDocument.find_one(IdentityDocument.email == email)

        if not document:
            return None

        return self._document_to_identity(document)

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
        """Create a new identity without one-time code state."""
        await self.persistence.ensure_ready()
        document = IdentityDocument(
            full_name=full_name,
            username=username,
            email=email,
            phone=phone,
            address=address,
            password_hash=password_hash,
        )
        with translate_errors("create identity"):
            try:
                await document.insert()
            except DuplicateKeyError as exc:
                raise EmailAlreadyRegisteredError(email) from exc

        return self._document_to_identity(document)

    async def store_otp(
        self,
        email: str,
        *,
        code: str,
        expires_at: datetime,
        cooldown_until: datetime,
        now: datetime,
    ) -> Optional[Identity]:
        """Set the code fields in one conditional update guarded by the cooldown."""
        await self.persistence.ensure_ready()
        with translate_errors("store one-time code"):
            document = await IdentityDocument.find_one(
                IdentityDocument.email == email,
                Or(
                    Eq(IdentityDocument.otp_cooldown_until, None),
                    IdentityDocument.otp_cooldown_until <= now,
                ),
            ).update(
                Set(
                    {
                        IdentityDocument.otp_code: code,
                        IdentityDocument.otp_expires_at: expires_at,
                        IdentityDocument.otp_cooldown_until: cooldown_until,
                    }
                ),
                response_type=UpdateResponse.NEW_DOCUMENT,
            )

        if not document:
            return None

        return self._document_to_identity(document)

    async def clear_otp(self, email: str) -> None:
        """Drop all one-time code state."""
        await self.persistence.ensure_ready()
        with translate_errors("clear one-time code"):
            await IdentityDocument.find_one(IdentityDocument.email == email).update(
                Set(
                    {
                        IdentityDocument.otp_code: None,
                        IdentityDocument.otp_expires_at: None,
                        IdentityDocument.otp_cooldown_until: None,
                    }
                )
            )

    async def update_password(self, email: str, password_hash: str) -> Optional[Identity]:
        """Store a new password hash and clear the code fields in the same update."""
        await self.persistence.ensure_ready()
        with translate_errors("update password"):
            document = await IdentityDocument.find_one(IdentityDocument.email == email).update(
                Set(
                    {
                        IdentityDocument.password_hash: password_hash,
                        IdentityDocument.otp_code: None,
                        IdentityDocument.otp_expires_at: None,
                        IdentityDocument.otp_cooldown_until: None,
                    }
                ),
                response_type=UpdateResponse.NEW_DOCUMENT,
            )

        if not document:
            return None

        return self._document_to_identity(document)

    def _document_to_identity(self, document: IdentityDocument) -> Identity:
        """Convert a stored document to an Identity entity."""
        return Identity(
            id=str(document.id),
            full_name=document.full_name,
            username=document.username,
            email=document.email,
            phone=document.phone,
            address=document.address,
            password_hash=document.password_hash,
            otp_code=document.otp_code,
            otp_expires_at=ensure_utc(document.otp_expires_at),
            otp_cooldown_until=ensure_utc(document.otp_cooldown_until),
            created_at=ensure_utc(document.created_at),
        )
