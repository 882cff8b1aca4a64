"""Repository for contact form submissions."""

from typing import Optional

from restaurant_backend.domain.models import ContactMessage
from restaurant_backend.infrastructure.persistence.documents import ContactMessageDocument
from restaurant_backend.infrastructure.persistence.mongo import (
    MongoPersistence,
    ensure_utc,
    translate_errors,
)


class MongoContactRepository:
    """Stores contact messages exactly as submitted."""

    def __init__(self, persistence: MongoPersistence):
        self.persistence = persistence

    async def save_message(
        self,
        name: Optional[str],
        email: Optional[str],
        message: Optional[str],
    ) -> ContactMessage:
        await self.persistence.ensure_ready()
        document = ContactMessageDocument(name=name, email=email, message=message)
        with translate_errors("save contact message"):
            await document.insert()

        return ContactMessage(
            id=str(document.id),
            name=document.name,
            email=document.email,
            message=document.message,
            created_at=ensure_utc(document.created_at),
        )
