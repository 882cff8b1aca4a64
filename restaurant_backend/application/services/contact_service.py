import logging
from typing import Optional

from ...domain.models import ContactMessage
from ...domain.ports.persistence import ContactRepository

logger = logging.getLogger(__name__)


class ContactService:
    """Accepts contact form submissions."""

    def __init__(self, contact_repository: ContactRepository) -> None:
        self._contacts = contact_repository

    async def submit(
        self,
        name: Optional[str],
        email: Optional[str],
        message: Optional[str],
    ) -> ContactMessage:
        saved = await self._contacts.save_message(name=name, email=email, message=message)
        logger.info("Stored contact message %s", saved.id)
        return saved
