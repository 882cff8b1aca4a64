"""Domain models for the restaurant backend."""

from .contact import ContactMessage
from .identity import Identity, normalize_email

__all__ = [
    "ContactMessage",
    "Identity",
    "normalize_email",
]
