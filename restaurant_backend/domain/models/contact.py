from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(slots=True)
class ContactMessage:
    id: str
    name: Optional[str]
    email: Optional[str]
    message: Optional[str]
    created_at: datetime
