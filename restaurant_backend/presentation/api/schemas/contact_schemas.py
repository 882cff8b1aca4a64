from typing import Optional

from pydantic import BaseModel, ConfigDict


class ContactPayload(BaseModel):
    """Contact form fields, stored exactly as submitted."""

    model_config = ConfigDict(coerce_numbers_to_str=True)

    name: Optional[str] = None
    email: Optional[str] = None
    message: Optional[str] = None
