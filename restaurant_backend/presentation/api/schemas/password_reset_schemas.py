from typing import Optional

from pydantic import BaseModel, EmailStr, Field


class EmailPayload(BaseModel):
    email: EmailStr


class VerifyOtpPayload(BaseModel):
    email: EmailStr
    otp: str


class ResetPasswordPayload(BaseModel):
    email: EmailStr
    password: str = Field(min_length=1)
    otp: Optional[str] = None


class OtpIssuedResponse(BaseModel):
    message: str
    cooldown: int
