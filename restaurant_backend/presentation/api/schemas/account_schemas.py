"""Pydantic schemas for registration and login endpoints."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class RegisterRequest(BaseModel):
    """Request schema for account registration."""

    model_config = ConfigDict(populate_by_name=True)

    full_name: str = Field(alias="fullName", min_length=1)
    username: str = Field(min_length=1)
    email: EmailStr
    phone: str = Field(min_length=1)
    address: str = Field(min_length=1)
    password: str = Field(min_length=1)


class LoginRequest(BaseModel):
    """Request schema for login."""

    email: EmailStr
    password: str


class UserResponse(BaseModel):
    """Public view of an identity; never carries the hash or code state."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    full_name: str = Field(alias="fullName")
    username: str
    email: str
    phone: str
    address: str
    created_at: Optional[datetime] = Field(default=None, alias="createdAt")


class LoginResponse(BaseModel):
    message: str
    user: UserResponse


class MessageResponse(BaseModel):
    message: str
