# app/api/v1/schemas/users.py
from pydantic import EmailStr, Field
from typing import Optional
from datetime import datetime

from app.api.v1.schemas.base import CamelModel


class UserBase(CamelModel):
    """
    Base schema for a user, containing common attributes.
    """
    full_name: str = Field(..., min_length=1, max_length=200)
    email: EmailStr


class UserCreate(UserBase):
    access_token: Optional[str] = Field(None, min_length=8, max_length=255, description="Generated when omitted")


class UserUpdate(CamelModel):
    full_name: Optional[str] = Field(None, min_length=1, max_length=200)
    email: Optional[EmailStr] = None


class UserResponse(CamelModel):
    """
    Schema for a user response, including ID and timestamps.
    """
    id: int
    full_name: str
    email: str
    created_at: datetime
    updated_at: datetime


class UserWithTokenResponse(UserResponse):
    """Returned once, on creation, so the caller learns the access token"""
    access_token: str
