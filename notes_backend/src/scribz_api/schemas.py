from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, EmailStr
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model serialising to camelCase while accepting snake_case input too."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


# Users

class UserCredentialsRequest(CamelModel):
    """Request model for signup and login"""
    email: EmailStr = Field(..., description="User email")
    password: str = Field(..., min_length=6, description="Plaintext password (min 6 chars)")


class UserSummary(CamelModel):
    """Minimal user summary returned alongside a token"""
    id: str
    email: str


class UserResponse(CamelModel):
    """User response without sensitive fields"""
    id: str
    email: str
    created_at: datetime


# Auth / Tokens

class AuthResponse(CamelModel):
    """Token plus user summary for successful signup or login"""
    token: str = Field(..., description="JWT access token")
    token_type: str = Field("bearer", description="Token type")
    user: UserSummary


# Notes

class NoteFilter(str, Enum):
    """Visibility class for note listings"""
    all = "all"
    favorites = "favorites"
    trash = "trash"


class NoteCreateRequest(CamelModel):
    """Create note request. Missing or blank fields fall back to defaults."""
    title: Optional[str] = Field(None, max_length=255)
    content: Optional[str] = Field(None, description="Rich-text markup")
    color: Optional[str] = Field(None, max_length=32)


class NoteUpdateRequest(CamelModel):
    """Update note request (partial). The trashed flag is only changed via toggle."""
    title: Optional[str] = Field(None, max_length=255)
    content: Optional[str] = Field(None)
    color: Optional[str] = Field(None, max_length=32)
    is_favorite: Optional[bool] = Field(None)


class NoteResponse(CamelModel):
    """Note response model"""
    id: str
    title: str
    content: str
    color: str
    is_favorite: bool
    is_trashed: bool
    user_id: str
    created_at: datetime
    updated_at: datetime


class MessageResponse(BaseModel):
    """Plain acknowledgement"""
    message: str
