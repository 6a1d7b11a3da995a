"""Authentication schemas"""

from datetime import datetime
from typing import Optional, Literal
from uuid import UUID
from pydantic import BaseModel, EmailStr, Field

from app.schemas.order import AddressSchema


class Token(BaseModel):
    """JWT token response"""
    access_token: str
    token_type: str = "bearer"
    expires_in: int


class TokenPayload(BaseModel):
    """JWT token payload"""
    sub: str  # User ID
    role: str
    exp: datetime


class UserCreate(BaseModel):
    """Customer or restaurant owner sign-up; riders use /rider/register"""
    email: EmailStr
    password: str = Field(min_length=6)
    full_name: str
    phone: Optional[str] = None
    address: Optional[AddressSchema] = None
    role: Literal["customer", "owner"] = "customer"


class UserResponse(BaseModel):
    """User response"""
    id: UUID
    email: str
    full_name: str
    phone: Optional[str]
    role: str
    is_active: bool
    created_at: datetime
    last_login: Optional[datetime]

    class Config:
        from_attributes = True


class AuthResponse(BaseModel):
    """Sign-up response carrying a ready-to-use token"""
    user: UserResponse
    token: Token
