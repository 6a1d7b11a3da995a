"""Rider schemas"""

from datetime import datetime
from typing import Literal
from uuid import UUID
from pydantic import BaseModel, EmailStr, Field

from app.schemas.auth import Token


class RiderRegister(BaseModel):
    """Rider sign-up request"""
    name: str
    email: EmailStr
    password: str = Field(min_length=6)
    phone: str
    vehicle_type: Literal["bicycle", "motorcycle", "car"]
    vehicle_number: str


class RiderResponse(BaseModel):
    """Rider profile"""
    id: UUID
    user_id: UUID
    name: str
    email: str
    phone: str
    vehicle_type: str
    vehicle_number: str
    status: str
    current_location: dict
    rating: float
    total_deliveries: int
    is_verified: bool
    created_at: datetime

    class Config:
        from_attributes = True


class RiderStatusUpdate(BaseModel):
    """Self-reported availability"""
    status: str


class RiderStatusResponse(BaseModel):
    status: str


class LocationUpdate(BaseModel):
    """Current rider position"""
    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)


class MessageResponse(BaseModel):
    message: str


class RiderAuthResponse(BaseModel):
    """Sign-up response carrying a ready-to-use token"""
    rider: RiderResponse
    token: Token
