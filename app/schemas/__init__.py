"""Pydantic schemas for request/response validation"""

from app.schemas.auth import (
    Token,
    TokenPayload,
    UserCreate,
    UserResponse,
    AuthResponse,
)
from app.schemas.order import (
    AddressSchema,
    OrderItemCreate,
    OrderCreate,
    OrderStatusUpdate,
    DeliveryStatusUpdate,
    ReviewCreate,
    OrderResponse,
    DeliveryActionResponse,
)
from app.schemas.rider import (
    RiderRegister,
    RiderResponse,
    RiderAuthResponse,
    RiderStatusUpdate,
    RiderStatusResponse,
    LocationUpdate,
    MessageResponse,
)

__all__ = [
    "Token",
    "TokenPayload",
    "UserCreate",
    "UserResponse",
    "AuthResponse",
    "AddressSchema",
    "OrderItemCreate",
    "OrderCreate",
    "OrderStatusUpdate",
    "DeliveryStatusUpdate",
    "ReviewCreate",
    "OrderResponse",
    "DeliveryActionResponse",
    "RiderRegister",
    "RiderResponse",
    "RiderAuthResponse",
    "RiderStatusUpdate",
    "RiderStatusResponse",
    "LocationUpdate",
    "MessageResponse",
]
