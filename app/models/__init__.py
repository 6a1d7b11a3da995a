"""Database models"""

from app.models.user import User, UserRole
from app.models.restaurant import Restaurant
from app.models.rider import Rider, RiderStatus, VehicleType
from app.models.order import (
    Order,
    OrderStatus,
    DeliveryStatus,
    OrderStatusEvent,
    OrderDeclinedRider,
    PaymentMethod,
    PaymentStatus,
)

__all__ = [
    "User",
    "UserRole",
    "Restaurant",
    "Rider",
    "RiderStatus",
    "VehicleType",
    "Order",
    "OrderStatus",
    "DeliveryStatus",
    "OrderStatusEvent",
    "OrderDeclinedRider",
    "PaymentMethod",
    "PaymentStatus",
]
