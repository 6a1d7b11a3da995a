"""Rider model"""

import uuid
from datetime import datetime
from sqlalchemy import Column, String, Boolean, DateTime, ForeignKey, Integer, Float
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
import enum

from app.database import Base


class RiderStatus(str, enum.Enum):
    """Rider availability"""
    AVAILABLE = "available"
    BUSY = "busy"
    OFFLINE = "offline"


class VehicleType(str, enum.Enum):
    BICYCLE = "bicycle"
    MOTORCYCLE = "motorcycle"
    CAR = "car"


class Rider(Base):
    """Delivery courier profile, one per rider account"""
    __tablename__ = "riders"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(UUID(as_uuid=True), ForeignKey("users.id"), unique=True, nullable=False)

    # Profile
    name = Column(String(255), nullable=False)
    phone = Column(String(20), nullable=False)
    email = Column(String(255), unique=True, nullable=False)
    vehicle_type = Column(String(20), nullable=False)
    vehicle_number = Column(String(50), nullable=False)

    # Availability
    status = Column(String(20), nullable=False, default=RiderStatus.OFFLINE.value)

    # Current location (GeoJSON point order: longitude, latitude)
    longitude = Column(Float, nullable=False, default=0.0)
    latitude = Column(Float, nullable=False, default=0.0)

    # Stats
    rating = Column(Float, default=0.0)  # 0-5
    total_deliveries = Column(Integer, nullable=False, default=0)
    is_verified = Column(Boolean, default=False)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    user = relationship("User", back_populates="rider_profile")
    orders = relationship("Order", back_populates="rider")

    @property
    def current_location(self) -> dict:
        return {"type": "Point", "coordinates": [self.longitude, self.latitude]}
