"""User model for bearer-token authentication"""

import uuid
from datetime import datetime
from sqlalchemy import Column, String, Boolean, DateTime, JSON
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
import enum

from app.database import Base


class UserRole(str, enum.Enum):
    """Marketplace roles"""
    CUSTOMER = "customer"
    OWNER = "owner"
    RIDER = "rider"


class User(Base):
    """Customers, restaurant owners and riders share one account table"""
    __tablename__ = "users"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)

    # Authentication
    email = Column(String(255), unique=True, nullable=False)
    hashed_password = Column(String(255), nullable=False)

    # Profile
    full_name = Column(String(255), nullable=False)
    phone = Column(String(20))
    # {"street": "...", "city": "...", "state": "...", "zip_code": "..."}
    address_json = Column(JSON)

    # Role
    role = Column(String(20), nullable=False, default=UserRole.CUSTOMER.value)

    # Status
    is_active = Column(Boolean, default=True)

    # Timestamps
    last_login = Column(DateTime)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    restaurants = relationship("Restaurant", back_populates="owner")
    rider_profile = relationship("Rider", back_populates="user", uselist=False)

    def has_role(self, role: UserRole) -> bool:
        """Check whether the account acts in the given role"""
        return self.role == role.value
