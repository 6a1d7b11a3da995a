"""Order models"""

import uuid
from datetime import datetime
from sqlalchemy import (
    Column,
    String,
    DateTime,
    ForeignKey,
    JSON,
    Text,
    Integer,
    Float,
    Numeric,
)
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
import enum

from app.database import Base


class OrderStatus(str, enum.Enum):
    """Authoritative order status, spanning the restaurant and rider phases"""
    PENDING = "pending"
    CONFIRMED = "confirmed"
    PREPARING = "preparing"
    READY_FOR_PICKUP = "ready_for_pickup"
    PICKED_UP = "picked_up"
    IN_TRANSIT = "in_transit"
    NEAR_DELIVERY = "near_delivery"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class DeliveryStatus(str, enum.Enum):
    """Rider-side view of an order, derived from OrderStatus"""
    PENDING = "pending"
    ASSIGNED = "assigned"
    PICKED_UP = "picked_up"
    IN_TRANSIT = "in_transit"
    NEAR_DELIVERY = "near_delivery"
    DELIVERED = "delivered"


class PaymentMethod(str, enum.Enum):
    CASH = "cash"
    CARD = "card"


class PaymentStatus(str, enum.Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"


ORDER_STATUSES = [s.value for s in OrderStatus]
TERMINAL_STATUSES = {OrderStatus.DELIVERED.value, OrderStatus.CANCELLED.value}
RIDER_PHASE_STATUSES = {
    OrderStatus.PICKED_UP.value,
    OrderStatus.IN_TRANSIT.value,
    OrderStatus.NEAR_DELIVERY.value,
    OrderStatus.DELIVERED.value,
}


class Order(Base):
    """Customer purchase from a single restaurant"""
    __tablename__ = "orders"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    customer_id = Column(UUID(as_uuid=True), ForeignKey("users.id"), nullable=False, index=True)
    restaurant_id = Column(UUID(as_uuid=True), ForeignKey("restaurants.id"), nullable=False, index=True)
    rider_id = Column(UUID(as_uuid=True), ForeignKey("riders.id"), index=True)

    # Snapshot taken at creation time
    # [{"menu_item_id": "...", "name": "...", "price": 9.5, "quantity": 2, "image": "..."}, ...]
    items_json = Column(JSON, nullable=False)
    total_amount = Column(Numeric(10, 2), nullable=False)

    # Status
    status = Column(String(50), nullable=False, default=OrderStatus.PENDING.value, index=True)

    # Delivery
    # {"street": "...", "city": "...", "state": "...", "zip_code": "..."}
    delivery_address = Column(JSON)

    # Payment
    payment_method = Column(String(20), nullable=False, default=PaymentMethod.CASH.value)
    payment_status = Column(String(20), nullable=False, default=PaymentStatus.PENDING.value)

    # Review, submitted by the customer after delivery
    review_rating = Column(Integer)
    review_comment = Column(Text)
    review_created_at = Column(DateTime)

    # Metadata
    created_at = Column(DateTime, default=datetime.utcnow, index=True)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    customer = relationship("User")
    restaurant = relationship("Restaurant", back_populates="orders")
    rider = relationship("Rider", back_populates="orders")
    status_history = relationship(
        "OrderStatusEvent",
        back_populates="order",
        order_by="OrderStatusEvent.id",
        lazy="selectin",
    )
    declined = relationship("OrderDeclinedRider", back_populates="order", lazy="selectin")

    @property
    def items(self) -> list:
        return self.items_json or []

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES

    @property
    def delivery_status(self) -> str:
        """Rider-side projection of status"""
        if self.status in RIDER_PHASE_STATUSES:
            return self.status
        if self.rider_id is not None:
            return DeliveryStatus.ASSIGNED.value
        return DeliveryStatus.PENDING.value

    @property
    def declined_rider_ids(self) -> list:
        return [d.rider_id for d in self.declined]

    @property
    def review(self):
        if self.review_rating is None:
            return None
        return {
            "rating": self.review_rating,
            "comment": self.review_comment or "",
            "created_at": self.review_created_at,
        }


class OrderStatusEvent(Base):
    """Append-only status history entry"""
    __tablename__ = "order_status_history"

    id = Column(Integer, primary_key=True, autoincrement=True)
    order_id = Column(UUID(as_uuid=True), ForeignKey("orders.id"), nullable=False, index=True)

    status = Column(String(50), nullable=False)
    timestamp = Column(DateTime, nullable=False, default=datetime.utcnow)
    latitude = Column(Float)
    longitude = Column(Float)
    note = Column(Text)

    order = relationship("Order", back_populates="status_history")

    @property
    def location(self):
        if self.latitude is None or self.longitude is None:
            return None
        return {"latitude": self.latitude, "longitude": self.longitude}


class OrderDeclinedRider(Base):
    """Riders who declined an order; excluded from its future listings"""
    __tablename__ = "order_declined_riders"

    order_id = Column(UUID(as_uuid=True), ForeignKey("orders.id"), primary_key=True)
    rider_id = Column(UUID(as_uuid=True), ForeignKey("riders.id"), primary_key=True)
    created_at = Column(DateTime, default=datetime.utcnow)

    order = relationship("Order", back_populates="declined")
