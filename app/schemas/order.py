"""Order schemas"""

from datetime import datetime
from typing import Optional, List, Literal
from uuid import UUID
from pydantic import BaseModel, Field


class AddressSchema(BaseModel):
    """Delivery address"""
    street: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip_code: Optional[str] = None


class OrderItemCreate(BaseModel):
    """Item snapshot taken when the order is placed"""
    menu_item_id: Optional[UUID] = None
    name: str
    price: float = Field(ge=0)
    quantity: int = Field(1, ge=1)
    image: Optional[str] = None


class OrderCreate(BaseModel):
    """Create order request"""
    restaurant_id: UUID
    items: List[OrderItemCreate]
    delivery_address: Optional[AddressSchema] = None
    payment_method: Literal["cash", "card"] = "cash"


class OrderStatusUpdate(BaseModel):
    """Owner status change request"""
    status: str


class DeliveryStatusUpdate(BaseModel):
    """Rider delivery progress request"""
    status: str
    latitude: Optional[float] = Field(None, ge=-90, le=90)
    longitude: Optional[float] = Field(None, ge=-180, le=180)
    note: Optional[str] = None


class ReviewCreate(BaseModel):
    """Customer review of a delivered order"""
    rating: int = Field(ge=1, le=5)
    comment: str = ""


class OrderItemResponse(BaseModel):
    """Order item in response"""
    menu_item_id: Optional[UUID] = None
    name: str
    price: float
    quantity: int
    image: Optional[str] = None


class StatusHistoryEntry(BaseModel):
    """One status change"""
    status: str
    timestamp: datetime
    location: Optional[dict] = None
    note: Optional[str] = None

    class Config:
        from_attributes = True


class ReviewResponse(BaseModel):
    rating: int
    comment: str
    created_at: Optional[datetime]


class RestaurantSummary(BaseModel):
    """Restaurant fields shown alongside an order"""
    id: UUID
    name: str
    address: str
    phone: str

    class Config:
        from_attributes = True


class CustomerSummary(BaseModel):
    """Customer fields shown alongside an order"""
    id: UUID
    full_name: str
    phone: Optional[str]
    email: str

    class Config:
        from_attributes = True


class OrderResponse(BaseModel):
    """Order response"""
    id: UUID
    customer_id: UUID
    restaurant_id: UUID
    rider_id: Optional[UUID]
    items: List[OrderItemResponse]
    total_amount: float
    status: str
    delivery_status: str
    declined_rider_ids: List[UUID]
    status_history: List[StatusHistoryEntry]
    delivery_address: Optional[AddressSchema]
    payment_method: str
    payment_status: str
    review: Optional[ReviewResponse]
    restaurant: Optional[RestaurantSummary] = None
    customer: Optional[CustomerSummary] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class DeliveryActionResponse(BaseModel):
    """Rider action acknowledgement with the affected order"""
    message: str
    order: OrderResponse
