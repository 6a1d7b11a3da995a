"""Order API endpoints for customers and restaurant owners"""

from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.models.user import User, UserRole
from app.schemas.order import (
    OrderCreate,
    OrderStatusUpdate,
    ReviewCreate,
    OrderResponse,
)
from app.api.auth import require_role
from app.services import orders as order_service
from app.services import order_status

router = APIRouter()

customer_only = require_role(UserRole.CUSTOMER)
owner_only = require_role(UserRole.OWNER)


@router.post("", response_model=OrderResponse, status_code=201)
async def create_order(
    order_data: OrderCreate,
    current_user: User = Depends(customer_only),
    db: AsyncSession = Depends(get_db),
):
    """Place a new order"""
    delivery_address = order_data.delivery_address.model_dump() if order_data.delivery_address else current_user.address_json
    return await order_service.create_order(
        db,
        customer_user_id=current_user.id,
        restaurant_id=order_data.restaurant_id,
        items=[item.model_dump(mode="json") for item in order_data.items],
        delivery_address=delivery_address,
        payment_method=order_data.payment_method,
    )


@router.get("/customer", response_model=List[OrderResponse])
async def list_customer_orders(
    current_user: User = Depends(customer_only),
    db: AsyncSession = Depends(get_db),
):
    """List the customer's orders, newest first"""
    return await order_service.list_customer_orders(db, current_user.id)


@router.get("/customer/{order_id}", response_model=OrderResponse)
async def get_customer_order(
    order_id: UUID,
    current_user: User = Depends(customer_only),
    db: AsyncSession = Depends(get_db),
):
    """Get one of the customer's orders"""
    return await order_service.get_customer_order(db, order_id, current_user.id)


@router.patch("/customer/{order_id}/cancel", response_model=OrderResponse)
async def cancel_order(
    order_id: UUID,
    current_user: User = Depends(customer_only),
    db: AsyncSession = Depends(get_db),
):
    """Cancel a pending or confirmed order"""
    return await order_status.cancel_order(db, order_id, current_user.id)


@router.post("/customer/{order_id}/review", response_model=OrderResponse)
async def review_order(
    order_id: UUID,
    review: ReviewCreate,
    current_user: User = Depends(customer_only),
    db: AsyncSession = Depends(get_db),
):
    """Rate a delivered order"""
    return await order_service.submit_review(
        db, order_id, current_user.id, rating=review.rating, comment=review.comment
    )


@router.get("/restaurant", response_model=List[OrderResponse])
async def list_restaurant_orders(
    status: Optional[str] = None,
    current_user: User = Depends(owner_only),
    db: AsyncSession = Depends(get_db),
):
    """List orders for the owner's restaurants"""
    return await order_service.list_restaurant_orders(db, current_user.id, status=status)


@router.patch("/restaurant/{order_id}/status", response_model=OrderResponse)
async def update_order_status(
    order_id: UUID,
    status_update: OrderStatusUpdate,
    current_user: User = Depends(owner_only),
    db: AsyncSession = Depends(get_db),
):
    """Advance an order through confirmation, preparation and pickup readiness"""
    return await order_status.set_order_status(
        db, order_id, status_update.status, current_user.id
    )
