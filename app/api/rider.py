"""Rider API endpoints"""

from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
import structlog

from app.database import get_db
from app.models.rider import Rider
from app.models.user import User, UserRole
from app.schemas.order import DeliveryStatusUpdate, OrderResponse, DeliveryActionResponse
from app.schemas.rider import (
    RiderRegister,
    RiderResponse,
    RiderAuthResponse,
    RiderStatusUpdate,
    RiderStatusResponse,
    LocationUpdate,
    MessageResponse,
)
from app.api.auth import create_user, issue_token, require_role
from app.services import assignment, delivery_status, riders

router = APIRouter()
logger = structlog.get_logger()

rider_only = require_role(UserRole.RIDER)


@router.post("/register", response_model=RiderAuthResponse, status_code=201)
async def register_rider(
    rider_data: RiderRegister,
    db: AsyncSession = Depends(get_db),
):
    """Create a rider account and profile"""
    result = await db.execute(select(Rider).where(Rider.email == rider_data.email))
    if result.scalar_one_or_none():
        raise HTTPException(status_code=400, detail="Email already registered")

    user = await create_user(
        db,
        email=rider_data.email,
        password=rider_data.password,
        full_name=rider_data.name,
        phone=rider_data.phone,
        role=UserRole.RIDER,
    )
    rider = Rider(
        user_id=user.id,
        name=rider_data.name,
        email=rider_data.email,
        phone=rider_data.phone,
        vehicle_type=rider_data.vehicle_type,
        vehicle_number=rider_data.vehicle_number,
    )
    db.add(rider)
    await db.commit()
    await db.refresh(rider)

    logger.info("Rider registered", rider_id=str(rider.id), user_id=str(user.id))
    return RiderAuthResponse(rider=RiderResponse.model_validate(rider), token=issue_token(user))


@router.get("/status", response_model=RiderStatusResponse)
async def get_rider_status(
    current_user: User = Depends(rider_only),
    db: AsyncSession = Depends(get_db),
):
    """Current availability"""
    return RiderStatusResponse(status=await riders.get_status(db, current_user.id))


@router.post("/status", response_model=RiderStatusResponse)
async def update_rider_status(
    status_update: RiderStatusUpdate,
    current_user: User = Depends(rider_only),
    db: AsyncSession = Depends(get_db),
):
    """Go online or offline"""
    rider = await riders.set_status(db, current_user.id, status_update.status)
    return RiderStatusResponse(status=rider.status)


@router.post("/location", response_model=MessageResponse)
async def update_location(
    location: LocationUpdate,
    current_user: User = Depends(rider_only),
    db: AsyncSession = Depends(get_db),
):
    """Report current position"""
    await riders.set_location(db, current_user.id, location.longitude, location.latitude)
    return MessageResponse(message="Location updated successfully")


@router.get("/delivery-requests", response_model=List[OrderResponse])
async def list_delivery_requests(
    current_user: User = Depends(rider_only),
    db: AsyncSession = Depends(get_db),
):
    """Orders ready for pickup that no rider has claimed"""
    return await assignment.list_delivery_requests(db, current_user.id)


@router.post("/delivery-requests/{order_id}/accept", response_model=DeliveryActionResponse)
async def accept_delivery_request(
    order_id: UUID,
    current_user: User = Depends(rider_only),
    db: AsyncSession = Depends(get_db),
):
    """Claim an order"""
    order = await assignment.accept_delivery_request(db, current_user.id, order_id)
    return DeliveryActionResponse(
        message="Delivery request accepted successfully",
        order=OrderResponse.model_validate(order),
    )


@router.post("/delivery-requests/{order_id}/decline", response_model=DeliveryActionResponse)
async def decline_delivery_request(
    order_id: UUID,
    current_user: User = Depends(rider_only),
    db: AsyncSession = Depends(get_db),
):
    """Stop seeing an order in the request list"""
    order = await assignment.decline_delivery_request(db, current_user.id, order_id)
    return DeliveryActionResponse(
        message="Delivery request declined",
        order=OrderResponse.model_validate(order),
    )


@router.get("/active-delivery", response_model=OrderResponse)
async def get_active_delivery(
    current_user: User = Depends(rider_only),
    db: AsyncSession = Depends(get_db),
):
    """The order the rider is currently delivering"""
    return await riders.get_active_delivery(db, current_user.id)


@router.post("/active-delivery/{order_id}/status", response_model=DeliveryActionResponse)
async def update_delivery_status(
    order_id: UUID,
    status_update: DeliveryStatusUpdate,
    current_user: User = Depends(rider_only),
    db: AsyncSession = Depends(get_db),
):
    """Advance delivery progress by one step"""
    order = await delivery_status.update_delivery_status(
        db,
        current_user.id,
        order_id,
        status_update.status,
        latitude=status_update.latitude,
        longitude=status_update.longitude,
        note=status_update.note,
    )
    return DeliveryActionResponse(
        message="Delivery status updated successfully",
        order=OrderResponse.model_validate(order),
    )
