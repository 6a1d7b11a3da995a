"""Rider availability tracking"""

from uuid import UUID

from sqlalchemy import exists, select, update
from sqlalchemy.ext.asyncio import AsyncSession
import structlog

from app.errors import InvalidStatus, NotAuthorized, NoActiveDelivery, RiderBusy
from app.models.order import Order, TERMINAL_STATUSES
from app.models.rider import Rider, RiderStatus
from app.services.lifecycle import order_query, unit_of_work

logger = structlog.get_logger()

RIDER_STATUSES = [s.value for s in RiderStatus]


async def get_rider(db: AsyncSession, user_id: UUID) -> Rider:
    """Resolve the rider profile of the acting user"""
    result = await db.execute(
        select(Rider)
        .where(Rider.user_id == user_id)
        .execution_options(populate_existing=True)
    )
    rider = result.scalar_one_or_none()
    if rider is None:
        raise NotAuthorized("Not authorized as rider")
    return rider


def _has_active_delivery(rider_id: UUID):
    return exists().where(
        Order.rider_id == rider_id,
        Order.status.not_in(TERMINAL_STATUSES),
    )


async def find_active_delivery(db: AsyncSession, rider: Rider):
    result = await db.execute(
        order_query()
        .where(Order.rider_id == rider.id, Order.status.not_in(TERMINAL_STATUSES))
        .order_by(Order.created_at.asc())
        .limit(1)
    )
    return result.scalars().first()


async def get_status(db: AsyncSession, user_id: UUID) -> str:
    rider = await get_rider(db, user_id)
    return rider.status


async def set_status(db: AsyncSession, user_id: UUID, new_status: str) -> Rider:
    """Self-reported availability; last writer wins between self-toggles.

    The write is conditional: it lands only while the rider holds no
    non-terminal order and is still on the side of busy it was read on.
    """
    if new_status not in RIDER_STATUSES:
        raise InvalidStatus(
            f"Invalid status. Must be one of: {', '.join(RIDER_STATUSES)}",
            allowed_statuses=RIDER_STATUSES,
        )

    rider = await get_rider(db, user_id)

    if new_status == RiderStatus.BUSY.value:
        raise RiderBusy("Riders become busy only by accepting a delivery", status=rider.status)

    # A busy rider with no order left may step out of busy; anyone else must
    # still be out of busy at write time
    if rider.status == RiderStatus.BUSY.value:
        status_guard = Rider.status == RiderStatus.BUSY.value
    else:
        status_guard = Rider.status != RiderStatus.BUSY.value

    async with unit_of_work(db, "update rider status", rider_id=str(rider.id)):
        result = await db.execute(
            update(Rider)
            .where(Rider.id == rider.id, status_guard, ~_has_active_delivery(rider.id))
            .values(status=new_status)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            logger.info("Rider status change blocked", rider_id=str(rider.id), to_status=new_status)
            raise RiderBusy(
                f"Cannot change status from {RiderStatus.BUSY.value} to {new_status}",
                status=RiderStatus.BUSY.value,
            )

    await db.refresh(rider)
    logger.info("Rider status updated", rider_id=str(rider.id), status=new_status)
    return rider


async def set_location(db: AsyncSession, user_id: UUID, longitude: float, latitude: float) -> Rider:
    rider = await get_rider(db, user_id)
    async with unit_of_work(db, "update rider location", rider_id=str(rider.id)):
        rider.longitude = longitude
        rider.latitude = latitude
    return rider


async def get_active_delivery(db: AsyncSession, user_id: UUID) -> Order:
    """The rider's current non-terminal order"""
    rider = await get_rider(db, user_id)
    order = await find_active_delivery(db, rider)
    if order is None:
        raise NoActiveDelivery()
    return order
