"""Rider-side delivery progress"""

from typing import Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession
import structlog

from app.errors import InvalidTransition, OrderNotFoundOrNotAssigned
from app.models.order import Order, OrderStatus
from app.models.rider import Rider, RiderStatus
from app.services.lifecycle import apply_transition, load_order, reload_order, unit_of_work
from app.services.riders import get_rider

logger = structlog.get_logger()

# Each delivery status has exactly one successor; delivered is terminal
DELIVERY_TRANSITIONS = {
    OrderStatus.PICKED_UP.value: [OrderStatus.IN_TRANSIT.value],
    OrderStatus.IN_TRANSIT.value: [OrderStatus.NEAR_DELIVERY.value],
    OrderStatus.NEAR_DELIVERY.value: [OrderStatus.DELIVERED.value],
}


def valid_next_statuses(status: str) -> list:
    return list(DELIVERY_TRANSITIONS.get(status, []))


async def update_delivery_status(
    db: AsyncSession,
    user_id: UUID,
    order_id: UUID,
    requested_status: str,
    latitude: Optional[float] = None,
    longitude: Optional[float] = None,
    note: Optional[str] = None,
) -> Order:
    """Advance an assigned order one step; delivering releases the rider"""
    rider = await get_rider(db, user_id)

    order = await load_order(db, Order.id == order_id, Order.rider_id == rider.id)
    if order is None:
        logger.info("Order not assigned to rider", order_id=str(order_id), rider_id=str(rider.id))
        raise OrderNotFoundOrNotAssigned()

    valid = valid_next_statuses(order.status)
    if requested_status not in valid:
        logger.info(
            "Invalid delivery status transition",
            order_id=str(order_id),
            from_status=order.status,
            to_status=requested_status,
        )
        raise InvalidTransition(
            f"Cannot change status from {order.status} to {requested_status}",
            valid_transitions=valid,
        )

    async with unit_of_work(db, "update delivery status", order_id=str(order_id), rider_id=str(rider.id)):
        moved = await apply_transition(
            db,
            order,
            requested_status,
            Order.rider_id == rider.id,
            latitude=latitude,
            longitude=longitude,
            note=note,
        )
        if not moved:
            raise InvalidTransition("Order status changed, reload and try again")

        if requested_status == OrderStatus.DELIVERED.value:
            rider.status = RiderStatus.AVAILABLE.value
            rider.total_deliveries = Rider.total_deliveries + 1

    if requested_status == OrderStatus.DELIVERED.value:
        await db.refresh(rider)
        logger.info("Rider released", rider_id=str(rider.id), total_deliveries=rider.total_deliveries)

    logger.info("Delivery status updated", order_id=str(order_id), status=requested_status)
    return await reload_order(db, order.id)
