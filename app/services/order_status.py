"""Restaurant-side order status changes and customer cancellation"""

from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
import structlog

from app.errors import (
    InvalidStatus,
    InvalidTransition,
    NotAuthorized,
    NotCancellable,
    OrderNotFound,
)
from app.models.order import Order, OrderStatus, ORDER_STATUSES, RIDER_PHASE_STATUSES
from app.models.restaurant import Restaurant
from app.services.lifecycle import apply_transition, load_order, reload_order, unit_of_work

logger = structlog.get_logger()

# Statuses an owner may set; anything after pickup belongs to the rider
OWNER_STATUSES = [
    OrderStatus.CONFIRMED.value,
    OrderStatus.PREPARING.value,
    OrderStatus.READY_FOR_PICKUP.value,
    OrderStatus.CANCELLED.value,
]

CANCELLABLE_STATUSES = {OrderStatus.PENDING.value, OrderStatus.CONFIRMED.value}


def owner_next_statuses(status: str) -> list:
    """Statuses an owner can move an order to from ``status``"""
    if status == OrderStatus.CANCELLED.value or status in RIDER_PHASE_STATUSES:
        return []
    return [
        s for s in OWNER_STATUSES
        if s != status and (s != OrderStatus.CANCELLED.value or status in CANCELLABLE_STATUSES)
    ]


async def owned_restaurant_ids(db: AsyncSession, owner_user_id: UUID) -> set:
    result = await db.execute(select(Restaurant.id).where(Restaurant.owner_id == owner_user_id))
    return set(result.scalars().all())


async def set_order_status(
    db: AsyncSession,
    order_id: UUID,
    requested_status: str,
    owner_user_id: UUID,
) -> Order:
    """Owner moves an order through the pre-pickup statuses"""
    if requested_status not in ORDER_STATUSES:
        raise InvalidStatus(
            f"Invalid status. Must be one of: {', '.join(ORDER_STATUSES)}",
            allowed_statuses=ORDER_STATUSES,
        )

    order = await load_order(db, Order.id == order_id)
    if order is None:
        raise OrderNotFound()

    if order.restaurant_id not in await owned_restaurant_ids(db, owner_user_id):
        raise NotAuthorized("Not authorized to update this order")

    if order.status == OrderStatus.CANCELLED.value:
        raise InvalidTransition("Cannot update a cancelled order", valid_transitions=[])

    valid = owner_next_statuses(order.status)
    if requested_status not in valid:
        logger.info(
            "Invalid order status transition",
            order_id=str(order_id),
            from_status=order.status,
            to_status=requested_status,
        )
        raise InvalidTransition(
            f"Cannot change status from {order.status} to {requested_status}",
            valid_transitions=valid,
        )

    async with unit_of_work(db, "update order status", order_id=str(order_id)):
        moved = await apply_transition(db, order, requested_status)
        if not moved:
            raise InvalidTransition("Order status changed, reload and try again")

    logger.info("Order status updated", order_id=str(order_id), status=requested_status)
    return await reload_order(db, order.id)


async def cancel_order(db: AsyncSession, order_id: UUID, customer_user_id: UUID) -> Order:
    """Customer cancels an order that the kitchen has not started"""
    order = await load_order(db, Order.id == order_id)
    if order is None:
        raise OrderNotFound()

    if order.customer_id != customer_user_id:
        raise NotAuthorized("Not authorized to cancel this order")

    if order.status not in CANCELLABLE_STATUSES:
        raise NotCancellable()

    async with unit_of_work(db, "cancel order", order_id=str(order_id)):
        moved = await apply_transition(db, order, OrderStatus.CANCELLED.value, note="Cancelled by customer")
        if not moved:
            raise NotCancellable()

    logger.info("Order cancelled by customer", order_id=str(order_id))
    return await reload_order(db, order.id)
