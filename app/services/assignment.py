"""Delivery assignment: offering ready orders to riders and claiming them.

Accepting an order is a race between riders. The claim is a single
conditional UPDATE that only matches while ``rider_id`` is still NULL, so
exactly one concurrent acceptor can win. The rider's own flip to busy is a
second conditional UPDATE in the same transaction; if it misses, the claim is
rolled back with it.
"""

from datetime import datetime
from typing import List
from uuid import UUID

from sqlalchemy import and_, delete, exists, update
from sqlalchemy.dialects.postgresql import insert as postgresql_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.ext.asyncio import AsyncSession
import structlog

from app.errors import OrderAlreadyTaken, OrderNotFound, OrderNotReady, RiderNotAvailable
from app.models.order import Order, OrderDeclinedRider, OrderStatus
from app.models.rider import Rider, RiderStatus
from app.services.lifecycle import (
    apply_transition,
    load_order,
    order_query,
    reload_order,
    unit_of_work,
)
from app.services.riders import get_rider

logger = structlog.get_logger()

# Dialects with INSERT .. ON CONFLICT DO NOTHING
_INSERTS = {
    "postgresql": postgresql_insert,
    "sqlite": sqlite_insert,
}


def _not_declined_by(rider_id: UUID):
    return ~exists().where(
        and_(
            OrderDeclinedRider.order_id == Order.id,
            OrderDeclinedRider.rider_id == rider_id,
        )
    )


async def list_delivery_requests(db: AsyncSession, user_id: UUID) -> List[Order]:
    """Unassigned orders waiting for pickup that this rider has not declined"""
    rider = await get_rider(db, user_id)

    result = await db.execute(
        order_query()
        .where(
            Order.status == OrderStatus.READY_FOR_PICKUP.value,
            Order.rider_id.is_(None),
            _not_declined_by(rider.id),
        )
        .order_by(Order.created_at.asc(), Order.id.asc())
    )
    orders = result.scalars().all()

    logger.info("Listed delivery requests", rider_id=str(rider.id), count=len(orders))
    return list(orders)


async def accept_delivery_request(db: AsyncSession, user_id: UUID, order_id: UUID) -> Order:
    """Claim an order for the acting rider and mark them busy"""
    rider = await get_rider(db, user_id)
    logger.info("Rider accepting order", rider_id=str(rider.id), order_id=str(order_id))

    if rider.status != RiderStatus.AVAILABLE.value:
        logger.info("Rider not available", rider_id=str(rider.id), status=rider.status)
        raise RiderNotAvailable(
            f"Cannot accept orders while status is {rider.status}",
            status=rider.status,
        )

    order = await load_order(db, Order.id == order_id)
    if order is None:
        raise OrderNotFound()

    if order.status != OrderStatus.READY_FOR_PICKUP.value:
        logger.info("Order not ready for pickup", order_id=str(order_id), status=order.status)
        raise OrderNotReady()

    if order.rider_id is not None:
        raise OrderAlreadyTaken()

    async with unit_of_work(db, "accept delivery request", order_id=str(order_id), rider_id=str(rider.id)):
        claimed = await apply_transition(
            db,
            order,
            OrderStatus.PICKED_UP.value,
            Order.rider_id.is_(None),
            rider_id=rider.id,
        )
        if not claimed:
            logger.info("Order claimed by another rider", order_id=str(order_id), rider_id=str(rider.id))
            raise OrderAlreadyTaken()

        flipped = await db.execute(
            update(Rider)
            .where(Rider.id == rider.id, Rider.status == RiderStatus.AVAILABLE.value)
            .values(status=RiderStatus.BUSY.value)
            .execution_options(synchronize_session=False)
        )
        if flipped.rowcount != 1:
            raise RiderNotAvailable("Rider status changed while accepting the order")

        # The assigned rider never stays in the declined set
        await db.execute(
            delete(OrderDeclinedRider)
            .where(
                OrderDeclinedRider.order_id == order.id,
                OrderDeclinedRider.rider_id == rider.id,
            )
            .execution_options(synchronize_session=False)
        )

    await db.refresh(rider)
    logger.info("Order assigned", order_id=str(order_id), rider_id=str(rider.id))
    return await reload_order(db, order.id)


async def decline_delivery_request(db: AsyncSession, user_id: UUID, order_id: UUID) -> Order:
    """Hide an order from this rider's future listings; idempotent"""
    rider = await get_rider(db, user_id)

    order = await load_order(db, Order.id == order_id)
    if order is None:
        raise OrderNotFound()

    if order.status != OrderStatus.READY_FOR_PICKUP.value or order.rider_id is not None:
        raise OrderNotReady("Order is not ready for delivery")

    insert = _INSERTS[db.bind.dialect.name]
    async with unit_of_work(db, "decline delivery request", order_id=str(order_id), rider_id=str(rider.id)):
        result = await db.execute(
            insert(OrderDeclinedRider)
            .values(order_id=order.id, rider_id=rider.id, created_at=datetime.utcnow())
            .on_conflict_do_nothing(index_elements=["order_id", "rider_id"])
        )

    if result.rowcount == 1:
        logger.info("Delivery request declined", order_id=str(order_id), rider_id=str(rider.id))

    return await reload_order(db, order.id)
