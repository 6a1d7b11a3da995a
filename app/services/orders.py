"""Order creation and read views for customers and owners"""

from datetime import datetime
from decimal import Decimal
from typing import List, Optional
from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession
import structlog

from app.errors import (
    EmptyOrder,
    NotAuthorized,
    OrderNotFound,
    RestaurantNotFound,
    ReviewNotAllowed,
)
from app.models.order import Order, OrderStatus, OrderStatusEvent, PaymentMethod
from app.models.restaurant import Restaurant
from app.services.lifecycle import load_order, order_query, reload_order, unit_of_work
from app.services.order_status import owned_restaurant_ids

logger = structlog.get_logger()


def order_total(items: List[dict]) -> Decimal:
    """Sum of unit price times quantity over the item snapshot"""
    return sum(
        (Decimal(str(item["price"])) * item["quantity"] for item in items),
        Decimal("0"),
    ).quantize(Decimal("0.01"))


async def create_order(
    db: AsyncSession,
    customer_user_id: UUID,
    restaurant_id: UUID,
    items: List[dict],
    delivery_address: Optional[dict] = None,
    payment_method: str = PaymentMethod.CASH.value,
) -> Order:
    """Place an order; items are snapshotted and never change afterwards"""
    if not items:
        raise EmptyOrder()

    result = await db.execute(select(Restaurant).where(Restaurant.id == restaurant_id))
    if result.scalar_one_or_none() is None:
        raise RestaurantNotFound()

    order = Order(
        customer_id=customer_user_id,
        restaurant_id=restaurant_id,
        items_json=items,
        total_amount=order_total(items),
        status=OrderStatus.PENDING.value,
        delivery_address=delivery_address,
        payment_method=payment_method,
    )

    async with unit_of_work(db, "create order", customer_id=str(customer_user_id)):
        db.add(order)
        await db.flush()
        db.add(OrderStatusEvent(order_id=order.id, status=OrderStatus.PENDING.value))

    logger.info(
        "Order created",
        order_id=str(order.id),
        restaurant_id=str(restaurant_id),
        total_amount=str(order.total_amount),
    )
    return await reload_order(db, order.id)


async def list_customer_orders(db: AsyncSession, customer_user_id: UUID) -> List[Order]:
    result = await db.execute(
        order_query()
        .where(Order.customer_id == customer_user_id)
        .order_by(Order.created_at.desc())
    )
    return list(result.scalars().all())


async def get_customer_order(db: AsyncSession, order_id: UUID, customer_user_id: UUID) -> Order:
    order = await load_order(db, Order.id == order_id)
    if order is None:
        raise OrderNotFound()
    if order.customer_id != customer_user_id:
        raise NotAuthorized("Not authorized to view this order")
    return order


async def list_restaurant_orders(
    db: AsyncSession,
    owner_user_id: UUID,
    status: Optional[str] = None,
) -> List[Order]:
    """Orders across every restaurant the owner runs, newest first"""
    restaurant_ids = await owned_restaurant_ids(db, owner_user_id)
    if not restaurant_ids:
        raise RestaurantNotFound()

    query = order_query().where(Order.restaurant_id.in_(restaurant_ids))
    if status:
        query = query.where(Order.status == status)

    result = await db.execute(query.order_by(Order.created_at.desc()))
    return list(result.scalars().all())


async def submit_review(
    db: AsyncSession,
    order_id: UUID,
    customer_user_id: UUID,
    rating: int,
    comment: str = "",
) -> Order:
    """One review per delivered order, by the customer who placed it"""
    order = await get_customer_order(db, order_id, customer_user_id)

    if order.status != OrderStatus.DELIVERED.value:
        raise ReviewNotAllowed("Only delivered orders can be reviewed")

    async with unit_of_work(db, "submit review", order_id=str(order_id)):
        result = await db.execute(
            update(Order)
            .where(Order.id == order.id, Order.review_rating.is_(None))
            .values(
                review_rating=rating,
                review_comment=comment.strip(),
                review_created_at=datetime.utcnow(),
            )
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            raise ReviewNotAllowed("Order has already been reviewed")

    logger.info("Order reviewed", order_id=str(order_id), rating=rating)
    return await reload_order(db, order.id)
