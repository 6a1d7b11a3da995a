"""Shared persistence helpers for order status changes.

Every status write goes through :func:`apply_transition`, which issues a
conditional UPDATE keyed on the status the caller observed. A zero row count
means another request moved the order first, so no write happened and the
caller reports the lost race instead of overwriting it.
"""

from contextlib import asynccontextmanager
from datetime import datetime
from typing import AsyncIterator, Optional
from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload
import structlog

from app.errors import DeliveryError, StorageFailure
from app.models.order import Order, OrderStatusEvent

logger = structlog.get_logger()


def order_query():
    """Select orders with the restaurant and customer projections loaded"""
    return (
        select(Order)
        .options(
            selectinload(Order.restaurant),
            selectinload(Order.customer),
        )
        .execution_options(populate_existing=True)
    )


async def load_order(db: AsyncSession, *criteria) -> Optional[Order]:
    """Fetch a single order matching all criteria, bypassing stale session state"""
    result = await db.execute(order_query().where(*criteria))
    return result.scalar_one_or_none()


async def reload_order(db: AsyncSession, order_id: UUID) -> Order:
    result = await db.execute(order_query().where(Order.id == order_id))
    return result.scalar_one()


async def apply_transition(
    db: AsyncSession,
    order: Order,
    new_status: str,
    *criteria,
    note: Optional[str] = None,
    latitude: Optional[float] = None,
    longitude: Optional[float] = None,
    **values,
) -> bool:
    """Move ``order`` from its loaded status to ``new_status``.

    Extra ``criteria`` narrow the conditional UPDATE further and ``values``
    are written alongside the status. Returns False, having written nothing,
    when the row no longer matches. Does not commit.
    """
    result = await db.execute(
        update(Order)
        .where(Order.id == order.id, Order.status == order.status, *criteria)
        .values(status=new_status, updated_at=datetime.utcnow(), **values)
        .execution_options(synchronize_session=False)
    )
    if result.rowcount != 1:
        return False

    db.add(
        OrderStatusEvent(
            order_id=order.id,
            status=new_status,
            timestamp=datetime.utcnow(),
            latitude=latitude,
            longitude=longitude,
            note=note,
        )
    )
    return True


@asynccontextmanager
async def unit_of_work(db: AsyncSession, action: str, **context) -> AsyncIterator[None]:
    """Commit everything written inside the block, or none of it"""
    try:
        yield
        await db.commit()
    except DeliveryError:
        await db.rollback()
        raise
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error("Storage failure", action=action, error=str(e), **context)
        raise StorageFailure(f"Failed to {action}") from e
