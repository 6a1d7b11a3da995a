"""Tests for order placement, order views and reviews"""

from decimal import Decimal
from uuid import uuid4

import pytest

from app.errors import (
    EmptyOrder,
    NotAuthorized,
    OrderNotFound,
    RestaurantNotFound,
    ReviewNotAllowed,
)
from app.models.user import UserRole
from app.services import orders


ITEMS = [
    {"menu_item_id": None, "name": "Pad Thai", "price": 12.5, "quantity": 2, "image": None},
    {"menu_item_id": None, "name": "Spring Rolls", "price": 4.99, "quantity": 1, "image": None},
]


def test_order_total():
    assert orders.order_total(ITEMS) == Decimal("29.99")


def test_order_total_avoids_float_drift():
    items = [{"price": 0.1, "quantity": 3}, {"price": 0.2, "quantity": 1}]
    assert orders.order_total(items) == Decimal("0.50")


@pytest.mark.asyncio
async def test_create_order(test_db, test_customer, test_restaurant, history):
    order = await orders.create_order(
        test_db,
        test_customer.id,
        test_restaurant.id,
        ITEMS,
        delivery_address={"street": "5 Elm St", "city": "Springfield"},
        payment_method="card",
    )

    assert order.status == "pending"
    assert order.delivery_status == "pending"
    assert order.rider_id is None
    assert order.total_amount == Decimal("29.99")
    assert order.items == ITEMS
    assert order.payment_method == "card"
    assert order.payment_status == "pending"
    assert order.restaurant.name == "Test Kitchen"
    assert await history(order.id) == ["pending"]


@pytest.mark.asyncio
async def test_create_order_requires_items(test_db, test_customer, test_restaurant):
    with pytest.raises(EmptyOrder):
        await orders.create_order(test_db, test_customer.id, test_restaurant.id, [])


@pytest.mark.asyncio
async def test_create_order_unknown_restaurant(test_db, test_customer):
    with pytest.raises(RestaurantNotFound):
        await orders.create_order(test_db, test_customer.id, uuid4(), ITEMS)


@pytest.mark.asyncio
async def test_customer_sees_only_own_orders(make_order, test_customer, other_customer, test_db):
    mine = await make_order()
    await make_order(customer=other_customer)

    listed = await orders.list_customer_orders(test_db, test_customer.id)

    assert [o.id for o in listed] == [mine.id]


@pytest.mark.asyncio
async def test_get_customer_order(make_order, test_customer, other_customer, test_db):
    order = await make_order()

    found = await orders.get_customer_order(test_db, order.id, test_customer.id)
    assert found.id == order.id

    with pytest.raises(NotAuthorized):
        await orders.get_customer_order(test_db, order.id, other_customer.id)

    with pytest.raises(OrderNotFound):
        await orders.get_customer_order(test_db, uuid4(), test_customer.id)


@pytest.mark.asyncio
async def test_restaurant_orders_filtered_by_status(make_order, test_owner, test_db):
    pending = await make_order()
    ready = await make_order(status="ready_for_pickup")

    everything = await orders.list_restaurant_orders(test_db, test_owner.id)
    assert {o.id for o in everything} == {pending.id, ready.id}

    only_ready = await orders.list_restaurant_orders(test_db, test_owner.id, status="ready_for_pickup")
    assert [o.id for o in only_ready] == [ready.id]


@pytest.mark.asyncio
async def test_restaurant_orders_require_a_restaurant(make_user, test_db):
    owner = await make_user("empty-owner@example.com", UserRole.OWNER)

    with pytest.raises(RestaurantNotFound):
        await orders.list_restaurant_orders(test_db, owner.id)


@pytest.mark.asyncio
async def test_review_delivered_order_once(make_order, make_rider, test_customer, test_db):
    rider = await make_rider()
    order = await make_order(status="delivered", rider=rider)

    reviewed = await orders.submit_review(test_db, order.id, test_customer.id, 5, "  Still hot!  ")

    assert reviewed.review == {
        "rating": 5,
        "comment": "Still hot!",
        "created_at": reviewed.review_created_at,
    }

    with pytest.raises(ReviewNotAllowed) as exc_info:
        await orders.submit_review(test_db, order.id, test_customer.id, 1, "Changed my mind")

    assert exc_info.value.message == "Order has already been reviewed"
    await test_db.refresh(order)
    assert order.review_rating == 5


@pytest.mark.asyncio
async def test_review_requires_delivered_order(make_order, test_customer, test_db):
    order = await make_order(status="in_transit")

    with pytest.raises(ReviewNotAllowed):
        await orders.submit_review(test_db, order.id, test_customer.id, 4)


@pytest.mark.asyncio
async def test_review_only_by_ordering_customer(make_order, other_customer, test_db):
    order = await make_order(status="delivered")

    with pytest.raises(NotAuthorized):
        await orders.submit_review(test_db, order.id, other_customer.id, 4)
