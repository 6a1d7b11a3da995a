"""Tests for listing, accepting and declining delivery requests"""

import asyncio
from uuid import uuid4

import pytest

from app.errors import (
    NotAuthorized,
    OrderAlreadyTaken,
    OrderNotFound,
    OrderNotReady,
    RiderNotAvailable,
)
from app.services import assignment


@pytest.mark.asyncio
async def test_list_only_unassigned_ready_orders(make_order, rider_a, rider_b, test_db):
    """Only ready_for_pickup orders without a rider are offered"""
    ready = await make_order(status="ready_for_pickup")
    await make_order(status="preparing")
    await make_order(status="picked_up", rider=rider_b)
    await make_order(status="cancelled")

    orders = await assignment.list_delivery_requests(test_db, rider_a.user_id)

    assert [o.id for o in orders] == [ready.id]
    assert orders[0].restaurant.name == "Test Kitchen"
    assert orders[0].customer.full_name == "Casey Customer"


@pytest.mark.asyncio
async def test_list_orders_oldest_first(make_order, rider_a, test_db):
    first = await make_order(status="ready_for_pickup")
    second = await make_order(status="ready_for_pickup")
    third = await make_order(status="ready_for_pickup")

    orders = await assignment.list_delivery_requests(test_db, rider_a.user_id)

    assert [o.id for o in orders] == [first.id, second.id, third.id]


@pytest.mark.asyncio
async def test_list_requires_rider_profile(test_db, test_customer):
    with pytest.raises(NotAuthorized):
        await assignment.list_delivery_requests(test_db, test_customer.id)


@pytest.mark.asyncio
async def test_accept_assigns_order_and_marks_rider_busy(make_order, rider_a, test_db, history):
    order = await make_order(status="ready_for_pickup")

    accepted = await assignment.accept_delivery_request(test_db, rider_a.user_id, order.id)

    assert accepted.rider_id == rider_a.id
    assert accepted.status == "picked_up"
    assert accepted.delivery_status == "picked_up"
    assert accepted.restaurant.name == "Test Kitchen"
    await test_db.refresh(rider_a)
    assert rider_a.status == "busy"
    assert await history(order.id) == ["ready_for_pickup", "picked_up"]


@pytest.mark.asyncio
async def test_accept_rejected_when_rider_not_available(make_order, make_rider, test_db):
    offline_rider = await make_rider(status="offline")
    order = await make_order(status="ready_for_pickup")

    with pytest.raises(RiderNotAvailable) as exc_info:
        await assignment.accept_delivery_request(test_db, offline_rider.user_id, order.id)

    assert "offline" in exc_info.value.message
    await test_db.refresh(order)
    assert order.rider_id is None
    assert order.status == "ready_for_pickup"


@pytest.mark.asyncio
async def test_accept_unknown_order(rider_a, test_db):
    with pytest.raises(OrderNotFound):
        await assignment.accept_delivery_request(test_db, rider_a.user_id, uuid4())


@pytest.mark.asyncio
async def test_accept_order_not_ready(make_order, rider_a, test_db):
    order = await make_order(status="preparing")

    with pytest.raises(OrderNotReady):
        await assignment.accept_delivery_request(test_db, rider_a.user_id, order.id)

    await test_db.refresh(rider_a)
    assert rider_a.status == "available"


@pytest.mark.asyncio
async def test_second_rider_cannot_take_assigned_order(make_order, rider_a, rider_b, test_db):
    order = await make_order(status="ready_for_pickup")
    await assignment.accept_delivery_request(test_db, rider_a.user_id, order.id)

    with pytest.raises((OrderAlreadyTaken, OrderNotReady)):
        await assignment.accept_delivery_request(test_db, rider_b.user_id, order.id)

    await test_db.refresh(order)
    await test_db.refresh(rider_b)
    assert order.rider_id == rider_a.id
    assert rider_b.status == "available"


@pytest.mark.asyncio
async def test_concurrent_accepts_assign_exactly_one_rider(
    session_factory, make_rider, make_order, test_db, history
):
    """N riders racing for one order: one wins, the rest are turned away"""
    order = await make_order(status="ready_for_pickup")
    riders = [await make_rider() for _ in range(5)]

    async def attempt(rider):
        async with session_factory() as session:
            try:
                await assignment.accept_delivery_request(session, rider.user_id, order.id)
                return rider.id
            except (OrderAlreadyTaken, OrderNotReady) as e:
                return e

    results = await asyncio.gather(*(attempt(r) for r in riders))

    winners = [r for r in results if not isinstance(r, Exception)]
    assert len(winners) == 1
    winner_id = winners[0]

    await test_db.refresh(order)
    assert order.rider_id == winner_id
    assert order.status == "picked_up"

    for rider in riders:
        await test_db.refresh(rider)
        expected = "busy" if rider.id == winner_id else "available"
        assert rider.status == expected

    assert (await history(order.id)).count("picked_up") == 1


@pytest.mark.asyncio
async def test_accept_after_stale_read_loses_race(
    monkeypatch, session_factory, make_order, rider_a, rider_b, test_db
):
    """A rider who saw the order unassigned still cannot overwrite the winner"""
    order = await make_order(status="ready_for_pickup")
    real_load_order = assignment.load_order

    async def load_then_get_overtaken(db, *criteria):
        loaded = await real_load_order(db, *criteria)
        monkeypatch.setattr(assignment, "load_order", real_load_order)
        async with session_factory() as other:
            await assignment.accept_delivery_request(other, rider_b.user_id, order.id)
        return loaded

    monkeypatch.setattr(assignment, "load_order", load_then_get_overtaken)

    async with session_factory() as session:
        with pytest.raises(OrderAlreadyTaken):
            await assignment.accept_delivery_request(session, rider_a.user_id, order.id)

    await test_db.refresh(order)
    await test_db.refresh(rider_a)
    await test_db.refresh(rider_b)
    assert order.rider_id == rider_b.id
    assert rider_a.status == "available"
    assert rider_b.status == "busy"


@pytest.mark.asyncio
async def test_decline_is_idempotent(make_order, rider_a, test_db):
    order = await make_order(status="ready_for_pickup")

    await assignment.decline_delivery_request(test_db, rider_a.user_id, order.id)
    declined = await assignment.decline_delivery_request(test_db, rider_a.user_id, order.id)

    assert declined.declined_rider_ids == [rider_a.id]
    assert declined.status == "ready_for_pickup"
    assert declined.rider_id is None


@pytest.mark.asyncio
async def test_declined_order_hidden_only_from_decliner(make_order, rider_a, rider_b, test_db):
    order = await make_order(status="ready_for_pickup")

    await assignment.decline_delivery_request(test_db, rider_a.user_id, order.id)

    assert await assignment.list_delivery_requests(test_db, rider_a.user_id) == []
    others = await assignment.list_delivery_requests(test_db, rider_b.user_id)
    assert [o.id for o in others] == [order.id]


@pytest.mark.asyncio
async def test_decline_requires_order_awaiting_pickup(make_order, rider_a, test_db):
    order = await make_order(status="confirmed")

    with pytest.raises(OrderNotReady):
        await assignment.decline_delivery_request(test_db, rider_a.user_id, order.id)


@pytest.mark.asyncio
async def test_accept_clears_riders_own_decline(make_order, rider_a, test_db):
    """The assigned rider is never left in the declined set"""
    order = await make_order(status="ready_for_pickup")
    await assignment.decline_delivery_request(test_db, rider_a.user_id, order.id)

    accepted = await assignment.accept_delivery_request(test_db, rider_a.user_id, order.id)

    assert accepted.rider_id == rider_a.id
    assert rider_a.id not in accepted.declined_rider_ids


@pytest.mark.asyncio
async def test_overlapping_declines_by_same_rider_both_succeed(
    monkeypatch, session_factory, make_order, rider_a, test_db
):
    """A second decline racing the first still reports success"""
    order = await make_order(status="ready_for_pickup")
    real_load_order = assignment.load_order

    async def load_then_decline_elsewhere(db, *criteria):
        loaded = await real_load_order(db, *criteria)
        monkeypatch.setattr(assignment, "load_order", real_load_order)
        async with session_factory() as other:
            await assignment.decline_delivery_request(other, rider_a.user_id, order.id)
        return loaded

    monkeypatch.setattr(assignment, "load_order", load_then_decline_elsewhere)

    async with session_factory() as session:
        declined = await assignment.decline_delivery_request(session, rider_a.user_id, order.id)

    assert declined.declined_rider_ids == [rider_a.id]
    assert await assignment.list_delivery_requests(test_db, rider_a.user_id) == []
