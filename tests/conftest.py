"""Test configuration and fixtures"""

from decimal import Decimal
from types import SimpleNamespace
from uuid import uuid4

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import select
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker

from app.main import app
from app.database import Base, get_db
from app.models.user import User, UserRole
from app.models.restaurant import Restaurant
from app.models.rider import Rider, RiderStatus
from app.models.order import Order, OrderStatusEvent
from app.api.auth import get_password_hash, create_access_token


# Shared by every fixture account
TEST_PASSWORD = "testpass123"
TEST_PASSWORD_HASH = get_password_hash(TEST_PASSWORD)


@pytest.fixture
async def test_engine(tmp_path):
    """File-backed SQLite so several sessions can contend for the same rows"""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}", echo=False)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture
def session_factory(test_engine):
    return async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def test_db(session_factory):
    """Create test database session"""
    async with session_factory() as session:
        yield session


async def _create_user(db, email, role, full_name, phone="+15550000000"):
    user = User(
        id=uuid4(),
        email=email,
        hashed_password=TEST_PASSWORD_HASH,
        full_name=full_name,
        phone=phone,
        role=role.value,
        address_json={"street": "1 Test St", "city": "Springfield", "state": "IL", "zip_code": "62701"},
        is_active=True,
    )
    db.add(user)
    await db.commit()
    return user


@pytest.fixture
def make_user(test_db):
    async def _make(email, role, full_name="Test User"):
        return await _create_user(test_db, email, role, full_name)

    return _make


@pytest.fixture
async def test_owner(test_db):
    """Create a restaurant owner"""
    return await _create_user(test_db, "owner@example.com", UserRole.OWNER, "Olive Owner")


@pytest.fixture
async def test_customer(test_db):
    """Create a customer"""
    return await _create_user(test_db, "customer@example.com", UserRole.CUSTOMER, "Casey Customer", "+15551234567")


@pytest.fixture
async def other_customer(test_db):
    return await _create_user(test_db, "other@example.com", UserRole.CUSTOMER, "Other Customer")


@pytest.fixture
async def test_restaurant(test_db, test_owner):
    """Create a test restaurant"""
    restaurant = Restaurant(
        id=uuid4(),
        owner_id=test_owner.id,
        name="Test Kitchen",
        address="123 Test St",
        phone="+15557654321",
        cuisine="Italian",
    )
    test_db.add(restaurant)
    await test_db.commit()
    return restaurant


@pytest.fixture
def make_rider(test_db):
    """Factory for rider accounts with profiles"""
    counter = {"n": 0}

    async def _make(status=RiderStatus.AVAILABLE.value):
        counter["n"] += 1
        n = counter["n"]
        user = await _create_user(test_db, f"rider{n}@example.com", UserRole.RIDER, f"Rider {n}")
        rider = Rider(
            id=uuid4(),
            user_id=user.id,
            name=f"Rider {n}",
            email=user.email,
            phone=f"+1555100000{n}",
            vehicle_type="bicycle",
            vehicle_number=f"BK-{n:03d}",
            status=status,
        )
        test_db.add(rider)
        await test_db.commit()
        return rider

    return _make


@pytest.fixture
async def rider_a(make_rider):
    return await make_rider()


@pytest.fixture
async def rider_b(make_rider):
    return await make_rider()


@pytest.fixture
def make_order(test_db, test_customer, test_restaurant):
    """Factory for orders already at a given status"""
    async def _make(status="pending", rider=None, customer=None):
        order = Order(
            id=uuid4(),
            customer_id=(customer or test_customer).id,
            restaurant_id=test_restaurant.id,
            rider_id=rider.id if rider else None,
            items_json=[
                {"menu_item_id": None, "name": "Margherita Pizza", "price": 14.99, "quantity": 1, "image": None},
                {"menu_item_id": None, "name": "Caesar Salad", "price": 10.99, "quantity": 2, "image": None},
            ],
            total_amount=Decimal("36.97"),
            status=status,
            delivery_address={"street": "1 Test St", "city": "Springfield", "state": "IL", "zip_code": "62701"},
        )
        test_db.add(order)
        await test_db.flush()
        test_db.add(OrderStatusEvent(order_id=order.id, status=status))
        await test_db.commit()
        return order

    return _make


def auth_headers(user_id, role) -> dict:
    token = create_access_token(SimpleNamespace(id=user_id, role=role))
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def headers_for():
    """Bearer headers for a user id acting in a role"""
    return auth_headers


@pytest.fixture
async def client(test_db):
    """Create test client with overridden database"""
    async def override_get_db():
        yield test_db

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()


@pytest.fixture
def history(test_db):
    """Statuses recorded for an order, oldest first"""
    async def _history(order_id):
        result = await test_db.execute(
            select(OrderStatusEvent.status)
            .where(OrderStatusEvent.order_id == order_id)
            .order_by(OrderStatusEvent.id)
        )
        return list(result.scalars().all())

    return _history
