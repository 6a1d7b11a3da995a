#!/usr/bin/env python3
"""
Seed script to create a demo restaurant, customer, riders and orders
"""

import asyncio
import uuid

from passlib.context import CryptContext

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


async def seed_demo_data():
    """Seed demo data for development"""
    from sqlalchemy import select

    from app.database import SessionLocal, engine, Base
    from app.models.user import User, UserRole
    from app.models.restaurant import Restaurant
    from app.models.rider import Rider, RiderStatus
    from app.services import orders, order_status

    # Create tables
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with SessionLocal() as db:
        # Check if demo restaurant already exists
        result = await db.execute(
            select(Restaurant).where(Restaurant.name == "Mario's Italian Kitchen")
        )
        if result.scalar_one_or_none():
            print("Demo data already exists. Skipping...")
            return

        print("Creating demo accounts...")

        owner = User(
            id=uuid.uuid4(),
            email="mario@marios-kitchen.com",
            hashed_password=pwd_context.hash("mario123"),
            full_name="Mario Rossi",
            phone="+15559876543",
            role=UserRole.OWNER.value,
        )
        customer = User(
            id=uuid.uuid4(),
            email="casey@example.com",
            hashed_password=pwd_context.hash("casey123"),
            full_name="Casey Customer",
            phone="+15551234567",
            role=UserRole.CUSTOMER.value,
            address_json={
                "street": "42 Elm Street",
                "city": "New York",
                "state": "NY",
                "zip_code": "10002",
            },
        )
        db.add_all([owner, customer])
        await db.flush()

        restaurant = Restaurant(
            id=uuid.uuid4(),
            owner_id=owner.id,
            name="Mario's Italian Kitchen",
            description="Wood-fired pizza and fresh pasta",
            address="123 Main Street, New York, NY 10001",
            phone="+15559876543",
            cuisine="Italian",
        )
        db.add(restaurant)

        # Two riders: one online near the restaurant, one offline
        for n, (name, vehicle, status) in enumerate(
            [
                ("Rita Rider", "bicycle", RiderStatus.AVAILABLE),
                ("Omar Okafor", "motorcycle", RiderStatus.OFFLINE),
            ],
            start=1,
        ):
            user = User(
                id=uuid.uuid4(),
                email=f"rider{n}@example.com",
                hashed_password=pwd_context.hash("rider123"),
                full_name=name,
                phone=f"+1555000000{n}",
                role=UserRole.RIDER.value,
            )
            db.add(user)
            await db.flush()
            rider = Rider(
                user_id=user.id,
                name=name,
                email=user.email,
                phone=user.phone,
                vehicle_type=vehicle,
                vehicle_number=f"NY-{n:04d}",
                status=status.value,
                longitude=-73.9973,
                latitude=40.7308,
                is_verified=True,
            )
            db.add(rider)

        await db.commit()

        print("Creating orders...")

        menu = [
            {"name": "Margherita Pizza", "price": 14.99, "quantity": 1, "image": None},
            {"name": "Caesar Salad", "price": 10.99, "quantity": 1, "image": None},
            {"name": "Tiramisu", "price": 8.99, "quantity": 2, "image": None},
        ]

        # One order waiting for a rider, one still in the kitchen
        ready = await orders.create_order(db, customer.id, restaurant.id, menu[:2], customer.address_json)
        for status in ["confirmed", "preparing", "ready_for_pickup"]:
            ready = await order_status.set_order_status(db, ready.id, status, owner.id)

        cooking = await orders.create_order(db, customer.id, restaurant.id, menu[2:], customer.address_json)
        cooking = await order_status.set_order_status(db, cooking.id, "confirmed", owner.id)

        print(f"""
Demo data created successfully!

Restaurant: {restaurant.name}
  ID: {restaurant.id}

Users:
  Owner:
    Email: mario@marios-kitchen.com
    Password: mario123

  Customer:
    Email: casey@example.com
    Password: casey123

  Riders:
    Email: rider1@example.com (available)
    Email: rider2@example.com (offline)
    Password: rider123

Orders:
  {ready.id} ready_for_pickup, total {ready.total_amount}
  {cooking.id} confirmed, total {cooking.total_amount}
""")


if __name__ == "__main__":
    asyncio.run(seed_demo_data())
