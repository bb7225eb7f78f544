"""
Database seeding script for initial users and carriers.

Creates an ADMIN user, one sample CUSTOMER and the default carriers for
development. Safe to re-run: existing rows are left alone.
"""

import asyncio
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from parcel_tracker.app.db.session import AsyncSessionLocal, engine, Base
# Import models to ensure they are registered with Base
from parcel_tracker.app.models.user import User
from parcel_tracker.app.models.carrier import Carrier
from parcel_tracker.app.models.parcel import Parcel
from parcel_tracker.app.models.status_history import StatusHistory
from parcel_tracker.app.models.notification import Notification
from parcel_tracker.app.models.audit_log import AuditLog
from parcel_tracker.app.models.enums import UserRole
from parcel_tracker.app.core.security import get_password_hash
from sqlalchemy import select

DEFAULT_CARRIERS = (
    ("EK", "EK Cargo"),
    ("SEA", "Sea Freight"),
)


async def seed_users():
    """
    Seed initial data.

    Creates:
    - 1 ADMIN user
    - 1 CUSTOMER user
    - the default carriers
    """
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with AsyncSessionLocal() as db:
        print("Starting seeding...")

        result = await db.execute(select(User).where(User.customer_code == "ADMIN"))
        if result.scalar_one_or_none():
            print("ADMIN user already exists, skipping users")
        else:
            db.add(User(
                customer_code="ADMIN",
                email="admin@parceltracker.local",
                first_name="System",
                last_name="Admin",
                hashed_password=get_password_hash("admin12345"),
                role=UserRole.ADMIN,
            ))
            print("Created ADMIN user (code: ADMIN, password: admin12345)")

            # Customers created without a password log in with their code
            db.add(User(
                customer_code="DEMO01",
                email="demo01@parceltracker.local",
                first_name="Demo",
                last_name="Customer",
                hashed_password=get_password_hash("DEMO01"),
                role=UserRole.CUSTOMER,
            ))
            print("Created CUSTOMER user (code: DEMO01, password: DEMO01)")

        for code, name in DEFAULT_CARRIERS:
            result = await db.execute(select(Carrier).where(Carrier.code == code))
            if not result.scalar_one_or_none():
                db.add(Carrier(code=code, name=name))
                print(f"Created carrier {code}")

        await db.commit()
        print("Seeding completed")


if __name__ == "__main__":
    asyncio.run(seed_users())
