"""
Centralized Test Configuration.
"""

import os

# Cheap hashes for tests; must be set before settings are imported
os.environ.setdefault("BCRYPT_ROUNDS", "4")

import itertools
from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest
from httpx import AsyncClient, ASGITransport
from sqlalchemy import event
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from sqlalchemy.pool import Pool, StaticPool

from parcel_tracker.app.main import app
from parcel_tracker.app.db.session import get_db, Base
from parcel_tracker.app.core.jwt import create_access_token
from parcel_tracker.app.core.redis_client import get_redis
from parcel_tracker.app.core.security import get_password_hash
from parcel_tracker.app.models.enums import UserRole, UserStatus
from parcel_tracker.app.models.parcel import Parcel
from parcel_tracker.app.models.parcel_enums import ParcelStatus, PaymentStatus
from parcel_tracker.app.models.user import User
import parcel_tracker.app.core.redis_client as redis_client_module

# Setup In-Memory Test Database
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

BASE_TIME = datetime(2024, 3, 1, 9, 0, tzinfo=timezone.utc)


@event.listens_for(Pool, "connect")
def set_sqlite_pragma(dbapi_conn, connection_record):
    """Enable foreign key constraints for SQLite."""
    if 'sqlite' in str(type(dbapi_conn)):
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


engine = create_async_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

TestingSessionLocal = async_sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False
)


# Mock Redis for reliability in CI/CD
class MockRedis:
    def __init__(self):
        self.store = {}
        self._closed = False

    async def ping(self):
        if self._closed:
            return False
        return True

    async def get(self, key):
        if self._closed:
            return None
        return self.store.get(key)

    async def set(self, key, value, ex=None):
        if self._closed:
            return False
        self.store[key] = value
        return True

    async def setex(self, key, seconds, value):
        return await self.set(key, value, ex=seconds)

    async def delete(self, key):
        if self._closed:
            return 0
        if key in self.store:
            del self.store[key]
            return 1
        return 0

    async def exists(self, key):
        if self._closed:
            return 0
        return 1 if key in self.store else 0

    async def flushdb(self):
        if not self._closed:
            self.store = {}

    async def aclose(self):
        self._closed = True
        self.store = {}


@pytest.fixture(scope="session")
def redis_client_session():
    return MockRedis()


@pytest.fixture(scope="session", autouse=True)
def apply_overrides(redis_client_session):
    """Apply overrides once for the session."""
    original_client = redis_client_module.redis_client
    redis_client_module.redis_client = redis_client_session

    async def override_get_db():
        async with TestingSessionLocal() as session:
            yield session

    async def override_get_redis():
        return redis_client_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_redis] = override_get_redis
    yield

    app.dependency_overrides = {}
    redis_client_module.redis_client = original_client


@pytest.fixture(autouse=True)
async def setup_database(redis_client_session):
    """Create tables before each test function and drop after."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    await redis_client_session.flushdb()

    yield

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest.fixture
async def client():
    """Async client for testing."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


@pytest.fixture
async def db_session():
    async with TestingSessionLocal() as session:
        yield session


@pytest.fixture
def session_factory():
    """Fresh sessions for asserting on what the API persisted."""
    return TestingSessionLocal


# --- Data factories ---

def auth_headers(user: User) -> dict:
    token = create_access_token(data={
        "sub": user.customer_code,
        "user_id": str(user.id),
        "role": user.role.value,
        "customer_code": user.customer_code,
    })
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def make_user(db_session):
    async def _make_user(
        customer_code: str,
        role: UserRole = UserRole.CUSTOMER,
        password: str = "password123",
        **fields,
    ) -> User:
        user = User(
            customer_code=customer_code,
            email=fields.pop("email", f"{customer_code.lower()}@example.com"),
            first_name=fields.pop("first_name", customer_code.title()),
            last_name=fields.pop("last_name", "Tester"),
            hashed_password=get_password_hash(password),
            role=role,
            status=fields.pop("status", UserStatus.ACTIVE),
            **fields,
        )
        db_session.add(user)
        await db_session.commit()
        await db_session.refresh(user)
        return user

    return _make_user


@pytest.fixture
async def admin_user(make_user):
    return await make_user("ADMIN01", role=UserRole.ADMIN)


@pytest.fixture
async def customer(make_user):
    return await make_user("CUST01")


@pytest.fixture
def admin_headers(admin_user):
    return auth_headers(admin_user)


@pytest.fixture
def customer_headers(customer):
    return auth_headers(customer)


@pytest.fixture
def make_parcel(db_session):
    """
    Insert a parcel directly.

    Each call is stamped one minute after the previous one, so creation
    order is also ``created_at`` order.
    """
    counter = itertools.count()

    async def _make_parcel(owner: User, **fields) -> Parcel:
        n = next(counter)
        stamp = BASE_TIME + timedelta(minutes=n)
        parcel = Parcel(
            parcel_ref=fields.pop("parcel_ref", f"REF-{n:04d}"),
            receive_date=fields.pop("receive_date", stamp),
            description=fields.pop("description", "Sample goods"),
            pack=fields.pop("pack", 1),
            weight=fields.pop("weight", Decimal("12.500")),
            length=fields.pop("length", 50),
            width=fields.pop("width", 40),
            height=fields.pop("height", 30),
            cbm=fields.pop("cbm", Decimal("0.0600")),
            status=fields.pop("status", ParcelStatus.PENDING),
            payment_status=fields.pop("payment_status", PaymentStatus.UNPAID),
            customer_id=owner.id,
            created_at=fields.pop("created_at", stamp),
            updated_at=fields.pop("updated_at", stamp),
            **fields,
        )
        db_session.add(parcel)
        await db_session.commit()
        await db_session.refresh(parcel)
        return parcel

    return _make_parcel


@pytest.fixture
def headers_for():
    """Bearer headers for any user created in a test."""
    return auth_headers
