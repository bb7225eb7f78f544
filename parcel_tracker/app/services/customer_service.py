"""
Customer Service.

Lookup, listing and account maintenance for customer users.
"""

from typing import List, Optional, Tuple
from uuid import UUID

from sqlalchemy import select, func, or_
from sqlalchemy.ext.asyncio import AsyncSession

from parcel_tracker.app.core.exceptions import ConflictError
from parcel_tracker.app.core.security import get_password_hash
from parcel_tracker.app.models.enums import UserStatus
from parcel_tracker.app.models.user import User
from parcel_tracker.app.schemas.customer import CustomerCreate, CustomerUpdate, CustomerListQuery


SORT_COLUMNS = {
    "name": (User.first_name, User.last_name),
    "email": (User.email,),
    "status": (User.status,),
    "createdAt": (User.created_at,),
    "customerCode": (User.customer_code,),
}


class CustomerService:

    @staticmethod
    async def get_by_id(db: AsyncSession, customer_id: UUID) -> Optional[User]:
        result = await db.execute(select(User).where(User.id == customer_id))
        return result.scalar_one_or_none()

    @staticmethod
    async def get_by_code(db: AsyncSession, customer_code: str) -> Optional[User]:
        result = await db.execute(select(User).where(User.customer_code == customer_code))
        return result.scalar_one_or_none()

    @staticmethod
    async def get_by_login(db: AsyncSession, identifier: str) -> Optional[User]:
        """Find a user by customer code or email."""
        result = await db.execute(
            select(User).where(or_(User.customer_code == identifier, User.email == identifier))
        )
        return result.scalars().first()

    @staticmethod
    async def find_many(db: AsyncSession, query: CustomerListQuery) -> Tuple[List[User], int]:
        conditions = []
        if query.role:
            conditions.append(User.role == query.role)
        if query.status:
            conditions.append(User.status == query.status)
        if query.email:
            conditions.append(User.email == query.email)
        if query.name:
            full_name = User.first_name + " " + User.last_name
            conditions.append(
                or_(
                    User.first_name.icontains(query.name, autoescape=True),
                    User.last_name.icontains(query.name, autoescape=True),
                    full_name.icontains(query.name, autoescape=True),
                )
            )

        total_result = await db.execute(select(func.count(User.id)).where(*conditions))
        total = total_result.scalar_one()

        columns = SORT_COLUMNS[query.sort_by]
        ordering = [c.desc() if query.sort_order == "DESC" else c.asc() for c in columns]

        offset = (query.page - 1) * query.limit
        result = await db.execute(
            select(User)
            .where(*conditions)
            .order_by(*ordering, User.id)
            .offset(offset)
            .limit(query.limit)
        )
        return list(result.scalars().all()), total

    @staticmethod
    async def _ensure_unique(
        db: AsyncSession,
        customer_code: Optional[str] = None,
        email: Optional[str] = None,
        exclude_id: Optional[UUID] = None,
    ) -> None:
        if customer_code:
            existing = await CustomerService.get_by_code(db, customer_code)
            if existing and existing.id != exclude_id:
                raise ConflictError(f"Customer code '{customer_code}' already exists", field="customerCode")
        if email:
            result = await db.execute(select(User).where(User.email == email))
            existing = result.scalar_one_or_none()
            if existing and existing.id != exclude_id:
                raise ConflictError(f"Email '{email}' is already registered", field="email")

    @staticmethod
    async def create(db: AsyncSession, data: CustomerCreate) -> User:
        await CustomerService._ensure_unique(db, data.customer_code, data.email)

        customer = User(
            customer_code=data.customer_code,
            email=data.email,
            first_name=data.first_name,
            last_name=data.last_name,
            phone=data.phone,
            address=data.address,
            hashed_password=get_password_hash(data.password or data.customer_code),
            role=data.role,
            status=data.status,
        )
        db.add(customer)
        await db.commit()
        await db.refresh(customer)
        return customer

    @staticmethod
    async def update(db: AsyncSession, customer: User, data: CustomerUpdate) -> User:
        update_data = data.model_dump(exclude_unset=True)
        await CustomerService._ensure_unique(
            db,
            update_data.get("customer_code"),
            update_data.get("email"),
            exclude_id=customer.id,
        )

        for field, value in update_data.items():
            setattr(customer, field, value)

        await db.commit()
        await db.refresh(customer)
        return customer

    @staticmethod
    async def set_status(db: AsyncSession, customer: User, new_status: UserStatus) -> bool:
        """Set the account status. Returns False when it already had that status."""
        if customer.status == new_status:
            return False
        customer.status = new_status
        await db.commit()
        await db.refresh(customer)
        return True

    @staticmethod
    async def reset_password(db: AsyncSession, customer: User, new_password: str) -> None:
        customer.hashed_password = get_password_hash(new_password)
        await db.commit()
