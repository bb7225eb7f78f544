"""
User database model.

Customers and admins share one table; ``role`` tells them apart.
"""

import uuid
from sqlalchemy import Column, String, Text, DateTime, Enum, Uuid
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from parcel_tracker.app.db.session import Base
from parcel_tracker.app.models.enums import UserRole, UserStatus, enum_values


class User(Base):
    """
    User model for authentication and customer management.

    A customer is identified by a unique customer code (4-10 characters)
    and a unique email, and owns zero or more parcels.
    """
    __tablename__ = "users"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    customer_code = Column(String(50), unique=True, index=True, nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)

    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False, default="")
    phone = Column(String(20), nullable=False, default="")
    address = Column(Text, nullable=True)

    hashed_password = Column(String(255), nullable=False)

    role = Column(
        Enum(UserRole, name="user_role", values_callable=enum_values),
        default=UserRole.CUSTOMER,
        nullable=False,
    )
    status = Column(
        Enum(UserStatus, name="user_status", values_callable=enum_values),
        default=UserStatus.ACTIVE,
        nullable=False,
        index=True,
    )

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    parcels = relationship("Parcel", back_populates="customer")

    @property
    def is_active(self) -> bool:
        return self.status == UserStatus.ACTIVE

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    def __repr__(self):
        return f"<User(id={self.id}, code='{self.customer_code}', email='{self.email}', role='{self.role.value}')>"
