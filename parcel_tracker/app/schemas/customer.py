"""
Customer management schemas.

Pydantic schemas for the admin customer endpoints.
"""

from pydantic import EmailStr, Field, field_validator
from datetime import datetime
from typing import Optional, List, Literal
from uuid import UUID

from parcel_tracker.app.core.config import settings
from parcel_tracker.app.models.enums import UserRole, UserStatus
from parcel_tracker.app.schemas.common import CamelModel, reject_null


CustomerSortField = Literal["name", "email", "status", "createdAt", "customerCode"]
SortOrder = Literal["ASC", "DESC"]


class CustomerListQuery(CamelModel):
    """Filter, sort and page parameters for the customer list."""
    page: int = Field(default=1, ge=1)
    limit: int = Field(default=settings.default_page_size, ge=1, le=settings.max_page_size)
    sort_by: CustomerSortField = "createdAt"
    sort_order: SortOrder = "DESC"
    name: Optional[str] = None
    email: Optional[str] = None
    status: Optional[UserStatus] = None
    role: Optional[UserRole] = UserRole.CUSTOMER


class CustomerCreate(CamelModel):
    """
    Schema for creating a customer.

    When no password is given the customer code becomes the initial password.
    """
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(default="", max_length=100)
    email: EmailStr
    phone: str = Field(default="", max_length=20)
    customer_code: str = Field(..., min_length=4, max_length=10, description="Customer code (4-10 characters)")
    address: Optional[str] = None
    password: Optional[str] = Field(default=None, min_length=8)
    role: UserRole = UserRole.CUSTOMER
    status: UserStatus = UserStatus.ACTIVE


class CustomerUpdate(CamelModel):
    first_name: Optional[str] = Field(None, min_length=1, max_length=100)
    last_name: Optional[str] = Field(None, max_length=100)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, max_length=20)
    customer_code: Optional[str] = Field(None, min_length=4, max_length=10)
    address: Optional[str] = None
    role: Optional[UserRole] = None

    @field_validator("first_name", "last_name", "email", "phone", "customer_code", "role")
    @classmethod
    def required_columns_not_null(cls, value):
        return reject_null(value)


class CustomerStatusUpdate(CamelModel):
    status: UserStatus


class PasswordResetRequest(CamelModel):
    new_password: str = Field(..., min_length=8)


class CustomerResponse(CamelModel):
    id: UUID
    customer_code: str
    first_name: str
    last_name: str
    full_name: str
    email: str
    phone: str
    address: Optional[str] = None
    role: UserRole
    status: UserStatus
    created_at: datetime
    updated_at: datetime


class CustomerListResponse(CamelModel):
    customers: List[CustomerResponse]
    total: int
    page: int
    limit: int
