"""
Authentication Pydantic schemas.

Defines request and response schemas for authentication endpoints.
"""

from pydantic import Field
from typing import Optional
from uuid import UUID

from parcel_tracker.app.models.enums import UserRole
from parcel_tracker.app.schemas.common import CamelModel


class UserLogin(CamelModel):
    """
    Schema for user login.

    Used by POST /auth/login endpoint.
    Accepts either the customer code or the email address.
    """
    customer_code: str = Field(..., min_length=1, description="Customer code or email")
    password: str = Field(..., min_length=1, description="Password")


class TokenResponse(CamelModel):
    """
    Schema for JWT token response.

    Returned by a successful login.
    """
    access_token: str = Field(..., description="JWT access token")
    token_type: str = Field(default="bearer", description="Token type")
    user_id: UUID
    customer_code: str
    email: str
    first_name: str
    last_name: str
    role: UserRole
    address: Optional[str] = None
