"""
Authentication dependencies for FastAPI.

This module provides dependencies for protecting routes with JWT authentication.
"""

from uuid import UUID
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from parcel_tracker.app.core.jwt import decode_access_token
from parcel_tracker.app.core.token_revocation import is_token_revoked, are_user_tokens_revoked
from parcel_tracker.app.db.session import get_db
from parcel_tracker.app.models.user import User

# HTTP Bearer security scheme
security = HTTPBearer()


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    db: AsyncSession = Depends(get_db)
) -> dict:
    """
    FastAPI dependency for JWT authentication.

    Checks, in order:
    1. JWT signature and expiry
    2. The token itself has not been revoked (logout)
    3. The user's tokens have not all been revoked (deactivation)
    4. The user still exists and is active

    Returns:
        Decoded token payload, with role and customer code refreshed from the database

    Raises:
        HTTPException: 401 if authentication fails, 403 if the account is inactive
    """
    token = credentials.credentials

    payload = decode_access_token(token)
    if payload is None:
        raise _unauthorized("Could not validate credentials")

    try:
        user_id = UUID(str(payload.get("user_id")))
    except ValueError:
        raise _unauthorized("Invalid token payload")

    if await is_token_revoked(token):
        raise _unauthorized("Token has been revoked")

    if await are_user_tokens_revoked(str(user_id), payload.get("iat")):
        raise _unauthorized("User access has been revoked")

    result = await db.execute(select(User).where(User.id == user_id))
    user = result.scalar_one_or_none()

    if not user:
        raise _unauthorized("User not found")

    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="User account is inactive",
        )

    # Identity claims come from the stored user; a rename or demotion
    # takes effect on tokens issued before it
    return {
        **payload,
        "sub": user.customer_code,
        "role": user.role.value,
        "customer_code": user.customer_code,
        "token": token,
    }
