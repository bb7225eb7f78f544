"""
Authentication API endpoints.

Provides login, logout and current-user info for the admin console and the
customer dashboard.
"""

from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from parcel_tracker.app.db.session import get_db
from parcel_tracker.app.schemas.auth import UserLogin, TokenResponse
from parcel_tracker.app.schemas.customer import CustomerResponse
from parcel_tracker.app.core.security import verify_password
from parcel_tracker.app.core.jwt import create_access_token
from parcel_tracker.app.core.dependencies import get_current_user
from parcel_tracker.app.core.responses import ApiResponse, success_response
from parcel_tracker.app.core.token_revocation import revoke_token
from parcel_tracker.app.services.audit import log_auth_event, AuditAction
from parcel_tracker.app.services.customer_service import CustomerService

router = APIRouter(prefix="/auth", tags=["Authentication"])


def _invalid_credentials() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Invalid credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )


@router.post("/login", response_model=ApiResponse[TokenResponse])
async def login(
    credentials: UserLogin,
    request: Request,
    db: AsyncSession = Depends(get_db)
):
    """
    Login user and return JWT token.

    Accepts customer code or email for login.
    Logs successful and failed login attempts for security monitoring.
    """
    ip_address = request.client.host if request.client else None
    user = await CustomerService.get_by_login(db, credentials.customer_code)

    if not user:
        await log_auth_event(
            db=db,
            action=AuditAction.LOGIN_FAILED,
            user_id=None,
            username=credentials.customer_code,
            ip_address=ip_address,
            metadata={"reason": "User not found"}
        )
        raise _invalid_credentials()

    if not verify_password(credentials.password, user.hashed_password):
        await log_auth_event(
            db=db,
            action=AuditAction.LOGIN_FAILED,
            user_id=user.id,
            username=user.customer_code,
            ip_address=ip_address,
            metadata={"reason": "Invalid password"}
        )
        raise _invalid_credentials()

    if not user.is_active:
        await log_auth_event(
            db=db,
            action=AuditAction.LOGIN_FAILED,
            user_id=user.id,
            username=user.customer_code,
            ip_address=ip_address,
            metadata={"reason": "Account is inactive"}
        )
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Inactive user account"
        )

    jwt_payload = {
        "sub": user.customer_code,
        "user_id": str(user.id),
        "role": user.role.value,
        "customer_code": user.customer_code,
    }
    access_token = create_access_token(data=jwt_payload)

    await log_auth_event(
        db=db,
        action=AuditAction.LOGIN_SUCCESS,
        user_id=user.id,
        username=user.customer_code,
        ip_address=ip_address,
    )

    return success_response(TokenResponse(
        access_token=access_token,
        token_type="bearer",
        user_id=user.id,
        customer_code=user.customer_code,
        email=user.email,
        first_name=user.first_name,
        last_name=user.last_name,
        role=user.role,
        address=user.address,
    ))


@router.get("/me", response_model=ApiResponse[CustomerResponse])
async def get_current_user_info(
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """
    Get current authenticated user information.

    Requires valid JWT token in Authorization header.
    """
    user = await CustomerService.get_by_id(db, UUID(current_user["user_id"]))
    if not user:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="User not found"
        )

    return success_response(CustomerResponse.model_validate(user))


@router.post("/logout", response_model=ApiResponse[None])
async def logout(
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Revoke the bearer token used for this request."""
    await revoke_token(current_user["token"], current_user["user_id"])

    await log_auth_event(
        db=db,
        action=AuditAction.LOGOUT,
        user_id=current_user["user_id"],
        username=current_user.get("sub"),
    )

    return success_response(message="Logged out successfully")
