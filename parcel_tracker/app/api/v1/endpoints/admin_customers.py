"""
Admin Customer Management API Endpoints.

Provides admin-only customer account management with audit logging.
"""

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from parcel_tracker.app.core.config import settings
from parcel_tracker.app.core.exceptions import ResourceNotFoundError
from parcel_tracker.app.core.guards import require_admin
from parcel_tracker.app.core.responses import ApiResponse, ResponseKey, success_response
from parcel_tracker.app.core.token_revocation import revoke_all_user_tokens
from parcel_tracker.app.db.session import get_db
from parcel_tracker.app.models.enums import UserRole, UserStatus
from parcel_tracker.app.schemas.customer import (
    CustomerCreate, CustomerUpdate, CustomerStatusUpdate, PasswordResetRequest,
    CustomerListQuery, CustomerListResponse, CustomerResponse,
    CustomerSortField, SortOrder,
)
from parcel_tracker.app.services.audit import log_admin_action, AuditAction
from parcel_tracker.app.services.customer_service import CustomerService

router = APIRouter(prefix="/admin/customers", tags=["Admin - Customers"])


async def _get_customer_or_404(db: AsyncSession, customer_id: UUID):
    customer = await CustomerService.get_by_id(db, customer_id)
    if not customer:
        raise ResourceNotFoundError("Customer", customer_id)
    return customer


@router.get("", response_model=ApiResponse[CustomerListResponse])
async def list_customers(
    page: int = Query(1, ge=1, description="Page number"),
    limit: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size, description="Items per page"),
    sort_by: CustomerSortField = Query("createdAt", alias="sortBy"),
    sort_order: SortOrder = Query("DESC", alias="sortOrder"),
    name: Optional[str] = Query(None, description="Substring of first or last name"),
    email: Optional[str] = Query(None, description="Exact email"),
    status_filter: Optional[UserStatus] = Query(None, alias="status"),
    role: Optional[UserRole] = Query(UserRole.CUSTOMER),
    admin: dict = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    """
    List customers (admin-only).

    Returns a sorted, filtered, paginated customer list.
    """
    query = CustomerListQuery(
        page=page,
        limit=limit,
        sort_by=sort_by,
        sort_order=sort_order,
        name=name,
        email=email,
        status=status_filter,
        role=role,
    )
    customers, total = await CustomerService.find_many(db, query)

    return success_response(CustomerListResponse(
        customers=[CustomerResponse.model_validate(c) for c in customers],
        total=total,
        page=page,
        limit=limit,
    ))


@router.post("", response_model=ApiResponse[CustomerResponse], status_code=status.HTTP_201_CREATED)
async def create_customer(
    customer_data: CustomerCreate,
    admin: dict = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    """
    Create a customer account (admin-only).

    Customer code and email must be unique. Without an explicit password
    the customer code is the initial password.
    """
    customer = await CustomerService.create(db, customer_data)

    await log_admin_action(
        db=db,
        admin=admin,
        action=AuditAction.CUSTOMER_CREATED,
        target_user_id=customer.id,
        target_username=customer.customer_code,
    )

    return success_response(CustomerResponse.model_validate(customer), ResponseKey.CREATED)


@router.get("/{customer_id}", response_model=ApiResponse[CustomerResponse])
async def get_customer(
    customer_id: UUID,
    admin: dict = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    customer = await _get_customer_or_404(db, customer_id)
    return success_response(CustomerResponse.model_validate(customer))


@router.patch("/{customer_id}", response_model=ApiResponse[CustomerResponse])
async def update_customer(
    customer_id: UUID,
    customer_data: CustomerUpdate,
    admin: dict = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    """Edit a customer's profile (admin-only)."""
    customer = await _get_customer_or_404(db, customer_id)
    customer = await CustomerService.update(db, customer, customer_data)

    await log_admin_action(
        db=db,
        admin=admin,
        action=AuditAction.CUSTOMER_UPDATED,
        target_user_id=customer.id,
        target_username=customer.customer_code,
        metadata={"fields": sorted(customer_data.model_dump(exclude_unset=True))},
    )

    return success_response(CustomerResponse.model_validate(customer))


@router.patch("/{customer_id}/status", response_model=ApiResponse[CustomerResponse])
async def change_customer_status(
    customer_id: UUID,
    request: CustomerStatusUpdate,
    admin: dict = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    """
    Activate or deactivate a customer (admin-only).

    Deactivation revokes every token the customer holds, ending all
    sessions immediately. Reactivation lets them log in again; tokens issued
    before the deactivation stay revoked.
    """
    customer = await _get_customer_or_404(db, customer_id)
    changed = await CustomerService.set_status(db, customer, request.status)

    if changed:
        if request.status == UserStatus.INACTIVE:
            await revoke_all_user_tokens(str(customer.id))
            action = AuditAction.CUSTOMER_DEACTIVATED
        else:
            action = AuditAction.CUSTOMER_ACTIVATED

        await log_admin_action(
            db=db,
            admin=admin,
            action=action,
            target_user_id=customer.id,
            target_username=customer.customer_code,
        )

    return success_response(CustomerResponse.model_validate(customer))


@router.post("/{customer_id}/reset-password", response_model=ApiResponse[None])
async def reset_customer_password(
    customer_id: UUID,
    request: PasswordResetRequest,
    admin: dict = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    """Set a new password for a customer (admin-only)."""
    customer = await _get_customer_or_404(db, customer_id)
    await CustomerService.reset_password(db, customer, request.new_password)

    await log_admin_action(
        db=db,
        admin=admin,
        action=AuditAction.PASSWORD_RESET,
        target_user_id=customer.id,
        target_username=customer.customer_code,
    )

    return success_response(message=f"Password for '{customer.customer_code}' has been reset")
