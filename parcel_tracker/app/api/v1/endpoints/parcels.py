"""
Customer Parcel Dashboard API Endpoints.

Customers see only their own parcels; admins calling these endpoints see
every parcel, exactly as in the admin list.
"""

from datetime import date
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Path
from sqlalchemy.ext.asyncio import AsyncSession

from parcel_tracker.app.core.config import settings
from parcel_tracker.app.core.dependencies import get_current_user
from parcel_tracker.app.core.exceptions import ResourceNotFoundError
from parcel_tracker.app.core.guards import OwnershipGuard
from parcel_tracker.app.core.responses import ApiResponse, success_response
from parcel_tracker.app.db.session import get_db
from parcel_tracker.app.schemas.parcel import (
    ParcelListQuery, ParcelListResponse, ParcelResponse,
    StatusFilter, PaymentStatusFilter,
)
from parcel_tracker.app.services.parcel_service import ParcelService

router = APIRouter(prefix="/parcels", tags=["Customer - Parcels"])
ownership_guard = OwnershipGuard()


@router.get("", response_model=ApiResponse[ParcelListResponse])
async def list_my_parcels(
    page: int = Query(1, ge=1, description="Page number"),
    page_size: int = Query(
        settings.default_page_size, ge=1, le=settings.max_page_size,
        alias="pageSize", description="Items per page",
    ),
    status_filter: Optional[StatusFilter] = Query(None, alias="status"),
    payment_status: Optional[PaymentStatusFilter] = Query(None, alias="paymentStatus"),
    tracking_no: Optional[str] = Query(None, alias="trackingNo"),
    date_from: Optional[date] = Query(None, alias="dateFrom"),
    date_to: Optional[date] = Query(None, alias="dateTo"),
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """List the caller's parcels with the same filters as the admin list."""
    query = ParcelListQuery(
        page=page,
        page_size=page_size,
        status=status_filter,
        payment_status=payment_status,
        tracking_no=tracking_no,
        date_from=date_from,
        date_to=date_to,
        customer_code=ownership_guard.customer_scope(current_user),
    )
    parcels, total = await ParcelService.find_many(db, query)

    return success_response(ParcelService.to_list_response(parcels, total, page, page_size))


@router.get("/{parcel_id}", response_model=ApiResponse[ParcelResponse])
async def get_my_parcel(
    parcel_id: UUID = Path(..., description="Parcel ID"),
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    parcel = await ParcelService.get_by_id(db, parcel_id)
    if not parcel:
        raise ResourceNotFoundError("Parcel", parcel_id)

    ownership_guard.enforce(parcel.customer.customer_code, current_user, "parcel")

    return success_response(ParcelService.to_response(parcel))
