"""
Admin Parcel Management API Endpoints.

Back-office listing, creation, editing and status changes for every parcel.
"""

from datetime import date
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Path, status
from sqlalchemy.ext.asyncio import AsyncSession

from parcel_tracker.app.core.config import settings
from parcel_tracker.app.core.exceptions import ResourceNotFoundError
from parcel_tracker.app.core.guards import require_admin
from parcel_tracker.app.core.responses import ApiResponse, ResponseKey, success_response
from parcel_tracker.app.db.session import get_db
from parcel_tracker.app.schemas.parcel import (
    ParcelCreate, ParcelBatchCreate, ParcelUpdate, ParcelStatusUpdate,
    BulkStatusUpdate, BulkStatusUpdateResult,
    ParcelListQuery, ParcelListResponse, ParcelResponse,
    ParcelStatsResponse, StatusHistoryResponse,
    StatusFilter, PaymentStatusFilter,
)
from parcel_tracker.app.services.parcel_service import ParcelService

router = APIRouter(prefix="/admin/parcels", tags=["Admin - Parcels"])


@router.get("", response_model=ApiResponse[ParcelListResponse])
async def list_parcels(
    page: int = Query(1, ge=1, description="Page number"),
    page_size: int = Query(
        settings.default_page_size, ge=1, le=settings.max_page_size,
        alias="pageSize", description="Items per page",
    ),
    status_filter: Optional[StatusFilter] = Query(None, alias="status", description="Status or 'all'"),
    payment_status: Optional[PaymentStatusFilter] = Query(None, alias="paymentStatus"),
    tracking_no: Optional[str] = Query(None, alias="trackingNo", description="Matches tracking, TH tracking or reference"),
    date_from: Optional[date] = Query(None, alias="dateFrom"),
    date_to: Optional[date] = Query(None, alias="dateTo"),
    customer_code: Optional[str] = Query(None, alias="customerCode"),
    admin: dict = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    """
    List parcels with filters (admin only).

    All filters are AND-combined; results are newest first.
    """
    query = ParcelListQuery(
        page=page,
        page_size=page_size,
        status=status_filter,
        payment_status=payment_status,
        tracking_no=tracking_no,
        date_from=date_from,
        date_to=date_to,
        customer_code=customer_code,
    )
    parcels, total = await ParcelService.find_many(db, query)

    return success_response(ParcelService.to_list_response(parcels, total, page, page_size))


@router.post("", response_model=ApiResponse[ParcelResponse], status_code=status.HTTP_201_CREATED)
async def create_parcel(
    parcel_data: ParcelCreate,
    admin: dict = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    """
    Create a parcel for a customer (admin only).

    Validates:
    - Customer code exists
    - Carrier code exists (if given)
    - Parcel reference is unique
    """
    parcel = await ParcelService.create(db, parcel_data)
    return success_response(ParcelService.to_response(parcel), ResponseKey.CREATED)


@router.post("/batch", response_model=ApiResponse[List[ParcelResponse]], status_code=status.HTTP_201_CREATED)
async def create_parcels_batch(
    batch: ParcelBatchCreate,
    admin: dict = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    """Import many parcels at once; nothing is saved if any row is rejected."""
    parcels = await ParcelService.create_many(db, batch.parcels)
    return success_response([ParcelService.to_response(p) for p in parcels], ResponseKey.CREATED)


@router.post("/bulk-update-status", response_model=ApiResponse[BulkStatusUpdateResult])
async def bulk_update_status(
    request: BulkStatusUpdate,
    admin: dict = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    """Apply one status to many parcels; unknown ids are reported, not fatal."""
    updated_ids, not_found_ids = [], []
    for parcel_id in dict.fromkeys(request.parcel_ids):
        parcel = await ParcelService.update_status(
            db, parcel_id, request.status, notify=request.notify, actor=admin["sub"]
        )
        (updated_ids if parcel else not_found_ids).append(parcel_id)

    return success_response(BulkStatusUpdateResult(
        status=request.status,
        updated_ids=updated_ids,
        not_found_ids=not_found_ids,
    ))


@router.get("/stats", response_model=ApiResponse[ParcelStatsResponse])
async def parcel_stats(
    admin: dict = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    """Parcel counts per status for the admin overview cards."""
    counts = await ParcelService.count_by_status(db)
    return success_response(ParcelStatsResponse(total=sum(counts.values()), **counts))


@router.get("/{parcel_id}", response_model=ApiResponse[ParcelResponse])
async def get_parcel(
    parcel_id: UUID = Path(..., description="Parcel ID"),
    admin: dict = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    parcel = await ParcelService.get_by_id(db, parcel_id)
    if not parcel:
        raise ResourceNotFoundError("Parcel", parcel_id)

    return success_response(ParcelService.to_response(parcel))


@router.patch("/{parcel_id}", response_model=ApiResponse[ParcelResponse])
async def update_parcel(
    parcel_id: UUID = Path(..., description="Parcel ID"),
    parcel_data: ParcelUpdate = ...,
    admin: dict = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    """Edit parcel details (admin only). Status is changed via the status endpoint."""
    parcel = await ParcelService.get_by_id(db, parcel_id)
    if not parcel:
        raise ResourceNotFoundError("Parcel", parcel_id)

    parcel = await ParcelService.update(db, parcel, parcel_data)
    return success_response(ParcelService.to_response(parcel))


@router.patch("/{parcel_id}/status", response_model=ApiResponse[ParcelResponse])
async def update_parcel_status(
    parcel_id: UUID = Path(..., description="Parcel ID"),
    status_data: ParcelStatusUpdate = ...,
    admin: dict = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    """
    Change a parcel's status (admin only).

    Any status may follow any other. With ``notify`` set, the customer
    receives an in-app notification; a failed notification does not fail
    the update.
    """
    parcel = await ParcelService.update_status(
        db, parcel_id, status_data.status, notify=status_data.notify, actor=admin["sub"]
    )
    if parcel is None:
        raise ResourceNotFoundError("Parcel", parcel_id)

    return success_response(ParcelService.to_response(parcel))


@router.get("/{parcel_id}/history", response_model=ApiResponse[List[StatusHistoryResponse]])
async def get_parcel_history(
    parcel_id: UUID = Path(..., description="Parcel ID"),
    admin: dict = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    """Status transitions of a parcel, newest first."""
    parcel = await ParcelService.get_by_id(db, parcel_id)
    if not parcel:
        raise ResourceNotFoundError("Parcel", parcel_id)

    history = await ParcelService.get_history(db, parcel_id)
    return success_response([StatusHistoryResponse.model_validate(h) for h in history])
