"""
Admin Carrier API Endpoints.
"""

from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from parcel_tracker.app.core.exceptions import ConflictError
from parcel_tracker.app.core.guards import require_admin
from parcel_tracker.app.core.responses import ApiResponse, ResponseKey, success_response
from parcel_tracker.app.db.session import get_db
from parcel_tracker.app.models.carrier import Carrier
from parcel_tracker.app.schemas.carrier import CarrierCreate, CarrierResponse

router = APIRouter(prefix="/admin/carriers", tags=["Admin - Carriers"])


@router.get("", response_model=ApiResponse[List[CarrierResponse]])
async def list_carriers(
    admin: dict = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    result = await db.execute(select(Carrier).order_by(Carrier.code))
    return success_response([CarrierResponse.model_validate(c) for c in result.scalars().all()])


@router.post("", response_model=ApiResponse[CarrierResponse], status_code=status.HTTP_201_CREATED)
async def create_carrier(
    carrier_data: CarrierCreate,
    admin: dict = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    """Register a shipping carrier; codes are unique."""
    existing = await db.execute(select(Carrier).where(Carrier.code == carrier_data.code))
    if existing.scalar_one_or_none():
        raise ConflictError(f"Carrier code '{carrier_data.code}' already exists", field="code")

    carrier = Carrier(code=carrier_data.code, name=carrier_data.name)
    db.add(carrier)
    await db.commit()
    await db.refresh(carrier)

    return success_response(CarrierResponse.model_validate(carrier), ResponseKey.CREATED)
