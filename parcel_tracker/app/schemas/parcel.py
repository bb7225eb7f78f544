"""
Parcel Pydantic schemas.

Defines request and response models for parcel management and tracking.
"""

from pydantic import Field, field_validator
from datetime import datetime, date
from decimal import Decimal
from typing import Optional, List, Literal, Union
from uuid import UUID

from parcel_tracker.app.core.config import settings
from parcel_tracker.app.models.parcel_enums import ParcelStatus, PaymentStatus, to_core_status
from parcel_tracker.app.schemas.common import CamelModel, reject_null


StatusFilter = Union[ParcelStatus, Literal["all"]]
PaymentStatusFilter = Union[PaymentStatus, Literal["all"]]


class ParcelListQuery(CamelModel):
    """Filter set for the parcel list. Request-scoped, never stored."""
    page: int = Field(default=1, ge=1)
    page_size: int = Field(default=settings.default_page_size, ge=1, le=settings.max_page_size)
    status: Optional[StatusFilter] = None
    payment_status: Optional[PaymentStatusFilter] = None
    tracking_no: Optional[str] = None
    date_from: Optional[date] = None
    date_to: Optional[date] = None
    customer_code: Optional[str] = None


class ParcelCreate(CamelModel):
    """
    Schema for creating a new parcel.

    ``status`` accepts either a core status or a warehouse operational status
    (e.g. ``container_closed``), which is folded into the core value.
    ``cbm`` is computed from the dimensions when omitted.
    """
    parcel_ref: str = Field(..., min_length=1, max_length=255, description="Unique tracking reference")
    receive_date: datetime = Field(..., description="When the parcel reached the origin warehouse")
    customer_code: str = Field(..., min_length=1, max_length=50, description="Owning customer's code")
    description: str = Field(default="", max_length=255)
    pack: int = Field(default=1, ge=1, description="Number of packages")
    weight: Decimal = Field(..., gt=0, description="Weight in kilograms")
    length: int = Field(..., gt=0, description="Length in centimeters")
    width: int = Field(..., gt=0, description="Width in centimeters")
    height: int = Field(..., gt=0, description="Height in centimeters")
    cbm: Optional[Decimal] = Field(default=None, ge=0, description="Volume in cubic meters")
    tracking: Optional[str] = Field(default=None, max_length=50)
    th_tracking: Optional[str] = Field(default=None, max_length=255)
    container_code: Optional[str] = Field(default=None, max_length=50)
    estimated_date: Optional[datetime] = None
    delivery_method: Optional[str] = Field(default=None, max_length=255)
    estimate: Optional[Decimal] = Field(default=None, ge=0)
    freight: Optional[Decimal] = Field(default=None, ge=0)
    volume: Optional[Decimal] = Field(default=None, ge=0)
    status: ParcelStatus = ParcelStatus.PENDING
    payment_status: PaymentStatus = PaymentStatus.UNPAID
    carrier_code: Optional[str] = Field(default=None, max_length=50)

    @field_validator("status", mode="before")
    @classmethod
    def fold_operational_status(cls, value):
        if value is None:
            return ParcelStatus.PENDING
        return to_core_status(value)


class ParcelBatchCreate(CamelModel):
    """Schema for importing many parcels at once (all-or-nothing)."""
    parcels: List[ParcelCreate] = Field(..., min_length=1, max_length=1000)


class ParcelUpdate(CamelModel):
    """Schema for editing a parcel. Status changes go through the status endpoint."""
    receive_date: Optional[datetime] = None
    description: Optional[str] = Field(None, max_length=255)
    pack: Optional[int] = Field(None, ge=1)
    weight: Optional[Decimal] = Field(None, gt=0)
    length: Optional[int] = Field(None, gt=0)
    width: Optional[int] = Field(None, gt=0)
    height: Optional[int] = Field(None, gt=0)
    cbm: Optional[Decimal] = Field(None, ge=0)
    tracking: Optional[str] = Field(None, max_length=50)
    th_tracking: Optional[str] = Field(None, max_length=255)
    container_code: Optional[str] = Field(None, max_length=50)
    estimated_date: Optional[datetime] = None
    delivery_method: Optional[str] = Field(None, max_length=255)
    estimate: Optional[Decimal] = Field(None, ge=0)
    freight: Optional[Decimal] = Field(None, ge=0)
    volume: Optional[Decimal] = Field(None, ge=0)
    payment_status: Optional[PaymentStatus] = None
    carrier_code: Optional[str] = Field(None, max_length=50)

    @field_validator(
        "receive_date", "description", "pack", "weight", "length", "width", "height",
        "cbm", "payment_status",
    )
    @classmethod
    def required_columns_not_null(cls, value):
        return reject_null(value)


class ParcelStatusUpdate(CamelModel):
    """Body of PATCH /admin/parcels/{id}/status."""
    status: ParcelStatus
    notify: bool = False


class BulkStatusUpdate(CamelModel):
    parcel_ids: List[UUID] = Field(..., min_length=1, max_length=500)
    status: ParcelStatus
    notify: bool = False


class BulkStatusUpdateResult(CamelModel):
    status: ParcelStatus
    updated_ids: List[UUID]
    not_found_ids: List[UUID]


class ParcelResponse(CamelModel):
    """
    Externally visible parcel shape.

    Decimal columns are plain numbers and timestamps are ISO-8601 strings.
    Build instances with ``ParcelService.to_response``.
    """
    id: UUID
    parcel_ref: str
    receive_date: str
    description: str
    pack: int
    weight: float
    length: int
    width: int
    height: int
    cbm: float
    tracking: Optional[str] = None
    th_tracking: Optional[str] = None
    container_code: Optional[str] = None
    estimated_date: Optional[str] = None
    delivery_method: Optional[str] = None
    estimate: Optional[float] = None
    freight: Optional[float] = None
    volume: Optional[float] = None
    status: ParcelStatus
    payment_status: PaymentStatus
    customer_id: UUID
    customer_code: str
    carrier_id: Optional[UUID] = None
    carrier_code: Optional[str] = None
    created_at: str
    updated_at: str


class ParcelListResponse(CamelModel):
    """Schema for paginated parcel list."""
    parcels: List[ParcelResponse]
    total: int
    page: int
    page_size: int


class StatusHistoryResponse(CamelModel):
    id: UUID
    parcel_id: UUID
    from_status: ParcelStatus
    to_status: ParcelStatus
    updated_by: str
    updated_at: datetime


class ParcelStatsResponse(CamelModel):
    total: int
    pending: int = 0
    shipped: int = 0
    delivered: int = 0
    cancelled: int = 0
