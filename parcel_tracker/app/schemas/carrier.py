"""
Carrier schemas.
"""

from pydantic import Field
from uuid import UUID
from parcel_tracker.app.schemas.common import CamelModel


class CarrierCreate(CamelModel):
    code: str = Field(..., min_length=1, max_length=50)
    name: str = Field(..., min_length=1, max_length=255)


class CarrierResponse(CamelModel):
    id: UUID
    code: str
    name: str
