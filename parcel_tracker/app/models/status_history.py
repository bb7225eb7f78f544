"""
Status History database model.

One row per applied status transition, written in the same commit as the
status change itself.
"""

import uuid
from sqlalchemy import Column, String, DateTime, ForeignKey, Enum, Uuid
from sqlalchemy.sql import func
from parcel_tracker.app.db.session import Base
from parcel_tracker.app.models.enums import enum_values
from parcel_tracker.app.models.parcel_enums import ParcelStatus


class StatusHistory(Base):
    __tablename__ = "status_histories"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    parcel_id = Column(Uuid, ForeignKey("parcels.id"), nullable=False, index=True)

    from_status = Column(
        Enum(ParcelStatus, name="parcel_status", values_callable=enum_values), nullable=False
    )
    to_status = Column(
        Enum(ParcelStatus, name="parcel_status", values_callable=enum_values), nullable=False
    )

    updated_by = Column(String(100), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False, index=True)

    def __repr__(self):
        return (
            f"<StatusHistory(parcel={self.parcel_id}, "
            f"{self.from_status.value} -> {self.to_status.value}, by='{self.updated_by}')>"
        )
