"""
Parcel database model.

A parcel is a shipment received at the origin warehouse on behalf of a
customer and tracked until it reaches them.
"""

import uuid
from sqlalchemy import Column, Integer, String, Numeric, DateTime, ForeignKey, Enum, Uuid
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from parcel_tracker.app.db.session import Base
from parcel_tracker.app.models.enums import enum_values
from parcel_tracker.app.models.parcel_enums import ParcelStatus, PaymentStatus


class Parcel(Base):
    """
    Parcel model for the tracking platform.

    Decimal columns come back from the database as ``Decimal``; use
    ``ParcelService.to_response`` to obtain the JSON-safe shape.
    """
    __tablename__ = "parcels"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)

    # Identification
    parcel_ref = Column(String(255), unique=True, nullable=False, index=True)
    receive_date = Column(DateTime(timezone=True), nullable=False, index=True)
    description = Column(String(255), nullable=False, default="")

    # Physical properties
    pack = Column(Integer, nullable=False, default=1)
    weight = Column(Numeric(10, 3), nullable=False)
    length = Column(Integer, nullable=False)
    width = Column(Integer, nullable=False)
    height = Column(Integer, nullable=False)
    cbm = Column(Numeric(12, 4), nullable=False)

    # Logistics metadata
    tracking = Column(String(50), nullable=True, index=True)
    th_tracking = Column(String(255), nullable=True, index=True)
    container_code = Column(String(50), nullable=True)
    estimated_date = Column(DateTime(timezone=True), nullable=True)
    delivery_method = Column(String(255), nullable=True)

    # Pricing
    estimate = Column(Numeric(10, 2), nullable=True)
    freight = Column(Numeric(10, 2), nullable=True)
    volume = Column(Numeric(10, 3), nullable=True)

    # Status
    status = Column(
        Enum(ParcelStatus, name="parcel_status", values_callable=enum_values),
        default=ParcelStatus.PENDING,
        nullable=False,
        index=True,
    )
    payment_status = Column(
        Enum(PaymentStatus, name="payment_status", values_callable=enum_values),
        default=PaymentStatus.UNPAID,
        nullable=False,
        index=True,
    )

    # Ownership
    customer_id = Column(Uuid, ForeignKey("users.id"), nullable=False, index=True)
    carrier_id = Column(Uuid, ForeignKey("carriers.id"), nullable=True, index=True)

    # Timestamps
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False, index=True)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    customer = relationship("User", back_populates="parcels", lazy="joined")
    carrier = relationship("Carrier", back_populates="parcels", lazy="joined")

    def __repr__(self):
        return f"<Parcel(id={self.id}, ref='{self.parcel_ref}', status='{self.status.value}')>"
