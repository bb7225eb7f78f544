"""
Carrier database model.
"""

import uuid
from sqlalchemy import Column, String, Uuid
from sqlalchemy.orm import relationship
from parcel_tracker.app.db.session import Base


class Carrier(Base):
    """Line-haul or last-mile carrier a parcel travels with (e.g. "EK", "SCGL")."""
    __tablename__ = "carriers"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    code = Column(String(50), unique=True, index=True, nullable=False)
    name = Column(String(255), nullable=False)

    parcels = relationship("Parcel", back_populates="carrier")

    def __repr__(self):
        return f"<Carrier(id={self.id}, code='{self.code}')>"
