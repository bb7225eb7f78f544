"""
Audit Log Database Model.

Tracks login attempts and admin actions on customer accounts.
"""

from sqlalchemy import Column, Integer, String, DateTime, JSON
from sqlalchemy.sql import func
from parcel_tracker.app.db.session import Base


class AuditLog(Base):
    """
    Audit log model.

    Events logged:
    - LOGIN_SUCCESS / LOGIN_FAILED
    - CUSTOMER_CREATED / CUSTOMER_UPDATED
    - CUSTOMER_ACTIVATED / CUSTOMER_DEACTIVATED
    - PASSWORD_RESET
    """
    __tablename__ = "audit_logs"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)

    # Who performed the action (None for anonymous login attempts)
    actor_id = Column(String(36), index=True, nullable=True)
    actor_username = Column(String(100), nullable=True)

    action = Column(String(100), nullable=False, index=True)

    # Customer account acted upon
    target_user_id = Column(String(36), index=True, nullable=True)
    target_username = Column(String(100), nullable=True)

    meta_data = Column(JSON, nullable=True)
    ip_address = Column(String(50), nullable=True)

    timestamp = Column(DateTime(timezone=True), server_default=func.now(), nullable=False, index=True)

    def __repr__(self):
        return f"<AuditLog(id={self.id}, action='{self.action}', actor={self.actor_username}, target={self.target_username})>"
