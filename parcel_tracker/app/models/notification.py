"""
Notification Database Model.
"""

import enum
from sqlalchemy import Column, Integer, String, Text, Boolean, DateTime, ForeignKey, JSON, Enum, Uuid
from sqlalchemy.sql import func
from parcel_tracker.app.db.session import Base
from parcel_tracker.app.models.enums import enum_values


class NotificationType(str, enum.Enum):
    INFO = "info"
    PARCEL_UPDATE = "parcel_update"


class Notification(Base):
    """
    In-App Notification.
    Stores messages shown on the customer dashboard.
    """
    __tablename__ = "notifications"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)

    # Recipient
    user_id = Column(Uuid, ForeignKey("users.id"), nullable=False, index=True)

    # Content
    type = Column(
        Enum(NotificationType, name="notification_type", values_callable=enum_values),
        default=NotificationType.INFO,
        nullable=False,
    )
    title = Column(String(255), nullable=False)
    message = Column(Text, nullable=False)
    metadata_payload = Column(JSON, nullable=True)

    # State
    is_read = Column(Boolean, default=False, nullable=False, index=True)
    read_at = Column(DateTime(timezone=True), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    def __repr__(self):
        return f"<Notification(id={self.id}, user={self.user_id}, title='{self.title}')>"
