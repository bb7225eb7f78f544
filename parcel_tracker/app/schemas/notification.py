"""
Notification Schemas.
"""

from datetime import datetime
from typing import Optional, Dict, Any
from parcel_tracker.app.models.notification import NotificationType
from parcel_tracker.app.schemas.common import CamelModel


class NotificationResponse(CamelModel):
    id: int
    type: NotificationType
    title: str
    message: str
    metadata_payload: Optional[Dict[str, Any]] = None
    is_read: bool
    created_at: datetime
    read_at: Optional[datetime] = None


class MarkReadResponse(CamelModel):
    count: int
