"""
Notification Service.

Handles creation and read-state of in-app notifications shown on the
customer dashboard.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import update
from datetime import datetime, timezone
from typing import Optional, Dict, Any
from uuid import UUID

from parcel_tracker.app.models.notification import Notification, NotificationType


class NotificationService:

    @staticmethod
    async def create_notification(
        db: AsyncSession,
        user_id: UUID,
        title: str,
        message: str,
        type: NotificationType = NotificationType.INFO,
        metadata: Optional[Dict[str, Any]] = None
    ) -> Notification:
        """Create a single notification."""
        notif = Notification(
            user_id=user_id,
            type=type,
            title=title,
            message=message,
            metadata_payload=metadata
        )
        db.add(notif)
        await db.flush()  # Caller commits
        return notif

    @staticmethod
    async def notify_status_change(db: AsyncSession, parcel, previous_status) -> Notification:
        """Tell the owning customer that a parcel moved to a new status."""
        return await NotificationService.create_notification(
            db,
            user_id=parcel.customer_id,
            title=f"Parcel {parcel.parcel_ref} is now {parcel.status.value}",
            message=(
                f"The status of parcel {parcel.parcel_ref} changed "
                f"from {previous_status.value} to {parcel.status.value}."
            ),
            type=NotificationType.PARCEL_UPDATE,
            metadata={
                "parcel_id": str(parcel.id),
                "parcel_ref": parcel.parcel_ref,
                "from_status": previous_status.value,
                "to_status": parcel.status.value,
            },
        )

    @staticmethod
    async def mark_read(db: AsyncSession, notification_id: int, user_id: UUID) -> bool:
        """Mark a notification as read."""
        stmt = update(Notification).where(
            Notification.id == notification_id,
            Notification.user_id == user_id
        ).values(
            is_read=True,
            read_at=datetime.now(timezone.utc)
        )
        result = await db.execute(stmt)
        return result.rowcount > 0

    @staticmethod
    async def mark_all_read(db: AsyncSession, user_id: UUID) -> int:
        """Mark all notifications for user as read."""
        stmt = update(Notification).where(
            Notification.user_id == user_id,
            Notification.is_read == False
        ).values(
            is_read=True,
            read_at=datetime.now(timezone.utc)
        )
        result = await db.execute(stmt)
        return result.rowcount
