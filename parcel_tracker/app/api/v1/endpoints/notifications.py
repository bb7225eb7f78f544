"""
Notification API Endpoints.

In-app notifications shown on the customer dashboard.
"""

from uuid import UUID
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Path, Query
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, desc

from parcel_tracker.app.db.session import get_db
from parcel_tracker.app.models.notification import Notification
from parcel_tracker.app.core.dependencies import get_current_user
from parcel_tracker.app.core.responses import ApiResponse, success_response
from parcel_tracker.app.services.notification_service import NotificationService
from parcel_tracker.app.schemas.notification import NotificationResponse, MarkReadResponse

router = APIRouter(prefix="/notifications", tags=["Notifications"])


@router.get("", response_model=ApiResponse[List[NotificationResponse]])
async def list_notifications(
    unread_only: bool = Query(False, alias="unreadOnly"),
    limit: int = Query(50, ge=1, le=200),
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """List current user's notifications, newest first."""
    query = select(Notification).where(Notification.user_id == UUID(current_user["user_id"]))

    if unread_only:
        query = query.where(Notification.is_read == False)

    query = query.order_by(desc(Notification.created_at), desc(Notification.id)).limit(limit)

    result = await db.execute(query)
    return success_response([NotificationResponse.model_validate(n) for n in result.scalars().all()])


@router.patch("/read-all", response_model=ApiResponse[MarkReadResponse])
async def mark_all_notifications_read(
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Mark all notifications as read."""
    count = await NotificationService.mark_all_read(db, UUID(current_user["user_id"]))
    await db.commit()
    return success_response(MarkReadResponse(count=count))


@router.patch("/{notification_id}/read", response_model=ApiResponse[MarkReadResponse])
async def mark_notification_read(
    notification_id: int = Path(...),
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Mark a specific notification as read."""
    success = await NotificationService.mark_read(db, notification_id, UUID(current_user["user_id"]))
    if not success:
        raise HTTPException(status_code=404, detail="Notification not found")

    await db.commit()
    return success_response(MarkReadResponse(count=1))
