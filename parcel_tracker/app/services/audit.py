"""
Audit logging service for login attempts and admin actions on customers.

Every record is committed on its own, so an audit entry survives even when
the request that wrote it goes on to fail.
"""

from typing import Optional, Dict, Any
from sqlalchemy.ext.asyncio import AsyncSession
from parcel_tracker.app.models.audit_log import AuditLog


class AuditAction:
    """Action names stored in ``audit_logs.action``."""
    LOGIN_SUCCESS = "LOGIN_SUCCESS"
    LOGIN_FAILED = "LOGIN_FAILED"
    LOGOUT = "LOGOUT"

    CUSTOMER_CREATED = "CUSTOMER_CREATED"
    CUSTOMER_UPDATED = "CUSTOMER_UPDATED"
    CUSTOMER_ACTIVATED = "CUSTOMER_ACTIVATED"
    CUSTOMER_DEACTIVATED = "CUSTOMER_DEACTIVATED"
    PASSWORD_RESET = "PASSWORD_RESET"


def _id_or_none(value: Any) -> Optional[str]:
    # User ids are UUIDs; the audit table keeps them as text
    return str(value) if value else None


async def log_event(
    db: AsyncSession,
    action: str,
    actor_id: Any = None,
    actor_username: Optional[str] = None,
    target_user_id: Any = None,
    target_username: Optional[str] = None,
    metadata: Optional[Dict[str, Any]] = None,
    ip_address: Optional[str] = None
) -> AuditLog:
    """
    Write one audit record and commit it.

    ``actor_*`` is who did it (None for an unknown login name),
    ``target_*`` the customer account it was done to.
    """
    entry = AuditLog(
        actor_id=_id_or_none(actor_id),
        actor_username=actor_username,
        action=action,
        target_user_id=_id_or_none(target_user_id),
        target_username=target_username,
        meta_data=metadata,
        ip_address=ip_address,
    )
    db.add(entry)
    await db.commit()
    return entry


async def log_admin_action(
    db: AsyncSession,
    admin: Dict[str, Any],
    action: str,
    target_user_id: Any,
    target_username: str,
    metadata: Optional[Dict[str, Any]] = None
) -> AuditLog:
    """Log an admin action on a customer account; ``admin`` is the token payload."""
    return await log_event(
        db,
        action,
        actor_id=admin.get("user_id"),
        actor_username=admin.get("sub"),
        target_user_id=target_user_id,
        target_username=target_username,
        metadata=metadata,
    )


async def log_auth_event(
    db: AsyncSession,
    action: str,
    user_id: Any,
    username: Optional[str],
    ip_address: Optional[str] = None,
    metadata: Optional[Dict[str, Any]] = None
) -> AuditLog:
    """Log a login, failed login or logout."""
    return await log_event(
        db,
        action,
        actor_id=user_id,
        actor_username=username,
        metadata=metadata,
        ip_address=ip_address,
    )
