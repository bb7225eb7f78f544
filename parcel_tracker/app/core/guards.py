"""
Security guards for role-based and ownership-based access control.
"""

from typing import List, Optional
from fastapi import Depends, HTTPException, status
from parcel_tracker.app.models.enums import UserRole
from parcel_tracker.app.core.dependencies import get_current_user


def require_role(allowed_roles: List[UserRole]):
    """
    Dependency factory for role-based access control.

    Usage:
        @router.get("/admin/customers")
        async def list_customers(current_user: dict = Depends(require_role([UserRole.ADMIN]))):
            ...

    Raises:
        HTTPException 403 if user role is not in allowed_roles
    """
    async def role_checker(current_user: dict = Depends(get_current_user)) -> dict:
        user_role_str = current_user.get("role")

        if not user_role_str:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Role information missing from token"
            )

        try:
            user_role = UserRole(user_role_str)
        except ValueError:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Invalid role in token"
            )

        if user_role not in allowed_roles:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Access denied. Required role: {', '.join([r.value for r in allowed_roles])}"
            )

        return current_user

    return role_checker


# Dependency for admin-only endpoints
require_admin = require_role([UserRole.ADMIN])


class OwnershipGuard:
    """
    Scopes dashboard access to the caller's own parcels.

    Admins see every customer's parcels; customers only their own.
    """

    def customer_scope(self, current_user: dict) -> Optional[str]:
        """
        Customer code to restrict queries to, or None for admins.

        Usage:
            scope = ownership_guard.customer_scope(current_user)
            if scope:
                query.customer_code = scope
        """
        if current_user.get("role") == UserRole.ADMIN.value:
            return None
        return current_user.get("customer_code")

    def enforce(self, owner_code: str, current_user: dict, resource_name: str = "resource"):
        """
        Raise 404 when the caller may not see a resource owned by ``owner_code``.

        Not-found rather than forbidden, so parcel ids of other customers are
        not confirmed to exist.
        """
        scope = self.customer_scope(current_user)
        if scope is not None and scope != owner_code:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"{resource_name.capitalize()} not found"
            )
