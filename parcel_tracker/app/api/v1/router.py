"""
API v1 Router.

Aggregates all v1 API endpoints.
"""

from fastapi import APIRouter
from parcel_tracker.app.api.v1.endpoints import (
    auth, admin_parcels, admin_customers, admin_carriers,
    parcels, notifications,
)

router = APIRouter()

# Authentication
router.include_router(auth.router)

# Admin console
router.include_router(admin_parcels.router)
router.include_router(admin_customers.router)
router.include_router(admin_carriers.router)

# Customer dashboard
router.include_router(parcels.router)
router.include_router(notifications.router)
