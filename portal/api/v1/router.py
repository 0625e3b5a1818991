"""API v1 router aggregator.

All v1 endpoint routers are included here, mounted at /api/v1.
"""

from fastapi import APIRouter

from portal.api.v1 import admin, pm_auth, pm_projects, service_requests, services

router = APIRouter()

# =============================================================================
# PM Portal
# =============================================================================

_PM_PREFIX = "/pm"

router.include_router(pm_auth.router, prefix=_PM_PREFIX, tags=["pm-auth"])
router.include_router(
    pm_projects.router, prefix=f"{_PM_PREFIX}/projects", tags=["pm-projects"]
)

# =============================================================================
# Public
# =============================================================================

router.include_router(services.router, prefix="/services", tags=["services"])
router.include_router(
    service_requests.router,
    prefix="/service-requests",
    tags=["service-requests"],
)

# =============================================================================
# Admin
# =============================================================================

router.include_router(admin.router, prefix="/admin", tags=["admin"])
