"""Admin API router.

Dashboard analytics and service request management.

All endpoints require the X-Admin-Key header (AdminAccess dependency).
"""

import uuid

from fastapi import APIRouter

from portal.api.deps import AdminAccess, DbSession
from portal.core.errors import NotFoundError
from portal.core.responses import DataResponse
from portal.repositories.project_manager_repository import (
    ProjectManagerRepository,
)
from portal.repositories.service_request_repository import (
    ServiceRequestRepository,
)
from portal.schemas.analytics import AnalyticsResponse
from portal.schemas.pm import PMProfile
from portal.schemas.service_request import (
    AdminServiceRequestUpdate,
    ServiceRequestResponse,
)
from portal.services.analytics import build_analytics

router = APIRouter()

# =============================================================================
# Analytics
# =============================================================================


@router.get("/analytics")
async def get_analytics(
    _admin: AdminAccess,
    db: DbSession,
) -> DataResponse[AnalyticsResponse]:
    """Chart series for the admin dashboard.

    Requests are fed oldest first so the trend view keeps the six most
    recent months.
    """
    requests = await ServiceRequestRepository.list_all(db, newest_first=False)
    project_managers = await ProjectManagerRepository.list_all(db)
    summary = build_analytics(requests, project_managers)
    return DataResponse(
        data=AnalyticsResponse.model_validate(summary, from_attributes=True)
    )


# =============================================================================
# Service Requests
# =============================================================================


@router.get("/service-requests")
async def list_service_requests(
    _admin: AdminAccess,
    db: DbSession,
) -> DataResponse[list[ServiceRequestResponse]]:
    """List every service request, newest first."""
    requests = await ServiceRequestRepository.list_all(db)
    return DataResponse(
        data=[ServiceRequestResponse.model_validate(r) for r in requests]
    )


@router.patch("/service-requests/{request_id}")
async def update_service_request(
    request_id: uuid.UUID,
    body: AdminServiceRequestUpdate,
    _admin: AdminAccess,
    db: DbSession,
) -> DataResponse[ServiceRequestResponse]:
    """Update status, priority, assignment, or the admin response.

    Only fields present in the body change. ``assigned_pm_id: null``
    unassigns the request.

    Raises:
        NotFoundError: Request missing, or assigned_pm_id names no PM.
    """
    changes = body.model_dump(exclude_unset=True)

    pm_id = changes.get("assigned_pm_id")
    if pm_id is not None:
        pm = await ProjectManagerRepository.get_by_id(db, pm_id)
        if pm is None:
            raise NotFoundError("Project manager", str(pm_id))

    request = await ServiceRequestRepository.update(db, request_id, **changes)
    if request is None:
        raise NotFoundError("Service request", str(request_id))
    return DataResponse(data=ServiceRequestResponse.model_validate(request))


# =============================================================================
# Project Managers
# =============================================================================


@router.get("/project-managers")
async def list_project_managers(
    _admin: AdminAccess,
    db: DbSession,
) -> DataResponse[list[PMProfile]]:
    """List every PM, ordered by name."""
    project_managers = await ProjectManagerRepository.list_all(db)
    return DataResponse(
        data=[PMProfile.model_validate(pm) for pm in project_managers]
    )
