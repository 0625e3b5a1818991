"""PM dashboard project endpoints.

All endpoints require the PM session token and only touch requests
assigned to that PM.

Endpoints:
- GET /pm/projects: assigned requests, customer profiles, and counters
- PATCH /pm/projects/{project_id}/status: set status (any transition)
- POST /pm/projects/{project_id}/notes: append a timestamped note
"""

import uuid

from fastapi import APIRouter

from portal.api.deps import CurrentPM, DbSession
from portal.core.responses import DataResponse
from portal.models.profile import Profile
from portal.models.service_request import ServiceRequest
from portal.schemas.pm import (
    CustomerSummary,
    NoteCreateRequest,
    PMProjectResponse,
    PMProjectsResponse,
    ProjectStatsResponse,
    StatusUpdateRequest,
)
from portal.schemas.service_request import ServiceRequestResponse
from portal.services.pm_projects import (
    add_project_note,
    list_pm_projects,
    update_project_status,
)

router = APIRouter()


def _to_project_response(
    project: ServiceRequest, customer: Profile | None
) -> PMProjectResponse:
    """Join a request with its customer's profile for display."""
    base = ServiceRequestResponse.model_validate(project).model_dump()
    return PMProjectResponse(
        **base,
        customer=CustomerSummary.model_validate(customer) if customer else None,
    )


@router.get("")
async def list_projects(
    pm: CurrentPM,
    db: DbSession,
) -> DataResponse[PMProjectsResponse]:
    """List the PM's assigned requests, newest first.

    No pagination; the full set is returned on every call.
    """
    result = await list_pm_projects(db, pm.id)
    projects = [
        _to_project_response(
            project,
            result.customers.get(project.user_id) if project.user_id else None,
        )
        for project in result.projects
    ]
    return DataResponse(
        data=PMProjectsResponse(
            projects=projects,
            stats=ProjectStatsResponse.model_validate(result.stats),
        )
    )


@router.patch("/{project_id}/status")
async def set_project_status(
    project_id: uuid.UUID,
    body: StatusUpdateRequest,
    pm: CurrentPM,
    db: DbSession,
) -> DataResponse[ServiceRequestResponse]:
    """Set a project's status to any of the four values."""
    project = await update_project_status(
        db, pm_id=pm.id, project_id=project_id, status=body.status
    )
    return DataResponse(data=ServiceRequestResponse.model_validate(project))


@router.post("/{project_id}/notes")
async def create_project_note(
    project_id: uuid.UUID,
    body: NoteCreateRequest,
    pm: CurrentPM,
    db: DbSession,
) -> DataResponse[ServiceRequestResponse]:
    """Append a note to a project's history.

    Blank notes are rejected with 400.
    """
    project = await add_project_note(
        db, pm_id=pm.id, project_id=project_id, note=body.note
    )
    return DataResponse(data=ServiceRequestResponse.model_validate(project))
