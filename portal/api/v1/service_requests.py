"""Customer service request intake.

POST /service-requests: submit a new request. It starts as pending and
unassigned until an admin assigns a PM.
"""

import structlog
from fastapi import APIRouter, status

from portal.api.deps import DbSession
from portal.core.responses import DataResponse
from portal.repositories.service_request_repository import (
    ServiceRequestRepository,
)
from portal.schemas.service_request import (
    ServiceRequestCreate,
    ServiceRequestResponse,
)

logger = structlog.get_logger()

router = APIRouter()


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_service_request(
    body: ServiceRequestCreate,
    db: DbSession,
) -> DataResponse[ServiceRequestResponse]:
    """Create a pending service request.

    Returns:
        201 with the stored request.
    """
    request = await ServiceRequestRepository.create(db, **body.model_dump())
    logger.info(
        "service_request_created",
        request_id=str(request.id),
        service_type=request.service_type,
    )
    return DataResponse(data=ServiceRequestResponse.model_validate(request))
