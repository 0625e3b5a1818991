"""Public service catalog.

GET /services: active services, oldest first. No auth.
"""

from fastapi import APIRouter

from portal.api.deps import DbSession
from portal.core.responses import DataResponse
from portal.models.service import Service
from portal.repositories.service_repository import ServiceRepository
from portal.schemas.service import ServiceResponse

router = APIRouter()


def _to_response(service: Service) -> ServiceResponse:
    return ServiceResponse(
        id=service.id,
        title=service.title,
        description=service.description,
        icon=service.icon,
        features=list(service.features or []),
        price_range=service.price_range or "",
    )


@router.get("")
async def list_services(db: DbSession) -> DataResponse[list[ServiceResponse]]:
    """List catalog entries shown on the services page."""
    services = await ServiceRepository.list_active(db)
    return DataResponse(data=[_to_response(s) for s in services])
