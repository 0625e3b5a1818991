"""Response envelope models.

Consistent response format for all API endpoints.

WHY RESPONSE ENVELOPES:
- Consistent structure across all endpoints
- Easy to distinguish success from error responses
- Type-safe response building in endpoints
"""

from typing import Generic, TypeVar

from pydantic import BaseModel

T = TypeVar("T")


class DataResponse(BaseModel, Generic[T]):
    """Standard response envelope for single resources and small lists.

    All success responses use the {"data": ...} envelope, except the
    PM login functions, which keep their own wire shape.

    Usage:
        @router.get("/services")
        async def list_services(db: DbSession) -> DataResponse[list[ServiceResponse]]:
            services = await ServiceRepository.list_active(db)
            return DataResponse(data=[...])
    """

    data: T


class ErrorDetail(BaseModel):
    """Error detail for response body.

    Attributes:
        code: Machine-readable error code (e.g., "NOT_FOUND").
        message: Human-readable error message.
        details: Optional list of field-level errors (for validation).
    """

    code: str
    message: str
    details: list[dict] | None = None


class ErrorResponse(BaseModel):
    """Standard error response envelope.

    All errors use the {"error": {...}} envelope.

    Usage in exception handlers:
        return JSONResponse(
            status_code=exc.status_code,
            content=ErrorResponse(
                error=ErrorDetail(code=exc.code, message=exc.message)
            ).model_dump(),
        )
    """

    error: ErrorDetail


class FunctionErrorResponse(BaseModel):
    """Flat error body used by the PM login functions.

    Browsers that call these endpoints read ``error`` as a plain string
    and show it in a toast.

    Attributes:
        error: Human-readable error message.
    """

    error: str
