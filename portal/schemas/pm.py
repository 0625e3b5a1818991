"""PM portal schemas: OTP login, session profile, and dashboard.

The login responses keep the camelCase wire names (``sessionToken``,
``pmName``) the PM portal frontend reads.
"""

import uuid

from pydantic import BaseModel, ConfigDict, Field

from portal.schemas.service_request import (
    ServiceRequestResponse,
    ServiceRequestStatus,
)

# =============================================================================
# Login
# =============================================================================


class PMProfile(BaseModel):
    """Public PM fields returned at login and by /pm/me.

    Attributes:
        id: PM UUID.
        name: Display name.
        email: Login email.
        phone: Contact number.
        specialization: Area of expertise.
        is_available: Whether the PM takes new projects.
    """

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    name: str
    email: str
    phone: str | None
    specialization: str | None
    is_available: bool


class SendOtpResponse(BaseModel):
    """Response for POST /pm/send-otp."""

    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    message: str = "OTP sent successfully"
    pm_name: str = Field(serialization_alias="pmName")


class VerifyOtpResponse(BaseModel):
    """Response for POST /pm/verify-otp."""

    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    message: str = "Login successful"
    pm: PMProfile
    session_token: str = Field(serialization_alias="sessionToken")


# =============================================================================
# Dashboard
# =============================================================================


class CustomerSummary(BaseModel):
    """Customer profile joined onto a project."""

    model_config = ConfigDict(from_attributes=True)

    user_id: uuid.UUID
    full_name: str | None
    email: str | None


class PMProjectResponse(ServiceRequestResponse):
    """Assigned project with its customer's profile (None if unknown)."""

    customer: CustomerSummary | None = None


class ProjectStatsResponse(BaseModel):
    """Dashboard header counters."""

    model_config = ConfigDict(from_attributes=True)

    total: int
    active: int
    pending: int
    completed: int


class PMProjectsResponse(BaseModel):
    """Response for GET /pm/projects."""

    projects: list[PMProjectResponse]
    stats: ProjectStatsResponse


class StatusUpdateRequest(BaseModel):
    """Request body for PATCH /pm/projects/{id}/status."""

    model_config = ConfigDict(extra="forbid")

    status: ServiceRequestStatus


class NoteCreateRequest(BaseModel):
    """Request body for POST /pm/projects/{id}/notes."""

    model_config = ConfigDict(extra="forbid")

    note: str = Field(max_length=5000)
