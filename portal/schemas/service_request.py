"""Service request schemas for customer intake and admin management."""

import uuid
from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

ServiceRequestStatus = Literal["pending", "in_progress", "completed", "cancelled"]


class ServiceRequestResponse(BaseModel):
    """Full service request as stored.

    Attributes mirror the service_requests table.
    """

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    user_id: uuid.UUID | None
    title: str
    description: str
    status: str
    priority: str
    service_type: str | None
    color_theme: str | None
    budget_range: str | None
    timeline: str | None
    company_name: str | None
    contact_email: str | None
    contact_phone: str | None
    assigned_pm_id: uuid.UUID | None
    notes: str | None
    admin_response: str | None
    created_at: datetime
    updated_at: datetime


class ServiceRequestCreate(BaseModel):
    """Request body for POST /service-requests (customer intake)."""

    model_config = ConfigDict(extra="forbid")

    title: str = Field(min_length=1, max_length=255)
    description: str = Field(min_length=1, max_length=10000)
    priority: Literal["low", "medium", "high", "urgent"] = "medium"
    user_id: uuid.UUID | None = None
    service_type: str | None = Field(default=None, max_length=100)
    color_theme: str | None = Field(default=None, max_length=100)
    budget_range: str | None = Field(default=None, max_length=100)
    timeline: str | None = Field(default=None, max_length=100)
    company_name: str | None = Field(default=None, max_length=255)
    contact_email: EmailStr | None = None
    contact_phone: str | None = Field(default=None, max_length=50)


class AdminServiceRequestUpdate(BaseModel):
    """Request body for PATCH /admin/service-requests/{id}.

    Only fields present in the body are changed; ``assigned_pm_id: null``
    unassigns the request. ``status`` and ``priority`` may be omitted but
    not set to null.
    """

    model_config = ConfigDict(extra="forbid")

    status: ServiceRequestStatus | None = None
    priority: Literal["low", "medium", "high", "urgent"] | None = None
    assigned_pm_id: uuid.UUID | None = None
    admin_response: str | None = Field(default=None, max_length=10000)

    @field_validator("status", "priority")
    @classmethod
    def not_null(cls, v: str | None) -> str:
        """Reject an explicit null; these columns always hold a value."""
        if v is None:
            msg = "Field cannot be null"
            raise ValueError(msg)
        return v
