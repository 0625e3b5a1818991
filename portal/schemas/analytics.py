"""Admin analytics response schemas (chart-ready series)."""

from pydantic import BaseModel, ConfigDict


class TrendPointResponse(BaseModel):
    """Requests per month."""

    model_config = ConfigDict(from_attributes=True)

    month: str
    count: int


class NamedCountResponse(BaseModel):
    """Labelled count for pie/bar charts."""

    model_config = ConfigDict(from_attributes=True)

    name: str
    value: int


class WorkloadPointResponse(BaseModel):
    """Assigned requests per PM."""

    model_config = ConfigDict(from_attributes=True)

    name: str
    projects: int


class AnalyticsResponse(BaseModel):
    """Response for GET /admin/analytics."""

    model_config = ConfigDict(from_attributes=True)

    request_trends: list[TrendPointResponse]
    status_distribution: list[NamedCountResponse]
    pm_workload: list[WorkloadPointResponse]
    popular_services: list[NamedCountResponse]
