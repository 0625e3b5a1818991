"""Admin dashboard analytics.

Pure, synchronous aggregation over already-loaded service requests and
project managers. No I/O; callers pass whatever lists they fetched and
get chart-ready series back.

Views:
1. Request trends: request count per "<Mon> <year>", last six buckets
2. Status distribution: count per humanized status label
3. PM workload: request count per PM name, idle PMs included at zero
4. Popular services: count per service type, top six

Every view keeps first-seen order for its buckets. Empty input yields
empty views.
"""

import re
import uuid
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from datetime import datetime
from typing import Protocol

_MONTH_ABBREVIATIONS: tuple[str, ...] = (
    "Jan",
    "Feb",
    "Mar",
    "Apr",
    "May",
    "Jun",
    "Jul",
    "Aug",
    "Sep",
    "Oct",
    "Nov",
    "Dec",
)

TREND_BUCKET_LIMIT = 6
POPULAR_SERVICES_LIMIT = 6
UNSPECIFIED_SERVICE = "Unspecified"

_WORD_START = re.compile(r"\b\w")

# =============================================================================
# Input protocols
# =============================================================================


class RequestLike(Protocol):
    """Fields of a service request the aggregator reads."""

    status: str
    service_type: str | None
    created_at: datetime | str
    assigned_pm_id: uuid.UUID | None


class ManagerLike(Protocol):
    """Fields of a project manager the aggregator reads."""

    id: uuid.UUID
    name: str


# =============================================================================
# Output models
# =============================================================================


@dataclass(frozen=True)
class TrendPoint:
    """Requests created in one calendar month.

    Attributes:
        month: Bucket label, e.g. "Mar 2026".
        count: Number of requests in the bucket.
    """

    month: str
    count: int


@dataclass(frozen=True)
class NamedCount:
    """A labelled count for pie and bar charts.

    Attributes:
        name: Bucket label.
        value: Number of requests in the bucket.
    """

    name: str
    value: int


@dataclass(frozen=True)
class WorkloadPoint:
    """Requests assigned to one PM.

    Attributes:
        name: PM display name.
        projects: Number of assigned requests.
    """

    name: str
    projects: int


@dataclass(frozen=True)
class AnalyticsSummary:
    """All four dashboard views."""

    request_trends: list[TrendPoint] = field(default_factory=list)
    status_distribution: list[NamedCount] = field(default_factory=list)
    pm_workload: list[WorkloadPoint] = field(default_factory=list)
    popular_services: list[NamedCount] = field(default_factory=list)


# =============================================================================
# Label helpers
# =============================================================================


def month_label(created_at: datetime | str) -> str:
    """Format a timestamp as "<Mon> <year>" (locale independent).

    Args:
        created_at: datetime or ISO 8601 string.

    Returns:
        Label such as "Jan 2026".
    """
    moment = (
        datetime.fromisoformat(created_at)
        if isinstance(created_at, str)
        else created_at
    )
    return f"{_MONTH_ABBREVIATIONS[moment.month - 1]} {moment.year}"


def humanize_status(status: str) -> str:
    """Turn a status value into a display label.

    Underscores become spaces and the first letter of each word is
    upper-cased; other letters are left alone ("in_progress" →
    "In Progress").
    """
    return _WORD_START.sub(lambda m: m.group().upper(), status.replace("_", " "))


def _count_by(labels: Iterable[str]) -> dict[str, int]:
    """Count labels, preserving first-seen order."""
    counts: dict[str, int] = {}
    for label in labels:
        counts[label] = counts.get(label, 0) + 1
    return counts


# =============================================================================
# Views
# =============================================================================


def request_trends(requests: Sequence[RequestLike]) -> list[TrendPoint]:
    """Count requests per month.

    Buckets keep the order in which they are first encountered, and only
    the last six encountered are kept. That matches the six most recent
    months only when the input is sorted oldest first.

    Args:
        requests: Service requests in caller-defined order.

    Returns:
        Up to six TrendPoints.
    """
    counts = _count_by(month_label(r.created_at) for r in requests)
    buckets = list(counts.items())[-TREND_BUCKET_LIMIT:]
    return [TrendPoint(month=month, count=count) for month, count in buckets]


def status_distribution(requests: Sequence[RequestLike]) -> list[NamedCount]:
    """Count requests per humanized status label, first-seen order."""
    counts = _count_by(humanize_status(r.status) for r in requests)
    return [NamedCount(name=name, value=value) for name, value in counts.items()]


def pm_workload(
    requests: Sequence[RequestLike],
    project_managers: Sequence[ManagerLike],
) -> list[WorkloadPoint]:
    """Count assigned requests per PM name.

    Every known PM is seeded at zero so idle PMs still appear. Requests
    that are unassigned or assigned to an unknown PM are ignored. PMs
    sharing a display name share a bucket.

    Args:
        requests: Service requests.
        project_managers: Known PMs, in display order.

    Returns:
        One WorkloadPoint per distinct PM name.
    """
    workload: dict[str, int] = {pm.name: 0 for pm in project_managers}
    names_by_id = {pm.id: pm.name for pm in project_managers}

    for request in requests:
        if request.assigned_pm_id is None:
            continue
        name = names_by_id.get(request.assigned_pm_id)
        if name is not None:
            workload[name] += 1

    return [WorkloadPoint(name=name, projects=count) for name, count in workload.items()]


def popular_services(requests: Sequence[RequestLike]) -> list[NamedCount]:
    """Top six service types by request count.

    Missing or empty service types count as "Unspecified". Ties keep
    first-seen order.
    """
    counts = _count_by(r.service_type or UNSPECIFIED_SERVICE for r in requests)
    ranked = sorted(counts.items(), key=lambda item: item[1], reverse=True)
    return [
        NamedCount(name=name, value=value)
        for name, value in ranked[:POPULAR_SERVICES_LIMIT]
    ]


def build_analytics(
    requests: Sequence[RequestLike],
    project_managers: Sequence[ManagerLike],
) -> AnalyticsSummary:
    """Compute every dashboard view from one snapshot of the data."""
    return AnalyticsSummary(
        request_trends=request_trends(requests),
        status_distribution=status_distribution(requests),
        pm_workload=pm_workload(requests, project_managers),
        popular_services=popular_services(requests),
    )
