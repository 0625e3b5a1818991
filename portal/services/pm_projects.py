"""PM dashboard project operations.

Lists a PM's assigned requests with their customers' profiles, changes
status, and appends timestamped notes.
"""

import uuid
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from portal.core.errors import NotFoundError, ValidationError
from portal.models.profile import Profile
from portal.models.service_request import ServiceRequest
from portal.repositories.profile_repository import ProfileRepository
from portal.repositories.service_request_repository import (
    ServiceRequestRepository,
)

logger = structlog.get_logger()

_PROJECT_RESOURCE = "Project"


@dataclass(frozen=True)
class ProjectStats:
    """Header counters on the PM dashboard.

    Attributes:
        total: All assigned requests.
        active: Requests in progress.
        pending: Requests not yet started.
        completed: Finished requests.
    """

    total: int
    active: int
    pending: int
    completed: int


@dataclass(frozen=True)
class PMProjects:
    """Assigned requests plus the customer profiles they reference.

    Attributes:
        projects: Assigned requests, newest first.
        customers: Profiles keyed by user_id for display joins.
        stats: Header counters.
    """

    projects: list[ServiceRequest]
    customers: dict[uuid.UUID, Profile]
    stats: ProjectStats


def project_stats(projects: Sequence[ServiceRequest]) -> ProjectStats:
    """Count assigned requests by headline status."""
    return ProjectStats(
        total=len(projects),
        active=sum(1 for p in projects if p.status == "in_progress"),
        pending=sum(1 for p in projects if p.status == "pending"),
        completed=sum(1 for p in projects if p.status == "completed"),
    )


def format_note_entry(text: str, now: datetime | None = None) -> str:
    """Format a note as "[M/D/YYYY, h:mm:ss AM] text".

    Args:
        text: Note body as submitted.
        now: Timestamp to stamp. Defaults to server local time.

    Returns:
        Formatted entry line.
    """
    moment = now or datetime.now()
    hour = moment.hour % 12 or 12
    meridiem = "AM" if moment.hour < 12 else "PM"
    stamp = (
        f"{moment.month}/{moment.day}/{moment.year}, "
        f"{hour}:{moment.minute:02d}:{moment.second:02d} {meridiem}"
    )
    return f"[{stamp}] {text}"


async def list_pm_projects(db: AsyncSession, pm_id: uuid.UUID) -> PMProjects:
    """Load a PM's assigned requests and the customers behind them.

    Profiles are fetched in one batch for the distinct customer ids.

    Args:
        db: Async database session.
        pm_id: Authenticated PM.

    Returns:
        PMProjects for the dashboard.
    """
    projects = await ServiceRequestRepository.list_for_pm(db, pm_id)
    user_ids = [p.user_id for p in projects if p.user_id is not None]
    customers = await ProfileRepository.get_by_user_ids(db, user_ids)
    return PMProjects(
        projects=projects,
        customers=customers,
        stats=project_stats(projects),
    )


async def update_project_status(
    db: AsyncSession,
    *,
    pm_id: uuid.UUID,
    project_id: uuid.UUID,
    status: str,
) -> ServiceRequest:
    """Set a project's status. Any transition is allowed.

    Raises:
        NotFoundError: Project missing or assigned to another PM.
    """
    project = await ServiceRequestRepository.update_status_for_pm(
        db, request_id=project_id, pm_id=pm_id, status=status
    )
    if project is None:
        raise NotFoundError(_PROJECT_RESOURCE, str(project_id))

    logger.info(
        "project_status_updated",
        pm_id=str(pm_id),
        project_id=str(project_id),
        status=status,
    )
    return project


async def add_project_note(
    db: AsyncSession,
    *,
    pm_id: uuid.UUID,
    project_id: uuid.UUID,
    note: str,
    now: datetime | None = None,
) -> ServiceRequest:
    """Append a timestamped note to a project's history.

    The note is stored as submitted; surrounding whitespace only matters
    for the blank check.

    Raises:
        ValidationError: Note is blank.
        NotFoundError: Project missing or assigned to another PM.
    """
    if not note.strip():
        raise ValidationError("Note must not be empty")

    project = await ServiceRequestRepository.append_note(
        db,
        request_id=project_id,
        pm_id=pm_id,
        entry=format_note_entry(note, now),
    )
    if project is None:
        raise NotFoundError(_PROJECT_RESOURCE, str(project_id))

    logger.info("project_note_added", pm_id=str(pm_id), project_id=str(project_id))
    return project
