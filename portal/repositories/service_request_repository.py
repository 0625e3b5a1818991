"""Repository for ServiceRequest operations.

Covers customer intake, the PM dashboard (assigned list, status change,
note append), and admin management.
"""

import uuid

from sqlalchemy import case, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from portal.models.base import utcnow
from portal.models.service_request import ServiceRequest

# Fields that may be updated via ServiceRequestRepository.update().
# Security: Never add 'id', 'user_id', 'notes', 'created_at', or 'updated_at'.
# - notes: PM-owned history, written only through append_note()
_UPDATABLE_FIELDS: frozenset[str] = frozenset(
    {
        "status",
        "priority",
        "assigned_pm_id",
        "admin_response",
    }
)

NOTE_SEPARATOR = "\n\n"


class ServiceRequestRepository:
    """Stateless repository for ServiceRequest table operations.

    All methods are static with no instance state. Pass an AsyncSession
    for every call so the caller controls transaction boundaries.
    """

    @staticmethod
    async def create(
        db: AsyncSession,
        *,
        title: str,
        description: str,
        priority: str = "medium",
        user_id: uuid.UUID | None = None,
        service_type: str | None = None,
        color_theme: str | None = None,
        budget_range: str | None = None,
        timeline: str | None = None,
        company_name: str | None = None,
        contact_email: str | None = None,
        contact_phone: str | None = None,
    ) -> ServiceRequest:
        """Create a pending service request.

        Args:
            db: Async database session.
            title: Project title.
            description: Customer's description.
            priority: Priority label.
            user_id: Customer account id, if signed in.
            service_type: Catalog service name.
            color_theme: Preferred color theme.
            budget_range: Stated budget.
            timeline: Stated timeline.
            company_name: Customer company.
            contact_email: Contact address.
            contact_phone: Contact number.

        Returns:
            Created ServiceRequest with database-generated fields populated.
        """
        request = ServiceRequest(
            title=title,
            description=description,
            status="pending",
            priority=priority,
            user_id=user_id,
            service_type=service_type,
            color_theme=color_theme,
            budget_range=budget_range,
            timeline=timeline,
            company_name=company_name,
            contact_email=contact_email,
            contact_phone=contact_phone,
        )
        db.add(request)
        await db.flush()
        await db.refresh(request)
        return request

    @staticmethod
    async def get_by_id(
        db: AsyncSession, request_id: uuid.UUID
    ) -> ServiceRequest | None:
        """Fetch a request by primary key, bypassing the identity map cache."""
        return await db.get(ServiceRequest, request_id, populate_existing=True)

    @staticmethod
    async def list_for_pm(
        db: AsyncSession, pm_id: uuid.UUID
    ) -> list[ServiceRequest]:
        """List every request assigned to a PM, newest first.

        No pagination; the full set is returned.

        Args:
            db: Async database session.
            pm_id: Assigned project manager.

        Returns:
            Assigned requests ordered by created_at descending.
        """
        stmt = (
            select(ServiceRequest)
            .where(ServiceRequest.assigned_pm_id == pm_id)
            .order_by(ServiceRequest.created_at.desc())
        )
        result = await db.execute(stmt)
        return list(result.scalars().all())

    @staticmethod
    async def list_all(
        db: AsyncSession, *, newest_first: bool = True
    ) -> list[ServiceRequest]:
        """List every request.

        Args:
            db: Async database session.
            newest_first: Order by created_at descending when True,
                ascending when False.

        Returns:
            All requests in the requested order.
        """
        order = (
            ServiceRequest.created_at.desc()
            if newest_first
            else ServiceRequest.created_at.asc()
        )
        result = await db.execute(select(ServiceRequest).order_by(order))
        return list(result.scalars().all())

    @staticmethod
    async def update_status_for_pm(
        db: AsyncSession,
        *,
        request_id: uuid.UUID,
        pm_id: uuid.UUID,
        status: str,
    ) -> ServiceRequest | None:
        """Set the status of a request assigned to a PM.

        Any status may follow any other.

        Args:
            db: Async database session.
            request_id: Request to update.
            pm_id: Caller; must be the assigned PM.
            status: New status value.

        Returns:
            Updated ServiceRequest, or None if it does not exist or is not
            assigned to this PM.
        """
        stmt = (
            update(ServiceRequest)
            .where(
                ServiceRequest.id == request_id,
                ServiceRequest.assigned_pm_id == pm_id,
            )
            .values(status=status, updated_at=utcnow())
            .execution_options(synchronize_session=False)
        )
        result = await db.execute(stmt)
        if result.rowcount == 0:  # type: ignore[attr-defined]
            return None
        return await ServiceRequestRepository.get_by_id(db, request_id)

    @staticmethod
    async def append_note(
        db: AsyncSession,
        *,
        request_id: uuid.UUID,
        pm_id: uuid.UUID,
        entry: str,
    ) -> ServiceRequest | None:
        """Append a formatted entry to a request's notes in one statement.

        The concatenation runs inside the UPDATE, so two concurrent
        appends both land instead of the later one overwriting the
        earlier one.

        Args:
            db: Async database session.
            request_id: Request to annotate.
            pm_id: Caller; must be the assigned PM.
            entry: Already formatted "[timestamp] text" line.

        Returns:
            Updated ServiceRequest, or None if it does not exist or is not
            assigned to this PM.
        """
        notes = ServiceRequest.notes
        stmt = (
            update(ServiceRequest)
            .where(
                ServiceRequest.id == request_id,
                ServiceRequest.assigned_pm_id == pm_id,
            )
            .values(
                notes=case(
                    (or_(notes.is_(None), notes == ""), entry),
                    else_=notes + NOTE_SEPARATOR + entry,
                ),
                updated_at=utcnow(),
            )
            .execution_options(synchronize_session=False)
        )
        result = await db.execute(stmt)
        if result.rowcount == 0:  # type: ignore[attr-defined]
            return None
        return await ServiceRequestRepository.get_by_id(db, request_id)

    @staticmethod
    async def update(
        db: AsyncSession,
        request_id: uuid.UUID,
        **kwargs: object,
    ) -> ServiceRequest | None:
        """Update admin-managed fields on a request.

        Only fields in _UPDATABLE_FIELDS are accepted.

        Args:
            db: Async database session.
            request_id: Request to update.
            **kwargs: Field names and new values.

        Returns:
            Updated ServiceRequest, or None if not found.

        Raises:
            ValueError: If a field outside _UPDATABLE_FIELDS is passed.
        """
        invalid = set(kwargs) - _UPDATABLE_FIELDS
        if invalid:
            msg = f"Cannot update fields: {', '.join(sorted(invalid))}"
            raise ValueError(msg)

        request = await db.get(ServiceRequest, request_id)
        if request is None:
            return None

        for field, value in kwargs.items():
            setattr(request, field, value)
        await db.flush()
        await db.refresh(request)
        return request
