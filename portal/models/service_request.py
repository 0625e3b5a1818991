"""Service request model - customer projects.

Created by customer intake, then worked by the assigned PM (status,
notes) and by admins (response, assignment, priority).
"""

import uuid

from sqlalchemy import CheckConstraint, ForeignKey, Index, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from portal.models.base import Base, TimestampMixin

SERVICE_REQUEST_STATUSES: tuple[str, ...] = (
    "pending",
    "in_progress",
    "completed",
    "cancelled",
)


class ServiceRequest(Base, TimestampMixin):
    """A customer's request for work.

    Any status may follow any other; there is no transition table.

    Attributes:
        id: UUID primary key.
        user_id: Customer account id (joins to profiles.user_id).
        title: Short project title.
        description: Customer's description of the work.
        status: pending, in_progress, completed, or cancelled.
        priority: Free-form priority label (defaults to "medium").
        service_type: Catalog service the request is for.
        color_theme: Customer's preferred color theme.
        budget_range: Customer's stated budget.
        timeline: Customer's stated timeline.
        company_name: Customer company.
        contact_email: Contact address.
        contact_phone: Contact number.
        assigned_pm_id: Project manager working the request.
        notes: PM notes, "[timestamp] text" entries separated by a blank line.
        admin_response: Admin's reply to the customer.
    """

    __tablename__ = "service_requests"
    __table_args__ = (
        CheckConstraint(
            "status IN ("
            + ", ".join(f"'{s}'" for s in SERVICE_REQUEST_STATUSES)
            + ")",
            name="ck_service_requests_status",
        ),
        Index("idx_service_requests_assigned_pm", "assigned_pm_id"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(),
        primary_key=True,
        default=uuid.uuid4,
    )
    user_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid(),
        nullable=True,
    )
    title: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )
    description: Mapped[str] = mapped_column(
        Text(),
        nullable=False,
    )
    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default="pending",
        server_default="pending",
    )
    priority: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default="medium",
        server_default="medium",
    )
    service_type: Mapped[str | None] = mapped_column(String(100), nullable=True)
    color_theme: Mapped[str | None] = mapped_column(String(100), nullable=True)
    budget_range: Mapped[str | None] = mapped_column(String(100), nullable=True)
    timeline: Mapped[str | None] = mapped_column(String(100), nullable=True)
    company_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    contact_email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    contact_phone: Mapped[str | None] = mapped_column(String(50), nullable=True)
    assigned_pm_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid(),
        ForeignKey("project_managers.id", ondelete="SET NULL"),
        nullable=True,
    )
    notes: Mapped[str | None] = mapped_column(Text(), nullable=True)
    admin_response: Mapped[str | None] = mapped_column(Text(), nullable=True)
