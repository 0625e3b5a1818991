"""Project manager model.

Provisioned out of band by an administrator; read-only during login.
"""

import uuid

from sqlalchemy import Boolean, String, Uuid, true
from sqlalchemy.orm import Mapped, mapped_column

from portal.models.base import Base, TimestampMixin


class ProjectManager(Base, TimestampMixin):
    """Project manager who can sign in to the PM portal.

    Attributes:
        id: UUID primary key.
        name: Display name.
        email: Unique login email.
        phone: Optional contact number.
        specialization: Optional area of expertise.
        is_available: Whether the PM is taking new projects.
    """

    __tablename__ = "project_managers"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(),
        primary_key=True,
        default=uuid.uuid4,
    )
    name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )
    email: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        nullable=False,
    )
    phone: Mapped[str | None] = mapped_column(
        String(50),
        nullable=True,
    )
    specialization: Mapped[str | None] = mapped_column(
        String(255),
        nullable=True,
    )
    is_available: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=True,
        server_default=true(),
    )
