"""Service catalog model."""

import uuid

from sqlalchemy import JSON, Boolean, String, Text, Uuid, true
from sqlalchemy.orm import Mapped, mapped_column

from portal.models.base import Base, TimestampMixin


class Service(Base, TimestampMixin):
    """An offering shown on the public services page.

    Attributes:
        id: UUID primary key.
        title: Service name.
        description: Marketing description.
        icon: Icon identifier used by the frontend (e.g., "Code", "Cloud").
        features: Bullet list of included features.
        price_range: Display price, e.g. "$5k - $20k".
        is_active: Only active services are listed publicly.
    """

    __tablename__ = "services"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(),
        primary_key=True,
        default=uuid.uuid4,
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text(), nullable=False)
    icon: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
        default="Code",
        server_default="Code",
    )
    features: Mapped[list[str] | None] = mapped_column(JSON(), nullable=True)
    price_range: Mapped[str | None] = mapped_column(String(100), nullable=True)
    is_active: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=True,
        server_default=true(),
    )
