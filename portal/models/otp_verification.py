"""OTP verification model - PM login codes.

Append-only log of issued codes. A row is created per send, flipped to
verified once on successful login, and never deleted.
"""

import uuid
from datetime import datetime

from sqlalchemy import Boolean, DateTime, Index, String, Uuid, false
from sqlalchemy.orm import Mapped, mapped_column

from portal.models.base import Base, utcnow


class OtpVerification(Base):
    """One-time login code issued to a project manager's email.

    Attributes:
        id: UUID primary key.
        email: Address the code was sent to.
        otp_code: The code, compared verbatim on verification.
        verified: True once the code has been used. Never flipped back.
        expires_at: Code is unusable at or after this instant.
        created_at: Issue time; the newest matching row wins on verify.
    """

    __tablename__ = "otp_verifications"
    __table_args__ = (
        Index("idx_otp_verifications_email_created", "email", "created_at"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(),
        primary_key=True,
        default=uuid.uuid4,
    )
    email: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )
    otp_code: Mapped[str] = mapped_column(
        String(12),
        nullable=False,
    )
    verified: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
        server_default=false(),
    )
    expires_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )
