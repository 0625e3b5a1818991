"""Repository for OtpVerification operations.

PM login codes are an append-only log per email. Verification picks the
newest matching, unverified, unexpired row; issuance expires every still
active row first so only one code per email is usable at a time.
"""

import uuid
from datetime import UTC, datetime

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from portal.models.otp_verification import OtpVerification


class OtpVerificationRepository:
    """Stateless repository for OtpVerification table operations.

    All methods are static with no instance state.
    """

    @staticmethod
    async def create(
        db: AsyncSession,
        *,
        email: str,
        otp_code: str,
        expires_at: datetime,
    ) -> OtpVerification:
        """Store a newly issued code.

        Args:
            db: Async database session.
            email: Address the code is sent to.
            otp_code: Plain code.
            expires_at: Code expiry timestamp.

        Returns:
            Created OtpVerification.
        """
        record = OtpVerification(
            email=email,
            otp_code=otp_code,
            expires_at=expires_at,
            created_at=datetime.now(UTC),
        )
        db.add(record)
        await db.flush()
        return record

    @staticmethod
    async def get_latest_valid(
        db: AsyncSession,
        *,
        email: str,
        otp_code: str,
        now: datetime | None = None,
    ) -> OtpVerification | None:
        """Find the newest usable row matching email and code.

        Wrong code, expired, already used, and never sent all look the
        same here: None.

        Args:
            db: Async database session.
            email: Address the code was sent to.
            otp_code: Code submitted by the PM.
            now: Reference time for expiry. Defaults to current UTC time.

        Returns:
            OtpVerification if a usable row exists, None otherwise.
        """
        stmt = (
            select(OtpVerification)
            .where(
                OtpVerification.email == email,
                OtpVerification.otp_code == otp_code,
                OtpVerification.verified.is_(False),
                OtpVerification.expires_at > (now or datetime.now(UTC)),
            )
            .order_by(OtpVerification.created_at.desc())
            .limit(1)
        )
        result = await db.execute(stmt)
        return result.scalar_one_or_none()

    @staticmethod
    async def mark_verified(db: AsyncSession, otp_id: uuid.UUID) -> None:
        """Consume a code. Irreversible.

        Args:
            db: Async database session.
            otp_id: Primary key of the row to consume.
        """
        stmt = (
            update(OtpVerification)
            .where(OtpVerification.id == otp_id)
            .values(verified=True)
            .execution_options(synchronize_session=False)
        )
        await db.execute(stmt)

    @staticmethod
    async def expire_active_for_email(
        db: AsyncSession,
        *,
        email: str,
        now: datetime | None = None,
    ) -> int:
        """Expire every still-usable code for an email.

        Called before issuing a new code. Rows stay in the log with
        verified=False; only their expiry moves to now.

        Args:
            db: Async database session.
            email: Address whose codes are retired.
            now: Reference time. Defaults to current UTC time.

        Returns:
            Number of codes expired.
        """
        cutoff = now or datetime.now(UTC)
        stmt = (
            update(OtpVerification)
            .where(
                OtpVerification.email == email,
                OtpVerification.verified.is_(False),
                OtpVerification.expires_at > cutoff,
            )
            .values(expires_at=cutoff)
            .execution_options(synchronize_session=False)
        )
        result = await db.execute(stmt)
        row_count: int = result.rowcount  # type: ignore[attr-defined]
        return row_count
