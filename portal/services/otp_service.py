"""PM OTP login: code issuance and verification.

Three-step exchange:
1. issue_otp: PM submits email; a fresh code is stored and emailed.
2. The PM reads the code from their inbox.
3. verify_otp: PM submits email + code; the code is consumed and a
   session token is minted for the PM.

Failure responses never distinguish a wrong code from an expired or an
already used one.
"""

import secrets
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from portal.core.auth import create_session_token
from portal.core.config import settings
from portal.core.errors import APIError, NotFoundError, ValidationError
from portal.models.project_manager import ProjectManager
from portal.repositories.otp_verification_repository import (
    OtpVerificationRepository,
)
from portal.repositories.project_manager_repository import (
    ProjectManagerRepository,
)

logger = structlog.get_logger()

_MISSING_CREDENTIALS_MSG = "Email and OTP are required"
_INVALID_OTP_MSG = "Invalid or expired OTP"
_INVALID_EMAIL_MSG = "Please enter a valid email"
_PM_RESOURCE = "Project manager"

# =============================================================================
# Exceptions
# =============================================================================


class MissingCredentialsError(ValidationError):
    """Email or code absent from the verify request (400)."""

    def __init__(self) -> None:
        super().__init__(_MISSING_CREDENTIALS_MSG)


class InvalidOtpError(APIError):
    """No usable code matches the submission (400).

    Covers wrong, expired, reused, and never-issued codes alike.
    """

    def __init__(self) -> None:
        super().__init__(
            code="INVALID_OTP",
            message=_INVALID_OTP_MSG,
            status_code=400,
        )


class PMNotFoundError(NotFoundError):
    """No project manager is registered for the email (404)."""

    def __init__(self) -> None:
        super().__init__(_PM_RESOURCE)


# =============================================================================
# Results
# =============================================================================


@dataclass(frozen=True)
class IssuedOtp:
    """A freshly issued code, returned so the caller can email it.

    Attributes:
        email: Recipient address.
        code: Plain code.
        pm_name: Display name of the PM the code belongs to.
        expires_at: Expiry of the code.
    """

    email: str
    code: str
    pm_name: str
    expires_at: datetime


@dataclass(frozen=True)
class PMLogin:
    """Outcome of a successful verification.

    Attributes:
        pm: The authenticated project manager.
        session_token: Opaque bearer token for the PM dashboard.
    """

    pm: ProjectManager
    session_token: str


# =============================================================================
# Helpers
# =============================================================================


def generate_otp_code(length: int | None = None) -> str:
    """Generate a numeric code using a CSPRNG.

    Leading zeros are kept, so the result always has exactly ``length``
    digits.

    Args:
        length: Number of digits. Defaults to the configured OTP length.

    Returns:
        Code as a string of digits.
    """
    digits = length or settings.otp_length
    return "".join(str(secrets.randbelow(10)) for _ in range(digits))


def _clean(value: object) -> str:
    """Normalize an untrusted body field to a stripped string.

    Falsy JSON values (null, "", 0, false) count as absent and yield "".
    Surrounding whitespace is stripped, so a whitespace-only value is
    absent too.
    """
    if not value:
        return ""
    return str(value).strip()


# =============================================================================
# Issuance
# =============================================================================


async def issue_otp(db: AsyncSession, email: object) -> IssuedOtp:
    """Issue a login code for a PM email.

    Any code still active for the email is expired first, so at most one
    code per email is usable at a time. Commits before returning so the
    code exists before it is emailed.

    Args:
        db: Async database session.
        email: Raw email value from the request body.

    Returns:
        IssuedOtp describing the code to send.

    Raises:
        ValidationError: If the email is missing or malformed.
        PMNotFoundError: If no PM is registered for the email.
    """
    address = _clean(email)
    if not address or "@" not in address:
        raise ValidationError(_INVALID_EMAIL_MSG)

    pm = await ProjectManagerRepository.get_by_email(db, address)
    if pm is None:
        raise PMNotFoundError()

    now = datetime.now(UTC)
    expired = await OtpVerificationRepository.expire_active_for_email(
        db, email=address, now=now
    )

    code = generate_otp_code()
    expires_at = now + timedelta(minutes=settings.otp_ttl_minutes)
    await OtpVerificationRepository.create(
        db, email=address, otp_code=code, expires_at=expires_at
    )
    await db.commit()

    logger.info("otp_issued", email=address, superseded=expired)
    return IssuedOtp(email=address, code=code, pm_name=pm.name, expires_at=expires_at)


# =============================================================================
# Verification
# =============================================================================


async def verify_otp(db: AsyncSession, email: object, otp: object) -> PMLogin:
    """Verify a submitted code and start a PM session.

    Steps:
    1. Both fields must be non-empty (checked before any store access).
    2. The newest unverified, unexpired row for (email, code) is looked up.
    3. It is marked verified and committed.
    4. The PM is loaded by email. A missing PM still leaves the code
       consumed.
    5. A fresh session token is minted for the PM.

    Args:
        db: Async database session.
        email: Raw email value from the request body.
        otp: Raw code value from the request body.

    Returns:
        PMLogin with the PM and session token.

    Raises:
        MissingCredentialsError: Email or code missing/empty.
        InvalidOtpError: No usable code matches.
        PMNotFoundError: Code was valid but no PM has this email.
    """
    address = _clean(email)
    code = _clean(otp)
    if not address or not code:
        raise MissingCredentialsError()

    record = await OtpVerificationRepository.get_latest_valid(
        db, email=address, otp_code=code
    )
    if record is None:
        logger.info("otp_rejected", email=address)
        raise InvalidOtpError()

    await OtpVerificationRepository.mark_verified(db, record.id)
    await db.commit()

    pm = await ProjectManagerRepository.get_by_email(db, address)
    if pm is None:
        logger.warning("otp_consumed_without_pm", email=address)
        raise PMNotFoundError()

    token = create_session_token(
        pm_id=str(pm.id),
        secret=settings.auth_secret.get_secret_value(),
    )
    logger.info("pm_login", pm_id=str(pm.id))
    return PMLogin(pm=pm, session_token=token)
