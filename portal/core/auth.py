"""PM session token helpers.

Successful OTP verification mints a short-lived signed JWT. It is opaque
to the browser, never stored server-side, and verified on every PM
dashboard call (see api/deps.py).
"""

import uuid
from datetime import UTC, datetime, timedelta

import jwt

from portal.core.config import settings

SESSION_AUDIENCE = "service-portal-pm"


def create_session_token(
    *,
    pm_id: str,
    secret: str,
    expires_delta: timedelta | None = None,
) -> str:
    """Create a signed PM session token with standard claims.

    Every token carries a fresh ``jti`` so two logins never yield the
    same string.

    Args:
        pm_id: Project manager UUID string for the sub claim.
        secret: HMAC signing secret.
        expires_delta: Time until expiration. Defaults to the configured
            PM session TTL.

    Returns:
        Encoded JWT string.
    """
    now = datetime.now(UTC)
    ttl = expires_delta or timedelta(minutes=settings.pm_session_ttl_minutes)
    payload = {
        "sub": pm_id,
        "aud": SESSION_AUDIENCE,
        "iss": settings.auth_issuer,
        "exp": now + ttl,
        "iat": now,
        "jti": str(uuid.uuid4()),
    }
    return jwt.encode(payload, secret, algorithm="HS256")


def decode_session_token(token: str, *, secret: str) -> uuid.UUID:
    """Verify a PM session token and return the PM id it names.

    Args:
        token: Encoded JWT string from the Authorization header.
        secret: HMAC signing secret.

    Returns:
        UUID of the project manager.

    Raises:
        jwt.InvalidTokenError: Bad signature, wrong audience/issuer, or expired.
        KeyError: Token has no sub claim.
        ValueError: sub is not a UUID.
    """
    payload = jwt.decode(
        token,
        secret,
        algorithms=["HS256"],
        audience=SESSION_AUDIENCE,
        issuer=settings.auth_issuer,
    )
    return uuid.UUID(payload["sub"])
