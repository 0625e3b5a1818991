"""Shared dependencies for API endpoints.

PM dashboard endpoints authenticate with the bearer session token issued
at OTP verification; admin endpoints with the X-Admin-Key header.

WHY DEPENDENCY INJECTION:
- Consistent auth across all endpoints
- Testable with overridden dependencies
"""

import secrets
from typing import Annotated

import jwt
from fastapi import Depends, Header
from sqlalchemy.ext.asyncio import AsyncSession

from portal.core.auth import decode_session_token
from portal.core.config import settings
from portal.core.database import get_db
from portal.core.errors import UnauthorizedError
from portal.models.project_manager import ProjectManager
from portal.repositories.project_manager_repository import (
    ProjectManagerRepository,
)

_BEARER_PREFIX = "bearer "

DbSession = Annotated[AsyncSession, Depends(get_db)]


async def get_current_pm(
    db: DbSession,
    authorization: Annotated[str | None, Header()] = None,
) -> ProjectManager:
    """Resolve the PM behind the request's session token.

    Validation steps:
    1. Read "Authorization: Bearer <token>"
    2. Verify signature (HS256), exp, aud, iss
    3. Load the PM named by sub

    Security: Never reveal WHY auth failed (expired, bad sig, deleted PM).

    Args:
        db: Database session (injected).
        authorization: Authorization header (injected).

    Returns:
        The authenticated ProjectManager.

    Raises:
        UnauthorizedError: For any auth failure.
    """
    if not authorization or not authorization.lower().startswith(_BEARER_PREFIX):
        raise UnauthorizedError()

    token = authorization[len(_BEARER_PREFIX) :].strip()
    try:
        pm_id = decode_session_token(
            token, secret=settings.auth_secret.get_secret_value()
        )
    except (jwt.InvalidTokenError, KeyError, ValueError) as exc:
        raise UnauthorizedError() from exc

    pm = await ProjectManagerRepository.get_by_id(db, pm_id)
    if pm is None:
        raise UnauthorizedError()
    return pm


def require_admin(
    x_admin_key: Annotated[str | None, Header()] = None,
) -> None:
    """Gate admin endpoints on the configured admin key.

    Constant-time comparison. An unset ADMIN_API_KEY rejects every call.

    Raises:
        UnauthorizedError: Key missing, wrong, or not configured.
    """
    expected = settings.admin_api_key.get_secret_value()
    if not expected or not x_admin_key:
        raise UnauthorizedError()
    if not secrets.compare_digest(x_admin_key.encode(), expected.encode()):
        raise UnauthorizedError()


# Reusable type aliases for dependency injection
CurrentPM = Annotated[ProjectManager, Depends(get_current_pm)]
AdminAccess = Annotated[None, Depends(require_admin)]
