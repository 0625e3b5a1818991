"""PM OTP login endpoints.

Endpoints:
- POST /pm/send-otp: issue a login code and email it
- POST /pm/verify-otp: verify the code, return PM profile + session token
- GET /pm/me: current PM from the session token

The two login functions answer with their own flat shapes:
``{"success": true, ...}`` on success and ``{"error": "<message>"}`` on
failure. Each catches its own errors instead of relying on the app-wide
exception handlers, and unexpected failures surface their message as a
500.
"""

import json
from typing import Any

import structlog
from fastapi import APIRouter, BackgroundTasks, Request
from fastapi.responses import JSONResponse

from portal.api.deps import CurrentPM, DbSession
from portal.core.email import send_otp_email
from portal.core.errors import APIError, InternalError
from portal.core.responses import DataResponse, FunctionErrorResponse
from portal.schemas.pm import PMProfile, SendOtpResponse, VerifyOtpResponse
from portal.services.otp_service import issue_otp, verify_otp

logger = structlog.get_logger()

router = APIRouter()


# ===================================================================
# Helpers
# ===================================================================


async def _read_json_object(request: Request) -> dict[str, Any]:
    """Parse the request body as a JSON object.

    An empty body or a JSON value that is not an object yields ``{}`` so
    the caller reports missing fields. Malformed JSON raises.
    """
    raw = await request.body()
    if not raw.strip():
        return {}
    payload = json.loads(raw)
    return payload if isinstance(payload, dict) else {}


def _error_response(exc: APIError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=FunctionErrorResponse(error=exc.message).model_dump(),
    )


# ===================================================================
# POST /pm/send-otp
# ===================================================================


@router.post("/send-otp")
async def send_otp(
    request: Request,
    background_tasks: BackgroundTasks,
    db: DbSession,
) -> JSONResponse:
    """Issue a login code for a registered PM email.

    Any previously issued, still-active code for the email stops working.
    The email is sent as a background task after the code is committed.
    """
    try:
        body = await _read_json_object(request)
        issued = await issue_otp(db, body.get("email"))
    except APIError as exc:
        await db.rollback()
        return _error_response(exc)
    except Exception as exc:
        await db.rollback()
        logger.exception("pm_send_otp_failed")
        return _error_response(InternalError(str(exc) or "Failed to send OTP"))

    background_tasks.add_task(
        send_otp_email,
        to_email=issued.email,
        code=issued.code,
        pm_name=issued.pm_name,
    )
    return JSONResponse(
        content=SendOtpResponse(pm_name=issued.pm_name).model_dump(by_alias=True)
    )


# ===================================================================
# POST /pm/verify-otp
# ===================================================================


@router.post("/verify-otp")
async def verify_otp_endpoint(
    request: Request,
    db: DbSession,
) -> JSONResponse:
    """Verify a login code and start a PM session.

    Responses:
    - 200: {success, message, pm, sessionToken}
    - 400: missing fields, or invalid/expired/used code
    - 404: code was valid but no PM has this email (code still consumed)
    - 500: anything unexpected, with its message
    """
    try:
        body = await _read_json_object(request)
        login = await verify_otp(db, body.get("email"), body.get("otp"))
    except APIError as exc:
        await db.rollback()
        return _error_response(exc)
    except Exception as exc:
        await db.rollback()
        logger.exception("pm_verify_otp_failed")
        return _error_response(InternalError(str(exc) or "Verification failed"))

    response = VerifyOtpResponse(
        pm=PMProfile.model_validate(login.pm),
        session_token=login.session_token,
    )
    return JSONResponse(content=response.model_dump(mode="json", by_alias=True))


# ===================================================================
# GET /pm/me
# ===================================================================


@router.get("/me")
async def get_me(pm: CurrentPM) -> DataResponse[PMProfile]:
    """Return the PM behind the session token.

    Returns 401 if the token is missing, invalid, expired, or names a PM
    that no longer exists.
    """
    return DataResponse(data=PMProfile.model_validate(pm))
