"""Email sending via Resend API.

Simple HTTP POST to Resend for PM login codes. Plain-text format.
"""

import logging

import httpx

from portal.core.config import settings

logger = logging.getLogger(__name__)

_RESEND_API_URL = "https://api.resend.com/emails"
_RESEND_TIMEOUT = 10.0


async def send_otp_email(*, to_email: str, code: str, pm_name: str) -> None:
    """Send a PM login code via Resend.

    Runs as a background task after the code is committed, so a delivery
    failure is logged and never reaches the caller.

    Args:
        to_email: Recipient email address.
        code: Plain one-time code.
        pm_name: Project manager display name for the greeting.
    """
    try:
        async with httpx.AsyncClient() as client:
            resp = await client.post(
                _RESEND_API_URL,
                headers={
                    "Authorization": f"Bearer {settings.resend_api_key.get_secret_value()}",
                },
                json={
                    "from": settings.email_from,
                    "to": to_email,
                    "subject": "Your PM portal login code",
                    "text": (
                        f"Hi {pm_name},\n\n"
                        f"Your verification code is: {code}\n\n"
                        f"This code expires in {settings.otp_ttl_minutes} minutes. "
                        "If you didn't request this, you can safely ignore this email."
                    ),
                },
                timeout=_RESEND_TIMEOUT,
            )
            resp.raise_for_status()
    except Exception:
        logger.warning("Failed to send OTP email", exc_info=True)
