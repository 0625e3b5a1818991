"""Tests for PM login endpoints.

POST /pm/send-otp, POST /pm/verify-otp, GET /pm/me.
"""

import uuid
from datetime import UTC, datetime, timedelta
from unittest.mock import AsyncMock, patch

from httpx import AsyncClient
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from portal.core.auth import decode_session_token
from portal.models import OtpVerification, ProjectManager
from tests.conftest import (
    PM_EMAIL,
    TEST_AUTH_SECRET,
    create_test_pm_token,
)

_SEND_URL = "/api/v1/pm/send-otp"
_VERIFY_URL = "/api/v1/pm/verify-otp"
_ME_URL = "/api/v1/pm/me"
_PATCH_SEND_EMAIL = "portal.api.v1.pm_auth.send_otp_email"
_PATCH_VERIFY = "portal.api.v1.pm_auth.verify_otp"

_CODE = "482913"


async def _store_code(
    db: AsyncSession,
    *,
    email: str = PM_EMAIL,
    code: str = _CODE,
    expires_at: datetime | None = None,
    verified: bool = False,
) -> OtpVerification:
    record = OtpVerification(
        email=email,
        otp_code=code,
        verified=verified,
        expires_at=expires_at or datetime.now(UTC) + timedelta(minutes=10),
        created_at=datetime.now(UTC),
    )
    db.add(record)
    await db.commit()
    await db.refresh(record)
    return record


# ===================================================================
# POST /pm/send-otp
# ===================================================================


class TestSendOtp:
    async def test_sends_code_to_registered_pm(
        self,
        client: AsyncClient,
        db_session: AsyncSession,
        pm: ProjectManager,
    ) -> None:
        with patch(_PATCH_SEND_EMAIL, new_callable=AsyncMock) as mock_send:
            response = await client.post(_SEND_URL, json={"email": PM_EMAIL})

        assert response.status_code == 200
        assert response.json() == {
            "success": True,
            "message": "OTP sent successfully",
            "pmName": pm.name,
        }

        record = (
            await db_session.execute(
                select(OtpVerification).where(OtpVerification.email == PM_EMAIL)
            )
        ).scalar_one()
        mock_send.assert_awaited_once_with(
            to_email=PM_EMAIL, code=record.otp_code, pm_name=pm.name
        )

    async def test_code_not_in_response(
        self,
        client: AsyncClient,
        db_session: AsyncSession,
        pm: ProjectManager,  # noqa: ARG002
    ) -> None:
        with patch(_PATCH_SEND_EMAIL, new_callable=AsyncMock):
            response = await client.post(_SEND_URL, json={"email": PM_EMAIL})

        record = (await db_session.execute(select(OtpVerification))).scalar_one()
        assert record.otp_code not in response.text

    async def test_unknown_email_returns_404(self, client: AsyncClient) -> None:
        with patch(_PATCH_SEND_EMAIL, new_callable=AsyncMock) as mock_send:
            response = await client.post(
                _SEND_URL, json={"email": "nobody@example.com"}
            )

        assert response.status_code == 404
        assert response.json() == {"error": "Project manager not found"}
        mock_send.assert_not_awaited()

    async def test_invalid_email_returns_400(self, client: AsyncClient) -> None:
        response = await client.post(_SEND_URL, json={"email": "nope"})

        assert response.status_code == 400
        assert response.json() == {"error": "Please enter a valid email"}


# ===================================================================
# POST /pm/verify-otp
# ===================================================================


class TestVerifyOtp:
    async def test_valid_code_returns_profile_and_token(
        self,
        client: AsyncClient,
        db_session: AsyncSession,
        pm: ProjectManager,
    ) -> None:
        record = await _store_code(db_session)

        response = await client.post(
            _VERIFY_URL, json={"email": PM_EMAIL, "otp": _CODE}
        )

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["message"] == "Login successful"
        assert body["pm"] == {
            "id": str(pm.id),
            "name": "Alice Carter",
            "email": PM_EMAIL,
            "phone": "+1 555 0100",
            "specialization": "Web Development",
            "is_available": True,
        }
        assert (
            decode_session_token(body["sessionToken"], secret=TEST_AUTH_SECRET)
            == pm.id
        )

        await db_session.refresh(record)
        assert record.verified is True

    async def test_missing_fields_return_400(self, client: AsyncClient) -> None:
        for payload in ({}, {"email": PM_EMAIL}, {"otp": _CODE}, {"email": "", "otp": ""}):
            response = await client.post(_VERIFY_URL, json=payload)

            assert response.status_code == 400
            assert response.json() == {"error": "Email and OTP are required"}

    async def test_falsy_json_values_count_as_missing(
        self, client: AsyncClient
    ) -> None:
        for payload in (
            {"email": PM_EMAIL, "otp": 0},
            {"email": PM_EMAIL, "otp": False},
            {"email": False, "otp": _CODE},
        ):
            response = await client.post(_VERIFY_URL, json=payload)

            assert response.status_code == 400
            assert response.json() == {"error": "Email and OTP are required"}

    async def test_empty_body_returns_400(self, client: AsyncClient) -> None:
        response = await client.post(_VERIFY_URL, content=b"")

        assert response.status_code == 400
        assert response.json() == {"error": "Email and OTP are required"}

    async def test_non_matching_code_returns_400(
        self,
        client: AsyncClient,
        db_session: AsyncSession,
        pm: ProjectManager,  # noqa: ARG002
    ) -> None:
        await _store_code(db_session)

        response = await client.post(
            _VERIFY_URL, json={"email": PM_EMAIL, "otp": "000000"}
        )

        assert response.status_code == 400
        assert response.json() == {"error": "Invalid or expired OTP"}

    async def test_resubmitted_code_returns_400(
        self,
        client: AsyncClient,
        db_session: AsyncSession,
        pm: ProjectManager,  # noqa: ARG002
    ) -> None:
        await _store_code(db_session)
        first = await client.post(_VERIFY_URL, json={"email": PM_EMAIL, "otp": _CODE})

        second = await client.post(
            _VERIFY_URL, json={"email": PM_EMAIL, "otp": _CODE}
        )

        assert first.status_code == 200
        assert second.status_code == 400
        assert second.json() == {"error": "Invalid or expired OTP"}

    async def test_expired_code_returns_400(
        self,
        client: AsyncClient,
        db_session: AsyncSession,
        pm: ProjectManager,  # noqa: ARG002
    ) -> None:
        await _store_code(
            db_session, expires_at=datetime.now(UTC) - timedelta(seconds=1)
        )

        response = await client.post(
            _VERIFY_URL, json={"email": PM_EMAIL, "otp": _CODE}
        )

        assert response.status_code == 400
        assert response.json() == {"error": "Invalid or expired OTP"}

    async def test_valid_code_without_pm_consumes_and_returns_404(
        self,
        client: AsyncClient,
        db_session: AsyncSession,
    ) -> None:
        email = "former.pm@example.com"
        record = await _store_code(db_session, email=email)

        first = await client.post(_VERIFY_URL, json={"email": email, "otp": _CODE})
        second = await client.post(_VERIFY_URL, json={"email": email, "otp": _CODE})

        assert first.status_code == 404
        assert first.json() == {"error": "Project manager not found"}
        assert second.status_code == 400
        await db_session.refresh(record)
        assert record.verified is True

    async def test_malformed_json_returns_500_with_message(
        self, client: AsyncClient
    ) -> None:
        response = await client.post(
            _VERIFY_URL,
            content=b"{not json",
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 500
        assert response.json()["error"]

    async def test_unexpected_failure_surfaces_message(
        self, client: AsyncClient
    ) -> None:
        with patch(_PATCH_VERIFY, side_effect=RuntimeError("store unavailable")):
            response = await client.post(
                _VERIFY_URL, json={"email": PM_EMAIL, "otp": _CODE}
            )

        assert response.status_code == 500
        assert response.json() == {"error": "store unavailable"}

    async def test_cors_preflight_allows_any_origin(
        self, client: AsyncClient
    ) -> None:
        response = await client.options(
            _VERIFY_URL,
            headers={
                "Origin": "https://pm.example.com",
                "Access-Control-Request-Method": "POST",
                "Access-Control-Request-Headers": "content-type, x-client-info, apikey",
            },
        )

        assert response.status_code == 200
        assert response.headers["access-control-allow-origin"] == "*"


# ===================================================================
# GET /pm/me
# ===================================================================


class TestGetMe:
    async def test_returns_current_pm(
        self, client: AsyncClient, pm: ProjectManager
    ) -> None:
        token = create_test_pm_token(pm.id)

        response = await client.get(
            _ME_URL, headers={"Authorization": f"Bearer {token}"}
        )

        assert response.status_code == 200
        assert response.json()["data"]["email"] == PM_EMAIL

    async def test_login_token_is_accepted(
        self,
        client: AsyncClient,
        db_session: AsyncSession,
        pm: ProjectManager,
    ) -> None:
        await _store_code(db_session)
        login = await client.post(_VERIFY_URL, json={"email": PM_EMAIL, "otp": _CODE})
        token = login.json()["sessionToken"]

        response = await client.get(
            _ME_URL, headers={"Authorization": f"Bearer {token}"}
        )

        assert response.status_code == 200
        assert response.json()["data"]["id"] == str(pm.id)

    async def test_missing_token_returns_401(self, client: AsyncClient) -> None:
        response = await client.get(_ME_URL)

        assert response.status_code == 401
        assert response.json()["error"]["code"] == "UNAUTHORIZED"

    async def test_expired_token_returns_401(
        self, client: AsyncClient, pm: ProjectManager
    ) -> None:
        token = create_test_pm_token(pm.id, expires_delta=timedelta(seconds=-10))

        response = await client.get(
            _ME_URL, headers={"Authorization": f"Bearer {token}"}
        )

        assert response.status_code == 401

    async def test_token_for_deleted_pm_returns_401(self, client: AsyncClient) -> None:
        token = create_test_pm_token(uuid.uuid4())

        response = await client.get(
            _ME_URL, headers={"Authorization": f"Bearer {token}"}
        )

        assert response.status_code == 401

    async def test_tampered_token_returns_401(
        self, client: AsyncClient, pm: ProjectManager
    ) -> None:
        token = create_test_pm_token(
            pm.id, secret="some-other-secret-that-is-32-chars-long"
        )

        response = await client.get(
            _ME_URL, headers={"Authorization": f"Bearer {token}"}
        )

        assert response.status_code == 401
