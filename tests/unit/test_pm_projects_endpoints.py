"""Tests for PM dashboard project endpoints.

GET /pm/projects, PATCH /pm/projects/{id}/status,
POST /pm/projects/{id}/notes.
"""

import uuid
from datetime import UTC, datetime, timedelta

import pytest_asyncio
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from portal.models import Profile, ProjectManager, ServiceRequest
from portal.repositories.service_request_repository import (
    ServiceRequestRepository,
)
from tests.conftest import create_test_pm_token, make_service_request

_PROJECTS_URL = "/api/v1/pm/projects"
_BASE_TIME = datetime(2026, 4, 1, 9, 0, tzinfo=UTC)


def _status_url(project_id: uuid.UUID) -> str:
    return f"{_PROJECTS_URL}/{project_id}/status"


def _notes_url(project_id: uuid.UUID) -> str:
    return f"{_PROJECTS_URL}/{project_id}/notes"


def _auth(pm: ProjectManager) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_test_pm_token(pm.id)}"}


@pytest_asyncio.fixture
async def project(
    db_session: AsyncSession, pm: ProjectManager, customer: Profile
) -> ServiceRequest:
    """Pending request assigned to the logged-in PM."""
    return await make_service_request(
        db_session,
        title="Clinic booking app",
        assigned_pm_id=pm.id,
        user_id=customer.user_id,
        created_at=_BASE_TIME,
    )


# ===================================================================
# GET /pm/projects
# ===================================================================


class TestListProjects:
    async def test_requires_session_token(self, client: AsyncClient) -> None:
        response = await client.get(_PROJECTS_URL)

        assert response.status_code == 401

    async def test_lists_only_assigned_newest_first(
        self,
        client: AsyncClient,
        db_session: AsyncSession,
        pm: ProjectManager,
        other_pm: ProjectManager,
        project: ServiceRequest,
    ) -> None:
        newer = await make_service_request(
            db_session,
            title="Landing page refresh",
            status="in_progress",
            assigned_pm_id=pm.id,
            created_at=_BASE_TIME + timedelta(days=3),
        )
        await make_service_request(
            db_session,
            title="Someone else's work",
            assigned_pm_id=other_pm.id,
            created_at=_BASE_TIME + timedelta(days=5),
        )
        await make_service_request(
            db_session, title="Unassigned", created_at=_BASE_TIME
        )

        response = await client.get(_PROJECTS_URL, headers=_auth(pm))

        assert response.status_code == 200
        data = response.json()["data"]
        assert [p["id"] for p in data["projects"]] == [str(newer.id), str(project.id)]
        assert data["stats"] == {
            "total": 2,
            "active": 1,
            "pending": 1,
            "completed": 0,
        }

    async def test_joins_customer_profile(
        self,
        client: AsyncClient,
        pm: ProjectManager,
        customer: Profile,
        project: ServiceRequest,  # noqa: ARG002
    ) -> None:
        response = await client.get(_PROJECTS_URL, headers=_auth(pm))

        (item,) = response.json()["data"]["projects"]
        assert item["customer"] == {
            "user_id": str(customer.user_id),
            "full_name": "Dana Customer",
            "email": "dana@example.com",
        }

    async def test_customer_is_null_without_profile(
        self,
        client: AsyncClient,
        db_session: AsyncSession,
        pm: ProjectManager,
    ) -> None:
        await make_service_request(
            db_session, assigned_pm_id=pm.id, user_id=uuid.uuid4()
        )

        response = await client.get(_PROJECTS_URL, headers=_auth(pm))

        (item,) = response.json()["data"]["projects"]
        assert item["customer"] is None

    async def test_empty_dashboard(
        self, client: AsyncClient, pm: ProjectManager
    ) -> None:
        response = await client.get(_PROJECTS_URL, headers=_auth(pm))

        assert response.json()["data"] == {
            "projects": [],
            "stats": {"total": 0, "active": 0, "pending": 0, "completed": 0},
        }


# ===================================================================
# PATCH /pm/projects/{id}/status
# ===================================================================


class TestUpdateStatus:
    async def test_any_transition_allowed(
        self,
        client: AsyncClient,
        pm: ProjectManager,
        project: ServiceRequest,
    ) -> None:
        for status in ("completed", "pending", "cancelled", "in_progress"):
            response = await client.patch(
                _status_url(project.id), json={"status": status}, headers=_auth(pm)
            )

            assert response.status_code == 200
            assert response.json()["data"]["status"] == status

    async def test_persists_status(
        self,
        client: AsyncClient,
        db_session: AsyncSession,
        pm: ProjectManager,
        project: ServiceRequest,
    ) -> None:
        await client.patch(
            _status_url(project.id), json={"status": "completed"}, headers=_auth(pm)
        )

        await db_session.refresh(project)
        assert project.status == "completed"

    async def test_invalid_status_returns_400(
        self,
        client: AsyncClient,
        pm: ProjectManager,
        project: ServiceRequest,
    ) -> None:
        response = await client.patch(
            _status_url(project.id), json={"status": "archived"}, headers=_auth(pm)
        )

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"

    async def test_other_pms_project_returns_404(
        self,
        client: AsyncClient,
        db_session: AsyncSession,
        other_pm: ProjectManager,
        project: ServiceRequest,
    ) -> None:
        response = await client.patch(
            _status_url(project.id),
            json={"status": "cancelled"},
            headers=_auth(other_pm),
        )

        assert response.status_code == 404
        await db_session.refresh(project)
        assert project.status == "pending"

    async def test_unknown_project_returns_404(
        self, client: AsyncClient, pm: ProjectManager
    ) -> None:
        response = await client.patch(
            _status_url(uuid.uuid4()), json={"status": "completed"}, headers=_auth(pm)
        )

        assert response.status_code == 404


# ===================================================================
# POST /pm/projects/{id}/notes
# ===================================================================


class TestAddNote:
    async def test_first_note_stored_as_submitted(
        self,
        client: AsyncClient,
        pm: ProjectManager,
        project: ServiceRequest,
    ) -> None:
        response = await client.post(
            _notes_url(project.id),
            json={"note": "  Kickoff scheduled  "},
            headers=_auth(pm),
        )

        assert response.status_code == 200
        notes = response.json()["data"]["notes"]
        assert notes.startswith("[")
        assert notes.endswith("]   Kickoff scheduled  ")
        assert "\n" not in notes

    async def test_notes_append_in_order(
        self,
        client: AsyncClient,
        pm: ProjectManager,
        project: ServiceRequest,
    ) -> None:
        for text in ("First", "Second", "Third"):
            response = await client.post(
                _notes_url(project.id), json={"note": text}, headers=_auth(pm)
            )

        entries = response.json()["data"]["notes"].split("\n\n")
        assert [e.split("] ", 1)[1] for e in entries] == ["First", "Second", "Third"]

    async def test_append_keeps_history_written_elsewhere(
        self,
        client: AsyncClient,
        db_session: AsyncSession,
        pm: ProjectManager,
        project: ServiceRequest,
    ) -> None:
        # A concurrent writer lands between this PM's reads.
        await ServiceRequestRepository.append_note(
            db_session, request_id=project.id, pm_id=pm.id, entry="[earlier] other tab"
        )
        await db_session.commit()

        response = await client.post(
            _notes_url(project.id), json={"note": "this tab"}, headers=_auth(pm)
        )

        notes = response.json()["data"]["notes"]
        assert notes.startswith("[earlier] other tab\n\n[")
        assert notes.endswith("] this tab")

    async def test_blank_note_returns_400(
        self,
        client: AsyncClient,
        pm: ProjectManager,
        project: ServiceRequest,
    ) -> None:
        response = await client.post(
            _notes_url(project.id), json={"note": "   "}, headers=_auth(pm)
        )

        assert response.status_code == 400
        assert response.json()["error"]["message"] == "Note must not be empty"

    async def test_other_pms_project_returns_404(
        self,
        client: AsyncClient,
        db_session: AsyncSession,
        other_pm: ProjectManager,
        project: ServiceRequest,
    ) -> None:
        response = await client.post(
            _notes_url(project.id), json={"note": "hijack"}, headers=_auth(other_pm)
        )

        assert response.status_code == 404
        await db_session.refresh(project)
        assert project.notes is None
