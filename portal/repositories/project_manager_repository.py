"""Repository for ProjectManager reads."""

import uuid

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from portal.models.project_manager import ProjectManager


class ProjectManagerRepository:
    """Stateless repository for ProjectManager table operations.

    PMs are provisioned out of band, so this repository only reads.
    """

    @staticmethod
    async def get_by_id(
        db: AsyncSession, pm_id: uuid.UUID
    ) -> ProjectManager | None:
        """Fetch a PM by primary key.

        Args:
            db: Async database session.
            pm_id: UUID primary key.

        Returns:
            ProjectManager if found, None otherwise.
        """
        return await db.get(ProjectManager, pm_id)

    @staticmethod
    async def get_by_email(db: AsyncSession, email: str) -> ProjectManager | None:
        """Fetch a PM by login email (exact match).

        Args:
            db: Async database session.
            email: Email address to look up.

        Returns:
            ProjectManager if found, None otherwise.
        """
        stmt = select(ProjectManager).where(ProjectManager.email == email)
        result = await db.execute(stmt)
        return result.scalar_one_or_none()

    @staticmethod
    async def list_all(db: AsyncSession) -> list[ProjectManager]:
        """List every PM ordered by name."""
        stmt = select(ProjectManager).order_by(ProjectManager.name)
        result = await db.execute(stmt)
        return list(result.scalars().all())
