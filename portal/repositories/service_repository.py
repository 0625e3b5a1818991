"""Repository for the public Service catalog."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from portal.models.service import Service


class ServiceRepository:
    """Stateless repository for Service table operations."""

    @staticmethod
    async def list_active(db: AsyncSession) -> list[Service]:
        """List active services in the order they were added.

        Args:
            db: Async database session.

        Returns:
            Active services, oldest first.
        """
        stmt = (
            select(Service)
            .where(Service.is_active.is_(True))
            .order_by(Service.created_at)
        )
        result = await db.execute(stmt)
        return list(result.scalars().all())
