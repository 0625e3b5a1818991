"""Repository for customer Profile reads."""

import uuid
from collections.abc import Iterable

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from portal.models.profile import Profile


class ProfileRepository:
    """Stateless repository for Profile table operations."""

    @staticmethod
    async def get_by_user_ids(
        db: AsyncSession,
        user_ids: Iterable[uuid.UUID],
    ) -> dict[uuid.UUID, Profile]:
        """Batch-load profiles for a set of customer ids.

        One query regardless of how many ids are given. Ids without a
        profile row are simply absent from the result.

        Args:
            db: Async database session.
            user_ids: Customer account ids (duplicates allowed).

        Returns:
            Mapping of user_id to Profile.
        """
        distinct_ids = set(user_ids)
        if not distinct_ids:
            return {}

        stmt = select(Profile).where(Profile.user_id.in_(distinct_ids))
        result = await db.execute(stmt)
        return {profile.user_id: profile for profile in result.scalars().all()}
