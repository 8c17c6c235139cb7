from __future__ import annotations

import logging
from dataclasses import replace

from curiosity.domain.common.errors import DomainError, NotFoundError
from curiosity.domain.common.models import Result
from curiosity.domain.common.query import Query
from curiosity.domain.common.service import EntityService, sparse
from curiosity.domain.profiles.models import Profile, UpdateProfileData, profile_from_wire

logger = logging.getLogger(__name__)


class ProfileService(EntityService):
    """profiles rows are keyed by the owner id itself."""

    table = "profiles"

    async def get_profile(self) -> Profile:
        session = await self._require_session("fetch the profile")
        try:
            row = await self._select_single("fetching profile", Query(self.table).eq("id", session.user_id))
        except NotFoundError:
            return Profile(id=session.user_id, email=session.email)
        profile = profile_from_wire(row)
        if not profile.email and session.email:
            profile = replace(profile, email=session.email)
        return profile

    async def update_profile(self, data: UpdateProfileData) -> Result:
        """Upserts the caller's profile. Reports failure in the Result instead of raising."""
        try:
            session = await self._require_session("update the profile")
            values = sparse(
                {
                    "first_name": data.first_name,
                    "last_name": data.last_name,
                    "email": data.email,
                    "avatar_url": data.avatar_url,
                }
            )
            values["id"] = session.user_id
            values["updated_at"] = self._now_iso()
            await self._guard("updating profile", self._backend.upsert(self.table, values, on_conflict="id"))
        except DomainError as e:
            logger.error("Error updating profile: %s", e)
            return Result(success=False, error=str(e) or "Failed to update profile")
        return Result(success=True)
