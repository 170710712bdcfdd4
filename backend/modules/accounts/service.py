"""
Account service: anonymous-to-user migration and profiles.
"""

import logging
from typing import Optional, Union

from modules.sessions.repository import InMemorySessionRepository, SessionRepository
from modules.usage.interfaces import IUsageService
from shared.models import AuthenticatedUser, OwnerRef

from .models import Profile, ProfileUpdate
from .repository import InMemoryProfileRepository, ProfileRepository

logger = logging.getLogger(__name__)


class AccountService:
    """
    Account operations for signed-in users.

    Migration is not transactional. It is safe to retry: sessions are
    matched by anon_id, which the first run clears, and usage is moved
    by IUsageService.merge, which deletes the anonymous rows before
    adding to the user's count.
    """

    def __init__(
        self,
        sessions: Union[SessionRepository, InMemorySessionRepository],
        usage: IUsageService,
        profiles: Union[ProfileRepository, InMemoryProfileRepository],
    ):
        self._sessions = sessions
        self._usage = usage
        self._profiles = profiles

    async def migrate_anonymous(
        self,
        anon_id: Optional[str],
        user: AuthenticatedUser,
    ) -> int:
        """
        Move an anonymous identity's sessions and this week's usage to a user.

        Args:
            anon_id: Client-generated anonymous ID; nothing happens when empty
            user: The newly signed-in user

        Returns:
            Number of sessions moved
        """
        if not anon_id:
            return 0

        moved = self._sessions.reassign_anon(anon_id, user.id)
        simulations = await self._usage.merge(OwnerRef.anon(anon_id), OwnerRef.user(user.id))

        if moved or simulations:
            logger.info(
                "Migrated anonymous %s to user %s: %d session(s), %d simulation(s)",
                anon_id, user.id, moved, simulations,
            )
        return moved

    async def get_profile(self, user_id: str) -> Profile:
        """Get the user's profile, or defaults when none is saved."""
        return self._profiles.get(user_id) or Profile(user_id=user_id)

    async def update_profile(self, user_id: str, update: ProfileUpdate) -> Profile:
        """Save the fields set in ``update``."""
        data = update.model_dump(exclude_unset=True, exclude_none=True)
        return self._profiles.upsert(user_id, data)
