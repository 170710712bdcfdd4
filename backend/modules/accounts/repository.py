"""
Profile repository for database access.
"""

from datetime import datetime, timezone
from typing import Any, Optional

from shared.repository import BaseRepository
from .models import Profile


class ProfileRepository(BaseRepository[Profile]):
    """Repository for the profiles table, one row per user."""

    TABLE = "profiles"

    def get(self, user_id: str) -> Optional[Profile]:
        result = self._db.table(self.TABLE).select("*").eq("user_id", user_id).execute()
        if not result.data:
            return None
        return self._map_to_profile(result.data[0])

    def upsert(self, user_id: str, data: dict[str, Any]) -> Profile:
        """Create or update the user's profile with the given columns."""
        row = {"user_id": user_id, **data, "updated_at": self._now_iso()}
        result = self._db.table(self.TABLE).upsert(row, on_conflict="user_id").execute()
        return self._map_to_profile(result.data[0] if result.data else row)

    @staticmethod
    def _map_to_profile(row: dict[str, Any]) -> Profile:
        return Profile(
            user_id=row["user_id"],
            role=row.get("role"),
            goals=row.get("goals") or [],
            timezone=row.get("timezone") or "UTC",
            created_at=row.get("created_at"),
            updated_at=row.get("updated_at"),
        )


class InMemoryProfileRepository:
    """Profile storage kept in process memory."""

    def __init__(self) -> None:
        self._rows: dict[str, dict[str, Any]] = {}

    def get(self, user_id: str) -> Optional[Profile]:
        row = self._rows.get(user_id)
        return ProfileRepository._map_to_profile(row) if row else None

    def upsert(self, user_id: str, data: dict[str, Any]) -> Profile:
        now = datetime.now(timezone.utc)
        row = self._rows.setdefault(user_id, {"user_id": user_id, "created_at": now})
        row.update(data)
        row["updated_at"] = now
        return ProfileRepository._map_to_profile(row)
