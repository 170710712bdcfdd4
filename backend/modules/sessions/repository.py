"""
Session repository for database access.

Encapsulates all Supabase queries and data mapping for the sessions table.
JSON columns (transcript, scores, detailed_feedback, followup_questions,
user_responses) are stored in their API shape, camelCase keys included.
"""

from typing import Any, Optional

from shared.repository import BaseRepository
from .models import PracticeSession


def to_row(session: PracticeSession) -> dict[str, Any]:
    """Serialize a session into a sessions-table row."""
    return session.model_dump(mode="json", by_alias=True)


class SessionRepository(BaseRepository[PracticeSession]):
    """
    Repository for session data access.

    Note: This repository does NOT perform authorization checks.
    The service layer is responsible for verifying ownership.
    """

    TABLE = "sessions"

    def create(self, session: PracticeSession) -> PracticeSession:
        """
        Insert a new session.

        Returns:
            The session as stored
        """
        result = self._db.table(self.TABLE).insert(to_row(session)).execute()
        if not result.data:
            return session
        return self._map_to_session(result.data[0])

    def get(self, session_id: str) -> Optional[PracticeSession]:
        """Get a session by ID, or None."""
        result = self._db.table(self.TABLE).select("*").eq("id", session_id).execute()
        if not result.data:
            return None
        return self._map_to_session(result.data[0])

    def update(self, session_id: str, data: dict[str, Any]) -> Optional[PracticeSession]:
        """
        Update columns of a session.

        Args:
            session_id: Session to update
            data: JSON-ready column values

        Returns:
            The updated session, or None if it doesn't exist
        """
        result = self._db.table(self.TABLE).update(data).eq("id", session_id).execute()
        if not result.data:
            return None
        return self._map_to_session(result.data[0])

    def list_by_user(self, user_id: str, limit: int) -> list[PracticeSession]:
        """Get a user's sessions, most recent first."""
        result = (
            self._db.table(self.TABLE)
            .select("*")
            .eq("user_id", user_id)
            .order("created_at", desc=True)
            .limit(limit)
            .execute()
        )
        return [self._map_to_session(row) for row in result.data or []]

    def reassign_anon(self, anon_id: str, user_id: str) -> int:
        """
        Move every session of an anonymous ID to a user.

        Returns:
            Number of sessions moved
        """
        found = self._db.table(self.TABLE).select("id").eq("anon_id", anon_id).execute()
        if not found.data:
            return 0

        self._db.table(self.TABLE).update({
            "user_id": user_id,
            "anon_id": None,
        }).eq("anon_id", anon_id).execute()
        return len(found.data)

    # -------------------------------------------------------------------------
    # Mapping helpers
    # -------------------------------------------------------------------------

    @staticmethod
    def _map_to_session(row: dict[str, Any]) -> PracticeSession:
        """Map a database row to PracticeSession; null JSON columns become empty."""
        return PracticeSession.model_validate({
            **row,
            "transcript": row.get("transcript") or [],
            "followup_questions": row.get("followup_questions") or [],
            "user_responses": row.get("user_responses") or [],
            "is_pro_features_used": bool(row.get("is_pro_features_used")),
        })


class InMemorySessionRepository:
    """
    Session storage kept in process memory.

    Stores rows in their database shape so mapping matches Supabase.
    """

    def __init__(self) -> None:
        self._rows: dict[str, dict[str, Any]] = {}

    def create(self, session: PracticeSession) -> PracticeSession:
        self._rows[session.id] = to_row(session)
        return SessionRepository._map_to_session(self._rows[session.id])

    def get(self, session_id: str) -> Optional[PracticeSession]:
        row = self._rows.get(session_id)
        return SessionRepository._map_to_session(row) if row else None

    def update(self, session_id: str, data: dict[str, Any]) -> Optional[PracticeSession]:
        row = self._rows.get(session_id)
        if row is None:
            return None
        row.update(data)
        return SessionRepository._map_to_session(row)

    def list_by_user(self, user_id: str, limit: int) -> list[PracticeSession]:
        rows = [r for r in self._rows.values() if r.get("user_id") == user_id]
        rows.sort(key=lambda r: r["created_at"], reverse=True)
        return [SessionRepository._map_to_session(r) for r in rows[:limit]]

    def reassign_anon(self, anon_id: str, user_id: str) -> int:
        moved = 0
        for row in self._rows.values():
            if row.get("anon_id") == anon_id:
                row["user_id"] = user_id
                row["anon_id"] = None
                moved += 1
        return moved
