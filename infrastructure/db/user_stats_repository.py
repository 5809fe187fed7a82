"""
Supabase implementation of UserStatsRepository.

Part of RIT-26: Streak tracking
"""
import logging

from supabase import Client

from domain.converters.db_converters import row_to_user_stats
from domain.models import UserStats
from infrastructure.db.errors import storage_call

logger = logging.getLogger(__name__)


class SupabaseUserStatsRepository:
    """Supabase implementation of UserStatsRepository protocol (user_stats table)."""

    def __init__(self, client: Client):
        self._client = client

    def get(self, user_id: str) -> UserStats:
        with storage_call("get_user_stats"):
            result = (
                self._client.table("user_stats")
                .select("*")
                .eq("user_id", user_id)
                .limit(1)
                .execute()
            )
        if not result.data:
            return UserStats(user_id=user_id)
        return row_to_user_stats(result.data[0])

    def reset_streak(self, user_id: str) -> UserStats:
        with storage_call("reset_streak"):
            result = (
                self._client.table("user_stats")
                .update({"current_streak": 0})
                .eq("user_id", user_id)
                .execute()
            )
        if not result.data:
            return UserStats(user_id=user_id)
        logger.info(f"Streak reset for {user_id}")
        return row_to_user_stats(result.data[0])
