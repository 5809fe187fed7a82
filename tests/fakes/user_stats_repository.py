"""
Fake User Stats Repository for testing.

Part of RIT-28: In-memory fake repositories
"""
from typing import Dict, List
from datetime import date

from domain.models import UserStats


class FakeUserStatsRepository:
    """
    In-memory fake implementation of UserStatsRepository for testing.

    Streak increments are applied by FakeCompletionRepository through
    record_qualifying(), mirroring the completion transaction.
    """

    def __init__(self):
        self._stats: Dict[str, UserStats] = {}

    def reset(self) -> None:
        self._stats.clear()

    def seed(self, stats: List[UserStats]) -> None:
        for item in stats:
            self._stats[item.user_id] = item

    def snapshot(self) -> Dict[str, UserStats]:
        return dict(self._stats)

    def restore(self, snapshot: Dict[str, UserStats]) -> None:
        self._stats = dict(snapshot)

    def record_qualifying(self, user_id: str, on_date: date) -> UserStats:
        """
        Apply a qualifying completion (test helper used by the completion fake).

        Same rule as complete_ritual: only a date after last_streak_date
        increments, and last_streak_date never moves backward.
        """
        stats = self.get(user_id)
        if stats.last_streak_date is not None and on_date <= stats.last_streak_date:
            return stats
        current = stats.current_streak + 1
        stats = stats.model_copy(
            update={
                "current_streak": current,
                "longest_streak": max(stats.longest_streak, current),
                "last_streak_date": on_date,
            }
        )
        self._stats[user_id] = stats
        return stats

    # =========================================================================
    # UserStatsRepository Protocol Methods
    # =========================================================================

    def get(self, user_id: str) -> UserStats:
        return self._stats.get(user_id) or UserStats(user_id=user_id)

    def reset_streak(self, user_id: str) -> UserStats:
        stats = self.get(user_id).model_copy(update={"current_streak": 0})
        self._stats[user_id] = stats
        return stats
