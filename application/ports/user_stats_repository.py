"""
User Stats Repository Interface (Port).

Part of RIT-26: Streak tracking

Streak increments happen inside CompletionRepository.record_completion. This
port covers reads and the reset performed by the daily missed-day job.
"""
from typing import Protocol

from domain.models import UserStats


class UserStatsRepository(Protocol):
    """Abstract interface for per-user streak counters."""

    def get(self, user_id: str) -> UserStats:
        """
        Get a user's stats.

        Returns zeroed stats for users that have never completed a ritual.
        """
        ...

    def reset_streak(self, user_id: str) -> UserStats:
        """
        Set current_streak to zero after a missed day.

        longest_streak is kept.

        Returns:
            The updated stats
        """
        ...
