"""
Completion Repository Interface (Port).

Part of RIT-22: Define repository interfaces (ports)

This module defines the abstract interface for ritual completion persistence.
A completion is written together with its step responses, its per-set workout
responses, the ritual's completion_count increment and the owner's streak
increment, as one unit of work.
"""
from datetime import date
from typing import List, Optional, Protocol

from domain.models import RitualCompletion


class CompletionRepository(Protocol):
    """
    Abstract interface for ritual completion persistence.

    At most one completion exists per (user_id, ritual_id, completed_date).
    Implementations enforce this with a unique constraint and a lock on the
    ritual row, not with an application-level read.
    """

    def record_completion(
        self,
        completion: RitualCompletion,
        *,
        qualifying: bool,
    ) -> RitualCompletion:
        """
        Atomically record a validated completion.

        Within one transaction:
        1. Lock the ritual and check for an existing completion on the date
        2. Insert the completion and one row per step response
        3. Insert one workout_set_responses row per logged set
        4. `completion_count = completion_count + 1` on the ritual
        5. If qualifying, increment the user's streak (at most once per day)

        Any failure rolls back every write.

        Args:
            completion: Completion with validated, SI-normalized responses
            qualifying: Whether the completion counts toward the streak

        Returns:
            The stored completion with its id

        Raises:
            DuplicateCompletionError: If one already exists for the date
            NotFoundError: If the ritual disappeared
            RitualStorageError: If the transaction failed or timed out
        """
        ...

    def list_for_date(self, user_id: str, on_date: date) -> List[RitualCompletion]:
        """
        Get all of a user's completions on a calendar date.

        Used by schedule resolution to split occurrences into scheduled and
        completed.
        """
        ...

    def list_for_user(
        self,
        user_id: str,
        *,
        ritual_id: Optional[str] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> List[RitualCompletion]:
        """
        Get completion history for a user, most recent first.

        Args:
            user_id: User ID
            ritual_id: Optional ritual filter
            limit: Maximum results
            offset: Pagination offset

        Returns:
            List of completions
        """
        ...

    def get(self, completion_id: str) -> Optional[RitualCompletion]:
        """Get a single completion with its responses."""
        ...

    def count_for_ritual(self, user_id: str, ritual_id: str) -> int:
        """Number of completions of a ritual by a user."""
        ...
