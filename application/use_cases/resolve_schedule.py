"""
ResolveSchedule Use Case.

Part of RIT-21: Recurrence model for rituals

Partitions a user's active rituals for a calendar date:
- scheduled: the date is an occurrence and there is no completion yet
- completed: the date is an occurrence and a completion exists for it

Rituals that do not occur on the date appear in neither list.
"""

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional

from application.ports import CompletionRepository, RitualRepository, UserStatsRepository
from application.use_cases.base import UseCaseResult, failure
from domain.exceptions import RitualError
from domain.models import RitualCompletion, RitualDefinition
from domain.services import occurs_on

logger = logging.getLogger(__name__)


@dataclass
class ScheduleResult(UseCaseResult):
    """Result of the ResolveSchedule use case execution."""

    date: Optional[date] = None
    scheduled: List[RitualDefinition] = field(default_factory=list)
    completed: List[RitualCompletion] = field(default_factory=list)
    current_streak: Optional[int] = None


class ResolveScheduleUseCase:
    """
    Use case for building a user's schedule for one day.

    Usage:
        >>> use_case = ResolveScheduleUseCase(ritual_repo, completion_repo)
        >>> result = use_case.execute("user-123", date(2024, 3, 4))
        >>> [r.name for r in result.scheduled]
        ['Morning pages']
    """

    def __init__(
        self,
        ritual_repo: RitualRepository,
        completion_repo: CompletionRepository,
        stats_repo: Optional[UserStatsRepository] = None,
    ) -> None:
        """
        Initialize the use case with required dependencies.

        Args:
            ritual_repo: Repository for rituals
            completion_repo: Repository for completions
            stats_repo: Optional streak source; when set the result carries current_streak
        """
        self._ritual_repo = ritual_repo
        self._completion_repo = completion_repo
        self._stats_repo = stats_repo

    def execute(self, user_id: str, on_date: date) -> ScheduleResult:
        """
        Resolve the schedule for user_id on on_date.

        Returns:
            ScheduleResult with scheduled rituals and same-day completions
        """
        try:
            rituals = self._ritual_repo.list_for_user(user_id, active_only=True, limit=None)
            completions = {
                c.ritual_id: c for c in self._completion_repo.list_for_date(user_id, on_date)
            }

            scheduled: List[RitualDefinition] = []
            completed: List[RitualCompletion] = []
            for ritual in rituals:
                if not self._is_due(ritual, on_date):
                    continue
                completion = completions.get(ritual.id)
                if completion is not None:
                    completed.append(completion)
                else:
                    scheduled.append(ritual)

            streak = None
            if self._stats_repo is not None:
                streak = self._stats_repo.get(user_id).current_streak

            logger.info(
                f"Schedule for {user_id} on {on_date.isoformat()}: "
                f"{len(scheduled)} scheduled, {len(completed)} completed"
            )
            return ScheduleResult(
                success=True,
                date=on_date,
                scheduled=scheduled,
                completed=completed,
                current_streak=streak,
            )

        except RitualError as e:
            return failure(ScheduleResult, e, logger, "ResolveSchedule")

        except Exception as e:
            logger.exception(f"ResolveSchedule use case failed: {e}")
            return ScheduleResult.internal_error()

    @staticmethod
    def _is_due(ritual: RitualDefinition, on_date: date) -> bool:
        if ritual.created_date is None:
            logger.warning(f"Ritual {ritual.id} has no creation date, skipping")
            return False
        try:
            return occurs_on(ritual.frequency, ritual.created_date, on_date)
        except RitualError as e:
            # A bad stored rule hides one ritual, not the whole schedule
            logger.warning(f"Ritual {ritual.id} has an invalid frequency rule: {e}")
            return False
