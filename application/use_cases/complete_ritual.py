"""
CompleteRitual Use Case.

Part of RIT-24: Atomic ritual completion

Orchestrates the completion transaction:
1. Load the ritual (NotFound if absent, Forbidden if private and not owned)
2. Validate responses against the current steps (domain errors propagate)
3. One atomic repository call: duplicate check, completion + responses +
   per-set rows, completion_count + 1, streak increment when qualifying

Nothing is written when steps 1-2 fail, and the repository call either
commits everything or nothing.
"""

import logging
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from typing import List, Optional, Sequence

from application.ports import CompletionRepository, RitualRepository
from application.use_cases.base import UseCaseResult, failure, load_visible_ritual
from domain.exceptions import RitualError
from domain.models import RitualCompletion
from domain.services import UnitConverter, validate_completion

logger = logging.getLogger(__name__)


@dataclass
class CompleteRitualResult(UseCaseResult):
    """Result of the CompleteRitual use case execution."""

    ritual_id: Optional[str] = None
    completion: Optional[RitualCompletion] = None
    completed_step_count: int = 0
    total_step_count: int = 0
    counts_toward_streak: bool = False


@dataclass
class BatchCompletionItem:
    """One ritual to complete in a batch request."""

    ritual_id: str
    responses: Sequence = field(default_factory=list)
    notes: Optional[str] = None
    on_date: Optional[date] = None


@dataclass
class BatchCompleteResult:
    """Per-item outcomes of a batch completion. Items succeed or fail independently."""

    results: List[CompleteRitualResult] = field(default_factory=list)

    @property
    def succeeded(self) -> int:
        return sum(1 for r in self.results if r.success)

    @property
    def failed(self) -> int:
        return len(self.results) - self.succeeded

    @property
    def success(self) -> bool:
        return self.failed == 0


class CompleteRitualUseCase:
    """
    Use case for recording ritual completions.

    Usage:
        >>> use_case = CompleteRitualUseCase(ritual_repo, completion_repo)
        >>> result = use_case.execute(
        ...     user_id="user-123",
        ...     ritual_id="r-1",
        ...     notes=None,
        ...     responses=[BooleanResponse(step_definition_id="s-1", value_boolean=True)],
        ...     on_date=date(2024, 3, 4),
        ... )
        >>> result.error_kind
        None
    """

    def __init__(
        self,
        ritual_repo: RitualRepository,
        completion_repo: CompletionRepository,
        converter: Optional[UnitConverter] = None,
    ) -> None:
        """
        Initialize the use case with required dependencies.

        Args:
            ritual_repo: Repository for loading the ritual and its steps
            completion_repo: Repository performing the atomic write
            converter: Quantity catalog for counter unit conversion
        """
        self._ritual_repo = ritual_repo
        self._completion_repo = completion_repo
        self._converter = converter or UnitConverter()

    def execute(
        self,
        user_id: str,
        ritual_id: str,
        notes: Optional[str],
        responses: Sequence,
        on_date: Optional[date] = None,
    ) -> CompleteRitualResult:
        """
        Execute the completion workflow.

        Args:
            user_id: User completing the ritual
            ritual_id: Ritual being completed
            notes: Optional free-text notes
            responses: Candidate StepResponse instances
            on_date: Calendar date the completion counts for (default: today, UTC)

        Returns:
            CompleteRitualResult with the stored completion
        """
        try:
            completed_at = datetime.now(timezone.utc)
            on_date = on_date or completed_at.date()

            ritual = load_visible_ritual(self._ritual_repo, ritual_id, user_id)
            steps = ritual.ordered_steps
            validated = validate_completion(steps, responses, self._converter)

            completion = RitualCompletion(
                ritual_id=ritual_id,
                user_id=user_id,
                completed_at=completed_at,
                completed_date=on_date,
                notes=notes,
                step_responses=validated.responses,
            )
            logger.info(
                f"Completing ritual {ritual_id} for {user_id} on {on_date.isoformat()}: "
                f"{validated.completed_step_count}/{len(steps)} steps answered, "
                f"{validated.workout_set_count} sets"
            )

            saved = self._completion_repo.record_completion(
                completion, qualifying=validated.is_qualifying
            )

            logger.info(f"Completion recorded: {saved.id}")
            return CompleteRitualResult(
                success=True,
                ritual_id=ritual_id,
                completion=saved,
                completed_step_count=validated.completed_step_count,
                total_step_count=len(steps),
                counts_toward_streak=validated.is_qualifying,
            )

        except RitualError as e:
            result = failure(CompleteRitualResult, e, logger, "CompleteRitual")
            result.ritual_id = ritual_id
            return result

        except Exception as e:
            logger.exception(f"CompleteRitual use case failed: {e}")
            result = CompleteRitualResult.internal_error()
            result.ritual_id = ritual_id
            return result

    def execute_batch(
        self,
        user_id: str,
        items: Sequence[BatchCompletionItem],
    ) -> BatchCompleteResult:
        """
        Complete several rituals, each in its own transaction.

        A failing item does not roll back the others.
        """
        logger.info(f"Batch completion for {user_id}: {len(items)} rituals")
        results = [
            self.execute(user_id, item.ritual_id, item.notes, item.responses, item.on_date)
            for item in items
        ]
        batch = BatchCompleteResult(results=results)
        if batch.failed:
            logger.warning(f"Batch completion for {user_id}: {batch.failed} of {len(items)} failed")
        return batch
