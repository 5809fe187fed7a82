"""
CreateRitual Use Case.

Part of RIT-19: Create ritual with steps and frequency

Validates the frequency rule and the step list before anything is written,
then persists ritual + frequency + steps in one atomic repository call.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from application.ports import RitualRepository
from application.use_cases.base import UseCaseResult, failure
from domain.exceptions import RitualError
from domain.models import RitualDefinition
from domain.services import UnitConverter, validate_rule, validate_step_definitions

logger = logging.getLogger(__name__)


@dataclass
class CreateRitualResult(UseCaseResult):
    """Result of the CreateRitual use case execution."""

    ritual: Optional[RitualDefinition] = None


class CreateRitualUseCase:
    """
    Use case for creating rituals.

    Orchestrates the following workflow:
    1. Validate the frequency rule (InvalidFrequencyRuleError)
    2. Validate the steps in order_index order (InvalidStepDefinitionError)
    3. Reset server-owned fields (ids, counters, fork origin)
    4. Persist atomically via repository

    Usage:
        >>> use_case = CreateRitualUseCase(ritual_repo=ritual_repo)
        >>> result = use_case.execute(owner_id="user-123", definition=ritual)
        >>> if result.success:
        ...     print(f"Created ritual: {result.ritual.id}")
    """

    def __init__(
        self,
        ritual_repo: RitualRepository,
        converter: Optional[UnitConverter] = None,
    ) -> None:
        """
        Initialize the use case with required dependencies.

        Args:
            ritual_repo: Repository for persisting rituals
            converter: Quantity catalog used to check counter steps
        """
        self._ritual_repo = ritual_repo
        self._converter = converter or UnitConverter()

    def execute(self, owner_id: str, definition: RitualDefinition) -> CreateRitualResult:
        """
        Execute the create ritual workflow.

        Args:
            owner_id: User who will own the ritual
            definition: Proposed ritual (ids and counters are ignored)

        Returns:
            CreateRitualResult with the stored ritual
        """
        try:
            validate_rule(definition.frequency)
            steps = validate_step_definitions(definition.steps, self._converter)

            ritual = definition.model_copy(
                update={
                    "id": None,
                    "user_id": owner_id,
                    "forked_from_id": None,
                    "fork_count": 0,
                    "completion_count": 0,
                    "created_at": None,
                    "updated_at": None,
                    "steps": steps,
                }
            )
            logger.info(f"Creating ritual '{ritual.name}' for {owner_id}: {len(steps)} steps, {ritual.frequency}")

            saved = self._ritual_repo.create(ritual)

            logger.info(f"Ritual created: {saved.id}")
            return CreateRitualResult(success=True, ritual=saved)

        except RitualError as e:
            return failure(CreateRitualResult, e, logger, "CreateRitual")

        except Exception as e:
            logger.exception(f"CreateRitual use case failed: {e}")
            return CreateRitualResult.internal_error()
