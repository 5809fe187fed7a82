"""
Owner-only ritual management use cases.

Part of RIT-20: Ritual management (update, delete, publish)

- UpdateRitualUseCase: change fields, replace steps/frequency in place
- DeleteRitualUseCase: delete with cascade
- PublishRitualUseCase: switch visibility between private and public
"""

import logging
from dataclasses import dataclass
from typing import Optional

from application.ports import RitualRepository
from application.use_cases.base import UseCaseResult, failure, load_owned_ritual
from domain.exceptions import ConflictError, RitualError
from domain.models import RitualDefinition, RitualUpdate, Visibility
from domain.services import UnitConverter, validate_rule, validate_step_definitions

logger = logging.getLogger(__name__)


@dataclass
class UpdateRitualResult(UseCaseResult):
    ritual: Optional[RitualDefinition] = None
    changed: bool = False


@dataclass
class DeleteRitualResult(UseCaseResult):
    ritual_id: Optional[str] = None


@dataclass
class PublishRitualResult(UseCaseResult):
    ritual: Optional[RitualDefinition] = None


class UpdateRitualUseCase:
    """
    Apply owner-supplied changes to a ritual.

    When steps or frequency are supplied they are validated exactly as on
    creation and replaced in the same atomic call as the field changes.
    """

    def __init__(
        self,
        ritual_repo: RitualRepository,
        converter: Optional[UnitConverter] = None,
    ) -> None:
        self._ritual_repo = ritual_repo
        self._converter = converter or UnitConverter()

    def execute(self, ritual_id: str, user_id: str, changes: RitualUpdate) -> UpdateRitualResult:
        try:
            current = load_owned_ritual(self._ritual_repo, ritual_id, user_id)

            steps = None
            if changes.steps is not None:
                steps = validate_step_definitions(changes.steps, self._converter)
            if changes.frequency is not None:
                validate_rule(changes.frequency)

            fields = changes.changed_fields()
            if not fields and steps is None and changes.frequency is None:
                return UpdateRitualResult(success=True, ritual=current, changed=False)

            logger.info(
                f"Updating ritual {ritual_id}: fields={sorted(fields)} "
                f"steps={'replaced' if steps is not None else 'kept'} "
                f"frequency={'replaced' if changes.frequency is not None else 'kept'}"
            )
            updated = self._ritual_repo.update(
                ritual_id, fields, steps=steps, frequency=changes.frequency
            )
            return UpdateRitualResult(success=True, ritual=updated, changed=True)

        except RitualError as e:
            return failure(UpdateRitualResult, e, logger, "UpdateRitual")

        except Exception as e:
            logger.exception(f"UpdateRitual use case failed: {e}")
            return UpdateRitualResult.internal_error()


class DeleteRitualUseCase:
    """Delete an owned ritual; steps, frequency and completions cascade."""

    def __init__(self, ritual_repo: RitualRepository) -> None:
        self._ritual_repo = ritual_repo

    def execute(self, ritual_id: str, user_id: str) -> DeleteRitualResult:
        try:
            load_owned_ritual(self._ritual_repo, ritual_id, user_id)
            self._ritual_repo.delete(ritual_id)
            logger.info(f"Ritual deleted: {ritual_id}")
            return DeleteRitualResult(success=True, ritual_id=ritual_id)

        except RitualError as e:
            return failure(DeleteRitualResult, e, logger, "DeleteRitual")

        except Exception as e:
            logger.exception(f"DeleteRitual use case failed: {e}")
            return DeleteRitualResult.internal_error()


class PublishRitualUseCase:
    """
    Publish or unpublish an owned ritual.

    Requesting the visibility a ritual already has is a ConflictError.
    Unpublishing does not affect existing forks.
    """

    def __init__(self, ritual_repo: RitualRepository) -> None:
        self._ritual_repo = ritual_repo

    def execute(self, ritual_id: str, user_id: str, visibility: Visibility) -> PublishRitualResult:
        try:
            ritual = load_owned_ritual(self._ritual_repo, ritual_id, user_id)
            if ritual.visibility == visibility:
                raise ConflictError(
                    f"Ritual is already {visibility.value}",
                    ritual_id=ritual_id,
                    visibility=visibility.value,
                )

            updated = self._ritual_repo.set_visibility(ritual_id, visibility)
            logger.info(f"Ritual {ritual_id} is now {visibility.value}")
            return PublishRitualResult(success=True, ritual=updated)

        except RitualError as e:
            return failure(PublishRitualResult, e, logger, "PublishRitual")

        except Exception as e:
            logger.exception(f"PublishRitual use case failed: {e}")
            return PublishRitualResult.internal_error()

    def publish(self, ritual_id: str, user_id: str) -> PublishRitualResult:
        return self.execute(ritual_id, user_id, Visibility.PUBLIC)

    def unpublish(self, ritual_id: str, user_id: str) -> PublishRitualResult:
        return self.execute(ritual_id, user_id, Visibility.PRIVATE)
