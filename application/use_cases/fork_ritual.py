"""
ForkRitual Use Case.

Part of RIT-27: Fork public rituals

A fork is a private copy of a public ritual owned by another user. The copy
and the source's fork_count increment are a single atomic repository call.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from application.ports import RitualRepository
from application.use_cases.base import UseCaseResult, failure
from domain.exceptions import ForbiddenError, NotFoundError, RitualError
from domain.models import RitualDefinition

logger = logging.getLogger(__name__)


@dataclass
class ForkRitualResult(UseCaseResult):
    """Result of the ForkRitual use case execution."""

    ritual: Optional[RitualDefinition] = None
    source_ritual_id: Optional[str] = None


class ForkRitualUseCase:
    """
    Use case for forking rituals.

    Only public rituals can be forked, including by their own owner. The
    repository re-checks visibility under a row lock, so a ritual
    unpublished between the check here and the write is still refused.
    """

    def __init__(self, ritual_repo: RitualRepository) -> None:
        self._ritual_repo = ritual_repo

    def execute(self, original_ritual_id: str, new_owner_id: str) -> ForkRitualResult:
        """
        Fork a public ritual for new_owner_id.

        Returns:
            ForkRitualResult with the new private ritual
        """
        try:
            source = self._ritual_repo.get(original_ritual_id)
            if source is None:
                raise NotFoundError("Ritual", original_ritual_id)
            if not source.is_public:
                raise ForbiddenError(
                    "Only public rituals can be forked", ritual_id=original_ritual_id
                )

            logger.info(f"Forking ritual {original_ritual_id} for {new_owner_id}")
            forked = self._ritual_repo.fork(original_ritual_id, new_owner_id)

            logger.info(f"Ritual {original_ritual_id} forked as {forked.id}")
            return ForkRitualResult(
                success=True, ritual=forked, source_ritual_id=original_ritual_id
            )

        except RitualError as e:
            result = failure(ForkRitualResult, e, logger, "ForkRitual")
            result.source_ritual_id = original_ritual_id
            return result

        except Exception as e:
            logger.exception(f"ForkRitual use case failed: {e}")
            return ForkRitualResult.internal_error()
