"""
Completion history use case.

Part of RIT-24: Atomic ritual completion

Read-only access to a user's own completions.
"""
import logging
from dataclasses import dataclass, field
from typing import List, Optional

from application.ports import CompletionRepository
from application.use_cases.base import UseCaseResult, check_page, failure
from domain.exceptions import ForbiddenError, NotFoundError, RitualError
from domain.models import RitualCompletion

logger = logging.getLogger(__name__)


@dataclass
class GetCompletionResult(UseCaseResult):
    completion: Optional[RitualCompletion] = None


@dataclass
class ListCompletionsResult(UseCaseResult):
    completions: List[RitualCompletion] = field(default_factory=list)
    count: int = 0
    limit: int = 0
    offset: int = 0


class CompletionHistoryUseCase:
    """List and fetch completions. Users only ever see their own."""

    def __init__(self, completion_repo: CompletionRepository, *, max_page_size: int = 100):
        self._completion_repo = completion_repo
        self._max_page_size = max_page_size

    def list_completions(
        self,
        user_id: str,
        *,
        ritual_id: Optional[str] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> ListCompletionsResult:
        try:
            check_page(limit, offset, self._max_page_size)
            completions = self._completion_repo.list_for_user(
                user_id, ritual_id=ritual_id, limit=limit, offset=offset
            )
            return ListCompletionsResult(
                success=True,
                completions=completions,
                count=len(completions),
                limit=limit,
                offset=offset,
            )
        except RitualError as e:
            return failure(ListCompletionsResult, e, logger, "ListCompletions")
        except Exception as e:
            logger.exception(f"ListCompletions failed: {e}")
            return ListCompletionsResult.internal_error()

    def get_completion(self, user_id: str, completion_id: str) -> GetCompletionResult:
        try:
            completion = self._completion_repo.get(completion_id)
            if completion is None:
                raise NotFoundError("Completion", completion_id)
            if completion.user_id != user_id:
                raise ForbiddenError("Completion belongs to another user", completion_id=completion_id)
            return GetCompletionResult(success=True, completion=completion)
        except RitualError as e:
            return failure(GetCompletionResult, e, logger, "GetCompletion")
        except Exception as e:
            logger.exception(f"GetCompletion failed: {e}")
            return GetCompletionResult.internal_error()
