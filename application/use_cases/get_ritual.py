"""
Get Ritual Use Case.

Part of RIT-20: Ritual management (update, delete, publish)
Part of RIT-23: Public ritual library

Read-side operations on rituals: single ritual, own list, public library,
occurrence listing and per-ritual completion stats.
"""
import logging
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import List, Optional

from application.ports import CompletionRepository, RitualRepository
from application.use_cases.base import (
    UseCaseResult,
    check_page,
    failure,
    load_visible_ritual,
)
from domain.exceptions import InvalidRequestError, RitualError
from domain.models import RitualCategory, RitualCompletion, RitualDefinition
from domain.services import enumerate_occurrences, next_occurrence

logger = logging.getLogger(__name__)

PUBLIC_SORT_FIELDS = ("created_at", "name", "fork_count", "completion_count")
RECENT_COMPLETIONS = 10


@dataclass
class GetRitualResult(UseCaseResult):
    """Result of getting a single ritual."""
    ritual: Optional[RitualDefinition] = None


@dataclass
class ListRitualsResult(UseCaseResult):
    """Result of listing rituals."""
    rituals: List[RitualDefinition] = field(default_factory=list)
    count: int = 0
    limit: int = 0
    offset: int = 0


@dataclass
class OccurrencesResult(UseCaseResult):
    """Occurrence dates of a ritual within a range."""
    ritual_id: Optional[str] = None
    start: Optional[date] = None
    end: Optional[date] = None
    dates: List[date] = field(default_factory=list)
    next_occurrence: Optional[date] = None


@dataclass
class RitualStatsResult(UseCaseResult):
    """Completion stats of one ritual for one user."""
    ritual_id: Optional[str] = None
    total_completions: int = 0
    recent_completions: List[RitualCompletion] = field(default_factory=list)


class GetRitualUseCase:
    """
    Use case for retrieving rituals.

    A ritual is readable by its owner and, once public, by everyone.
    """

    def __init__(
        self,
        ritual_repo: RitualRepository,
        completion_repo: Optional[CompletionRepository] = None,
        *,
        max_page_size: int = 100,
        horizon_days: int = 366,
    ):
        """
        Initialize with required dependencies.

        Args:
            ritual_repo: Repository for ritual persistence
            completion_repo: Repository for completions (needed for stats)
            max_page_size: Upper bound accepted for `limit`
            horizon_days: Longest occurrence range and next-occurrence lookahead
        """
        self._ritual_repo = ritual_repo
        self._completion_repo = completion_repo
        self._max_page_size = max_page_size
        self._horizon_days = horizon_days

    def get_ritual(self, ritual_id: str, user_id: str) -> GetRitualResult:
        """
        Get a single ritual by ID.

        Returns:
            GetRitualResult with the ritual, or not_found / forbidden
        """
        try:
            ritual = load_visible_ritual(self._ritual_repo, ritual_id, user_id)
            return GetRitualResult(success=True, ritual=ritual)
        except RitualError as e:
            return failure(GetRitualResult, e, logger, "GetRitual")
        except Exception as e:
            logger.exception(f"GetRitual failed: {e}")
            return GetRitualResult.internal_error()

    def list_user_rituals(
        self,
        user_id: str,
        *,
        category: Optional[RitualCategory] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> ListRitualsResult:
        """List rituals owned by the user, newest first."""
        try:
            check_page(limit, offset, self._max_page_size)
            rituals = self._ritual_repo.list_for_user(
                user_id, category=category, limit=limit, offset=offset
            )
            return ListRitualsResult(
                success=True, rituals=rituals, count=len(rituals), limit=limit, offset=offset
            )
        except RitualError as e:
            return failure(ListRitualsResult, e, logger, "ListUserRituals")
        except Exception as e:
            logger.exception(f"ListUserRituals failed: {e}")
            return ListRitualsResult.internal_error()

    def list_public_rituals(
        self,
        *,
        search: Optional[str] = None,
        category: Optional[RitualCategory] = None,
        sort_by: str = "created_at",
        sort_order: str = "desc",
        limit: int = 20,
        offset: int = 0,
    ) -> ListRitualsResult:
        """
        Browse the public ritual library.

        Args:
            search: Substring matched against name and description
            category: Optional category filter
            sort_by: One of created_at, name, fork_count, completion_count
            sort_order: asc or desc
            limit: 1..max_page_size
            offset: >= 0

        Returns:
            ListRitualsResult, or invalid_request for bad paging/sorting
        """
        try:
            check_page(limit, offset, self._max_page_size)
            if sort_by not in PUBLIC_SORT_FIELDS:
                raise InvalidRequestError(
                    f"sort_by must be one of {', '.join(PUBLIC_SORT_FIELDS)}", sort_by=sort_by
                )
            if sort_order not in ("asc", "desc"):
                raise InvalidRequestError("sort_order must be asc or desc", sort_order=sort_order)

            search = search.strip() if search else None
            rituals = self._ritual_repo.list_public(
                search=search or None,
                category=category,
                sort_by=sort_by,
                descending=sort_order == "desc",
                limit=limit,
                offset=offset,
            )
            return ListRitualsResult(
                success=True, rituals=rituals, count=len(rituals), limit=limit, offset=offset
            )
        except RitualError as e:
            return failure(ListRitualsResult, e, logger, "ListPublicRituals")
        except Exception as e:
            logger.exception(f"ListPublicRituals failed: {e}")
            return ListRitualsResult.internal_error()

    def get_occurrences(
        self,
        ritual_id: str,
        user_id: str,
        start: date,
        end: Optional[date] = None,
    ) -> OccurrencesResult:
        """
        List occurrence dates in [start, end] plus the next one after end.

        `end` defaults to six days after `start`. The range may not exceed
        the configured horizon.
        """
        try:
            end = end or start + timedelta(days=6)
            if end < start:
                raise InvalidRequestError("end must not be before start", start=str(start), end=str(end))
            if (end - start).days >= self._horizon_days:
                raise InvalidRequestError(
                    f"date range may span at most {self._horizon_days} days",
                    start=str(start),
                    end=str(end),
                )

            ritual = load_visible_ritual(self._ritual_repo, ritual_id, user_id)
            created = ritual.created_date or start
            occurrences = enumerate_occurrences(ritual.frequency, created, start, end)

            return OccurrencesResult(
                success=True,
                ritual_id=ritual_id,
                start=start,
                end=end,
                dates=list(occurrences),
                next_occurrence=next_occurrence(
                    ritual.frequency, created, end, horizon_days=self._horizon_days
                ),
            )
        except RitualError as e:
            return failure(OccurrencesResult, e, logger, "GetOccurrences")
        except Exception as e:
            logger.exception(f"GetOccurrences failed: {e}")
            return OccurrencesResult.internal_error()

    def get_stats(self, ritual_id: str, user_id: str) -> RitualStatsResult:
        """Total completions of the ritual by the user and the most recent ones."""
        try:
            load_visible_ritual(self._ritual_repo, ritual_id, user_id)
            total = self._completion_repo.count_for_ritual(user_id, ritual_id)
            recent = self._completion_repo.list_for_user(
                user_id, ritual_id=ritual_id, limit=RECENT_COMPLETIONS
            )
            return RitualStatsResult(
                success=True,
                ritual_id=ritual_id,
                total_completions=total,
                recent_completions=recent,
            )
        except RitualError as e:
            return failure(RitualStatsResult, e, logger, "GetRitualStats")
        except Exception as e:
            logger.exception(f"GetRitualStats failed: {e}")
            return RitualStatsResult.internal_error()
