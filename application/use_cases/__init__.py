"""
Application Use Cases for the Rituals API.

Part of RIT-19: Create ritual with steps and frequency
Part of RIT-21: Recurrence model for rituals
Part of RIT-24: Atomic ritual completion
Part of RIT-27: Fork public rituals

This package contains application-level use cases that orchestrate domain
services and repository ports. Use cases are the entry points for business
operations.

Architecture follows Clean Architecture / Hexagonal pattern:
- Use cases orchestrate domain objects and repository ports
- Dependencies are injected via constructors for testability
- Use cases return result dataclasses, never raise

Usage:
    from application.use_cases import (
        ResolveScheduleUseCase,
        CreateRitualUseCase,
        CompleteRitualUseCase,
        ForkRitualUseCase,
    )

    # Today's schedule
    schedule = ResolveScheduleUseCase(ritual_repo, completion_repo).execute(
        user_id="user-123",
        on_date=date.today(),
    )

    # Complete a ritual
    result = CompleteRitualUseCase(ritual_repo, completion_repo).execute(
        user_id="user-123",
        ritual_id="r-1",
        notes="Felt great",
        responses=[...],
        on_date=date.today(),
    )
    if not result.success:
        print(result.error_kind, result.error)
"""

from application.use_cases.base import UseCaseResult
from application.use_cases.complete_ritual import (
    BatchCompleteResult,
    BatchCompletionItem,
    CompleteRitualResult,
    CompleteRitualUseCase,
)
from application.use_cases.completion_history import (
    CompletionHistoryUseCase,
    GetCompletionResult,
    ListCompletionsResult,
)
from application.use_cases.create_ritual import CreateRitualResult, CreateRitualUseCase
from application.use_cases.fork_ritual import ForkRitualResult, ForkRitualUseCase
from application.use_cases.get_ritual import (
    GetRitualResult,
    GetRitualUseCase,
    ListRitualsResult,
    OccurrencesResult,
    RitualStatsResult,
)
from application.use_cases.manage_ritual import (
    DeleteRitualResult,
    DeleteRitualUseCase,
    PublishRitualResult,
    PublishRitualUseCase,
    UpdateRitualResult,
    UpdateRitualUseCase,
)
from application.use_cases.resolve_schedule import ResolveScheduleUseCase, ScheduleResult

__all__ = [
    "UseCaseResult",
    # Schedule
    "ResolveScheduleUseCase",
    "ScheduleResult",
    # Ritual management
    "CreateRitualUseCase",
    "CreateRitualResult",
    "UpdateRitualUseCase",
    "UpdateRitualResult",
    "DeleteRitualUseCase",
    "DeleteRitualResult",
    "PublishRitualUseCase",
    "PublishRitualResult",
    "GetRitualUseCase",
    "GetRitualResult",
    "ListRitualsResult",
    "OccurrencesResult",
    "RitualStatsResult",
    # Completion
    "CompleteRitualUseCase",
    "CompleteRitualResult",
    "BatchCompletionItem",
    "BatchCompleteResult",
    "CompletionHistoryUseCase",
    "GetCompletionResult",
    "ListCompletionsResult",
    # Fork
    "ForkRitualUseCase",
    "ForkRitualResult",
]
