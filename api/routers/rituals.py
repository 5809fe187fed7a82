"""
Rituals router for ritual management, forking and completion.

Part of RIT-19: Create ritual with steps and frequency
Updated in RIT-20: Update, delete, publish and unpublish
Updated in RIT-23: Public ritual library
Updated in RIT-24: Atomic ritual completion
Updated in RIT-27: Fork public rituals

This router contains endpoints for:
- /rituals - List own rituals, create a ritual
- /rituals/public - Browse the public library
- /rituals/batch-complete - Complete several rituals at once
- /rituals/{ritual_id} - Get, update, delete a ritual
- /rituals/{ritual_id}/publish, /unpublish - Change visibility
- /rituals/{ritual_id}/fork - Copy a public ritual into the caller's library
- /rituals/{ritual_id}/occurrences - Occurrence dates in a range
- /rituals/{ritual_id}/stats - Completion stats for the caller
- /rituals/{ritual_id}/complete - Record a completion

IMPORTANT: /rituals/public and /rituals/batch-complete are declared before
/rituals/{ritual_id} so they are not parsed as ritual ids.
"""

import logging
from datetime import date
from typing import List, Literal, Optional

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, ConfigDict, Field

from api.deps import (
    get_complete_ritual_use_case,
    get_create_ritual_use_case,
    get_current_user,
    get_delete_ritual_use_case,
    get_fork_ritual_use_case,
    get_get_ritual_use_case,
    get_publish_ritual_use_case,
    get_settings,
    get_update_ritual_use_case,
)
from api.errors import error_body, error_response
from application.use_cases import (
    BatchCompletionItem,
    CompleteRitualResult,
    CompleteRitualUseCase,
    CreateRitualUseCase,
    DeleteRitualUseCase,
    ForkRitualUseCase,
    GetRitualUseCase,
    PublishRitualUseCase,
    UpdateRitualUseCase,
)
from backend.settings import Settings
from domain.models import (
    FrequencyRule,
    RitualCategory,
    RitualDefinition,
    RitualUpdate,
    StepDefinition,
    StepResponse,
    Visibility,
)

logger = logging.getLogger(__name__)

router = APIRouter(
    tags=["Rituals"],
)


# =============================================================================
# Request/Response Models
# =============================================================================


class CreateRitualRequest(BaseModel):
    """Request for creating a ritual."""
    name: str = Field(..., min_length=1, max_length=200)
    category: RitualCategory = RitualCategory.OTHER
    description: Optional[str] = Field(default=None, max_length=2000)
    location: Optional[str] = Field(default=None, max_length=200)
    gear: List[str] = Field(default_factory=list)
    scheduled_time: Optional[str] = None
    visibility: Visibility = Visibility.PRIVATE
    steps: List[StepDefinition] = Field(default_factory=list)
    frequency: FrequencyRule

    def to_definition(self) -> RitualDefinition:
        return RitualDefinition(
            **self.model_dump(exclude={"steps", "frequency"}),
            steps=self.steps,
            frequency=self.frequency,
        )


class CompleteRitualRequest(BaseModel):
    """Request for completing a ritual."""
    model_config = ConfigDict(populate_by_name=True)

    notes: Optional[str] = Field(default=None, max_length=2000)
    responses: List[StepResponse] = Field(default_factory=list)
    on_date: Optional[date] = Field(
        default=None, alias="date", description="Completion date (default: today, UTC)"
    )


class BatchCompleteItemRequest(CompleteRitualRequest):
    ritual_id: str


class BatchCompleteRequest(BaseModel):
    """Request for completing several rituals; each one commits on its own."""
    items: List[BatchCompleteItemRequest] = Field(..., min_length=1, max_length=50)


def _ritual_payload(ritual: RitualDefinition) -> dict:
    return ritual.model_dump(mode="json")


def _completion_payload(result: CompleteRitualResult) -> dict:
    return {
        "success": True,
        "ritual_id": result.ritual_id,
        "completion": result.completion.model_dump(mode="json"),
        "completed_step_count": result.completed_step_count,
        "total_step_count": result.total_step_count,
        "counts_toward_streak": result.counts_toward_streak,
    }


# =============================================================================
# Collection Endpoints
# =============================================================================


@router.get("/rituals")
def list_rituals_endpoint(
    category: Optional[RitualCategory] = Query(default=None),
    limit: Optional[int] = Query(default=None),
    offset: int = Query(default=0),
    user_id: str = Depends(get_current_user),
    use_case: GetRitualUseCase = Depends(get_get_ritual_use_case),
    settings: Settings = Depends(get_settings),
):
    """
    List the authenticated user's rituals.

    Args:
        category: Optional category filter
        limit: Page size (default DEFAULT_PAGE_SIZE, max MAX_PAGE_SIZE)
        offset: Number of rituals to skip
    """
    result = use_case.list_user_rituals(
        user_id,
        category=category,
        limit=limit or settings.default_page_size,
        offset=offset,
    )
    if not result.success:
        return error_response(result)
    return {
        "success": True,
        "rituals": [_ritual_payload(r) for r in result.rituals],
        "count": result.count,
        "limit": result.limit,
        "offset": result.offset,
    }


@router.get("/rituals/public")
def list_public_rituals_endpoint(
    search: Optional[str] = Query(default=None, max_length=200),
    category: Optional[RitualCategory] = Query(default=None),
    sort_by: str = Query(default="created_at"),
    sort_order: Literal["asc", "desc"] = Query(default="desc"),
    limit: Optional[int] = Query(default=None),
    offset: int = Query(default=0),
    user_id: str = Depends(get_current_user),
    use_case: GetRitualUseCase = Depends(get_get_ritual_use_case),
    settings: Settings = Depends(get_settings),
):
    """
    Browse public rituals.

    Args:
        search: Case-insensitive substring of name or description
        sort_by: created_at, name, fork_count or completion_count
        sort_order: asc or desc
    """
    result = use_case.list_public_rituals(
        search=search,
        category=category,
        sort_by=sort_by,
        sort_order=sort_order,
        limit=limit or settings.default_page_size,
        offset=offset,
    )
    if not result.success:
        return error_response(result)
    return {
        "success": True,
        "rituals": [_ritual_payload(r) for r in result.rituals],
        "count": result.count,
        "limit": result.limit,
        "offset": result.offset,
    }


@router.post("/rituals", status_code=201)
def create_ritual_endpoint(
    request: CreateRitualRequest,
    user_id: str = Depends(get_current_user),
    use_case: CreateRitualUseCase = Depends(get_create_ritual_use_case),
):
    """
    Create a ritual with its steps and frequency rule.

    Steps and frequency are validated before anything is stored; ritual,
    steps and frequency are then written in one transaction.
    """
    result = use_case.execute(user_id, request.to_definition())
    if not result.success:
        return error_response(result)
    return {"success": True, "ritual": _ritual_payload(result.ritual)}


@router.post("/rituals/batch-complete")
def batch_complete_endpoint(
    request: BatchCompleteRequest,
    user_id: str = Depends(get_current_user),
    use_case: CompleteRitualUseCase = Depends(get_complete_ritual_use_case),
):
    """
    Complete several rituals.

    Each item is its own transaction; a failed item does not undo the others.
    Returns per-item outcomes.
    """
    items = [
        BatchCompletionItem(
            ritual_id=item.ritual_id,
            responses=item.responses,
            notes=item.notes,
            on_date=item.on_date,
        )
        for item in request.items
    ]
    batch = use_case.execute_batch(user_id, items)
    return {
        "success": batch.success,
        "succeeded": batch.succeeded,
        "failed": batch.failed,
        "results": [
            _completion_payload(r) if r.success else {**error_body(r), "ritual_id": r.ritual_id}
            for r in batch.results
        ],
    }


# =============================================================================
# Single Ritual Endpoints
# =============================================================================


@router.get("/rituals/{ritual_id}")
def get_ritual_endpoint(
    ritual_id: str,
    user_id: str = Depends(get_current_user),
    use_case: GetRitualUseCase = Depends(get_get_ritual_use_case),
):
    """Get a ritual the caller owns or that is public."""
    result = use_case.get_ritual(ritual_id, user_id)
    if not result.success:
        return error_response(result)
    return {"success": True, "ritual": _ritual_payload(result.ritual)}


@router.patch("/rituals/{ritual_id}")
def update_ritual_endpoint(
    ritual_id: str,
    changes: RitualUpdate,
    user_id: str = Depends(get_current_user),
    use_case: UpdateRitualUseCase = Depends(get_update_ritual_use_case),
):
    """
    Update an owned ritual.

    Omitted fields are left as they are. When steps or frequency are sent
    they replace the current ones.
    """
    result = use_case.execute(ritual_id, user_id, changes)
    if not result.success:
        return error_response(result)
    return {"success": True, "changed": result.changed, "ritual": _ritual_payload(result.ritual)}


@router.delete("/rituals/{ritual_id}")
def delete_ritual_endpoint(
    ritual_id: str,
    user_id: str = Depends(get_current_user),
    use_case: DeleteRitualUseCase = Depends(get_delete_ritual_use_case),
):
    """Delete an owned ritual with its steps, frequency and completions."""
    result = use_case.execute(ritual_id, user_id)
    if not result.success:
        return error_response(result)
    return {"success": True, "ritual_id": result.ritual_id}


@router.post("/rituals/{ritual_id}/publish")
def publish_ritual_endpoint(
    ritual_id: str,
    user_id: str = Depends(get_current_user),
    use_case: PublishRitualUseCase = Depends(get_publish_ritual_use_case),
):
    """Make an owned ritual public."""
    result = use_case.publish(ritual_id, user_id)
    if not result.success:
        return error_response(result)
    return {"success": True, "ritual": _ritual_payload(result.ritual)}


@router.post("/rituals/{ritual_id}/unpublish")
def unpublish_ritual_endpoint(
    ritual_id: str,
    user_id: str = Depends(get_current_user),
    use_case: PublishRitualUseCase = Depends(get_publish_ritual_use_case),
):
    """Make an owned ritual private again. Existing forks are unaffected."""
    result = use_case.unpublish(ritual_id, user_id)
    if not result.success:
        return error_response(result)
    return {"success": True, "ritual": _ritual_payload(result.ritual)}


@router.post("/rituals/{ritual_id}/fork", status_code=201)
def fork_ritual_endpoint(
    ritual_id: str,
    user_id: str = Depends(get_current_user),
    use_case: ForkRitualUseCase = Depends(get_fork_ritual_use_case),
):
    """Copy a public ritual into the caller's library as a private ritual."""
    result = use_case.execute(ritual_id, user_id)
    if not result.success:
        return error_response(result)
    return {
        "success": True,
        "source_ritual_id": result.source_ritual_id,
        "ritual": _ritual_payload(result.ritual),
    }


@router.get("/rituals/{ritual_id}/occurrences")
def get_occurrences_endpoint(
    ritual_id: str,
    start: date = Query(...),
    end: Optional[date] = Query(default=None),
    user_id: str = Depends(get_current_user),
    use_case: GetRitualUseCase = Depends(get_get_ritual_use_case),
):
    """List the dates in [start, end] on which the ritual occurs."""
    result = use_case.get_occurrences(ritual_id, user_id, start, end)
    if not result.success:
        return error_response(result)
    return {
        "success": True,
        "ritual_id": result.ritual_id,
        "start": result.start.isoformat(),
        "end": result.end.isoformat(),
        "dates": [d.isoformat() for d in result.dates],
        "next_occurrence": result.next_occurrence.isoformat() if result.next_occurrence else None,
    }


@router.get("/rituals/{ritual_id}/stats")
def get_ritual_stats_endpoint(
    ritual_id: str,
    user_id: str = Depends(get_current_user),
    use_case: GetRitualUseCase = Depends(get_get_ritual_use_case),
):
    """Total completions of the ritual by the caller and the latest ten."""
    result = use_case.get_stats(ritual_id, user_id)
    if not result.success:
        return error_response(result)
    return {
        "success": True,
        "ritual_id": result.ritual_id,
        "total_completions": result.total_completions,
        "recent_completions": [c.model_dump(mode="json") for c in result.recent_completions],
    }


@router.post("/rituals/{ritual_id}/complete", status_code=201)
def complete_ritual_endpoint(
    ritual_id: str,
    request: CompleteRitualRequest,
    user_id: str = Depends(get_current_user),
    use_case: CompleteRitualUseCase = Depends(get_complete_ritual_use_case),
):
    """
    Record a completion of a ritual.

    Responses are validated against the ritual's steps; optional steps left
    out get a neutral default. A second completion for the same date is
    rejected with 409 and changes nothing.
    """
    result = use_case.execute(user_id, ritual_id, request.notes, request.responses, request.on_date)
    if not result.success:
        return error_response(result)
    return _completion_payload(result)
