"""
Completions router for ritual completion history.

Part of RIT-25: Completion history

This router contains endpoints for:
- /completions - List the caller's completions, newest first
- /completions/{completion_id} - Get one completion with its step responses

Recording a completion lives in the rituals router (/rituals/{id}/complete).
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query

from api.deps import get_completion_history_use_case, get_current_user, get_settings
from api.errors import error_response
from application.use_cases import CompletionHistoryUseCase
from backend.settings import Settings

logger = logging.getLogger(__name__)

router = APIRouter(
    tags=["Completions"],
)


@router.get("/completions")
def list_completions_endpoint(
    ritual_id: Optional[str] = Query(default=None),
    limit: Optional[int] = Query(default=None),
    offset: int = Query(default=0),
    user_id: str = Depends(get_current_user),
    use_case: CompletionHistoryUseCase = Depends(get_completion_history_use_case),
    settings: Settings = Depends(get_settings),
):
    """
    Get completion history for the authenticated user.

    Args:
        ritual_id: Only completions of this ritual
        limit: Max number of records to return
        offset: Number of records to skip for pagination

    Returns:
        List of completions with their step responses
    """
    result = use_case.list_completions(
        user_id,
        ritual_id=ritual_id,
        limit=limit or settings.default_page_size,
        offset=offset,
    )
    if not result.success:
        return error_response(result)
    return {
        "success": True,
        "completions": [c.model_dump(mode="json") for c in result.completions],
        "count": result.count,
        "limit": result.limit,
        "offset": result.offset,
    }


@router.get("/completions/{completion_id}")
def get_completion_endpoint(
    completion_id: str,
    user_id: str = Depends(get_current_user),
    use_case: CompletionHistoryUseCase = Depends(get_completion_history_use_case),
):
    """Get a single completion of the caller."""
    result = use_case.get_completion(user_id, completion_id)
    if not result.success:
        return error_response(result)
    return {"success": True, "completion": result.completion.model_dump(mode="json")}
