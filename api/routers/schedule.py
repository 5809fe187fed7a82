"""
Schedule router.

Part of RIT-21: Recurrence model for rituals

- GET /schedule?date=YYYY-MM-DD - rituals due on a date, split into
  scheduled (still to do) and completed
"""

import logging
from datetime import date, datetime, timezone
from typing import Optional

from fastapi import APIRouter, Depends, Query

from api.deps import get_current_user, get_resolve_schedule_use_case
from api.errors import error_response
from application.use_cases import ResolveScheduleUseCase

logger = logging.getLogger(__name__)

router = APIRouter(
    tags=["Schedule"],
)


@router.get("/schedule")
def get_schedule_endpoint(
    on_date: Optional[date] = Query(default=None, alias="date"),
    user_id: str = Depends(get_current_user),
    use_case: ResolveScheduleUseCase = Depends(get_resolve_schedule_use_case),
):
    """
    Get the authenticated user's schedule for a day.

    Args:
        on_date: Calendar date (defaults to today, UTC)

    Returns:
        Scheduled rituals, same-day completions and the current streak
    """
    on_date = on_date or datetime.now(timezone.utc).date()
    result = use_case.execute(user_id, on_date)
    if not result.success:
        return error_response(result)

    return {
        "success": True,
        "date": result.date.isoformat(),
        "scheduled": [r.model_dump(mode="json") for r in result.scheduled],
        "completed": [c.model_dump(mode="json") for c in result.completed],
        "current_streak": result.current_streak,
    }
