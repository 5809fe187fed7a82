"""
RitualCompletion entity.

Part of RIT-18: Typed step responses

A completion is created only by the completion transaction and is immutable
afterwards. At most one exists per (user, ritual, completed_date).
"""

from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from domain.models.response import StepResponse


class RitualCompletion(BaseModel):
    """A recorded instance of a user finishing a ritual on a calendar date."""

    id: Optional[str] = Field(default=None, description="Completion UUID")
    ritual_id: str
    user_id: str
    completed_at: datetime = Field(..., description="Timestamp the completion was recorded")
    completed_date: date = Field(..., description="Calendar date the completion counts for")
    notes: Optional[str] = Field(default=None, max_length=2000)
    step_responses: List[StepResponse] = Field(default_factory=list)

    @property
    def answered_step_count(self) -> int:
        return sum(1 for r in self.step_responses if not r.is_default)

    def __str__(self) -> str:
        return f"Completion(ritual={self.ritual_id}, date={self.completed_date.isoformat()})"

    model_config = {"frozen": True}
