"""
Per-user streak counters.

Part of RIT-26: Streak tracking
"""

from datetime import date
from typing import Optional

from pydantic import BaseModel, Field


class UserStats(BaseModel):
    """Streak state for one user."""

    user_id: str
    current_streak: int = Field(default=0, ge=0)
    longest_streak: int = Field(default=0, ge=0)
    last_streak_date: Optional[date] = Field(
        default=None, description="Calendar date of the last streak increment"
    )

    model_config = {"frozen": True}
