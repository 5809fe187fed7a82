"""
FrequencyRule value object.

Part of RIT-21: Recurrence model for rituals

Structural validation only lives here (types, ranges). Whether the populated
fields match the rule type is checked by
domain.services.recurrence.validate_rule so that callers get an
InvalidFrequencyRuleError instead of a pydantic ValidationError.
"""

from datetime import date
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator


class FrequencyType(str, Enum):
    """
    How a ritual recurs.

    - ONCE: only on the ritual's creation date
    - DAILY: every `interval` days from the creation date
    - WEEKLY: on `days_of_week`, every `interval` weeks
    - CUSTOM: exactly on `specific_dates`
    """

    ONCE = "once"
    DAILY = "daily"
    WEEKLY = "weekly"
    CUSTOM = "custom"


class FrequencyRule(BaseModel):
    """
    Recurrence rule of a ritual.

    `days_of_week` uses 0=Sunday ... 6=Saturday.

    Examples:
        >>> FrequencyRule(type=FrequencyType.DAILY, interval=3)
        >>> FrequencyRule(type=FrequencyType.WEEKLY, days_of_week=[1, 3, 5])
        >>> FrequencyRule(
        ...     type=FrequencyType.CUSTOM,
        ...     specific_dates=[date(2024, 3, 1), date(2024, 3, 15)],
        ... )
    """

    type: FrequencyType = Field(..., description="Recurrence type")
    interval: int = Field(default=1, ge=1, description="Every N days (daily) or N weeks (weekly)")
    days_of_week: Optional[List[int]] = Field(
        default=None, description="Weekdays for weekly rules, 0=Sunday"
    )
    specific_dates: Optional[List[date]] = Field(
        default=None, description="Exact dates for custom rules"
    )
    exclude_dates: List[date] = Field(
        default_factory=list, description="Dates on which the rule never occurs"
    )

    @field_validator("days_of_week")
    @classmethod
    def normalize_days(cls, v: Optional[List[int]]) -> Optional[List[int]]:
        """Sort and deduplicate weekdays."""
        if v is None:
            return None
        return sorted(set(v))

    @field_validator("specific_dates")
    @classmethod
    def normalize_dates(cls, v: Optional[List[date]]) -> Optional[List[date]]:
        """Specific dates behave as an ordered set."""
        if v is None:
            return None
        return sorted(set(v))

    @field_validator("exclude_dates")
    @classmethod
    def normalize_excludes(cls, v: List[date]) -> List[date]:
        return sorted(set(v))

    def __str__(self) -> str:
        if self.type == FrequencyType.DAILY:
            return "daily" if self.interval == 1 else f"every {self.interval} days"
        if self.type == FrequencyType.WEEKLY:
            days = ",".join(str(d) for d in self.days_of_week or [])
            every = "weekly" if self.interval == 1 else f"every {self.interval} weeks"
            return f"{every} on [{days}]"
        if self.type == FrequencyType.CUSTOM:
            return f"on {len(self.specific_dates or [])} dates"
        return "once"

    model_config = {
        "frozen": True,
        "json_schema_extra": {
            "examples": [
                {"type": "daily", "interval": 1},
                {"type": "weekly", "interval": 2, "days_of_week": [1, 3, 5]},
                {"type": "custom", "specific_dates": ["2024-03-01", "2024-03-15"]},
            ]
        },
    }
