"""
RitualDefinition aggregate root.

Part of RIT-12: Canonical Ritual domain model

A ritual owns its ordered step definitions and its frequency rule. The
fork_count and completion_count counters are only ever moved by storage-side
increments (fork and completion transactions); the model never mutates them.
"""

import re
from datetime import date, datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from domain.models.frequency import FrequencyRule
from domain.models.step import StepDefinition

_HHMM = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")


class RitualCategory(str, Enum):
    WELLNESS = "wellness"
    FITNESS = "fitness"
    PRODUCTIVITY = "productivity"
    LEARNING = "learning"
    SPIRITUAL = "spiritual"
    SOCIAL = "social"
    OTHER = "other"


class Visibility(str, Enum):
    PRIVATE = "private"
    PUBLIC = "public"


def _validate_gear(v: List[str]) -> List[str]:
    return [item.strip() for item in v if item and item.strip()]


def _validate_scheduled_time(v: Optional[str]) -> Optional[str]:
    if v is None:
        return None
    if not _HHMM.match(v):
        raise ValueError("scheduled_time must be in HH:MM format")
    return v


class RitualDefinition(BaseModel):
    """
    Aggregate root representing a ritual template.

    Examples:
        >>> from domain.models import (
        ...     RitualDefinition, BooleanStep, FrequencyRule, FrequencyType,
        ... )
        >>> ritual = RitualDefinition(
        ...     name="Morning pages",
        ...     category="productivity",
        ...     steps=[BooleanStep(name="Wrote three pages", order_index=0)],
        ...     frequency=FrequencyRule(type=FrequencyType.DAILY),
        ... )
        >>> ritual.is_new
        True
    """

    # Identity
    id: Optional[str] = Field(default=None, description="Ritual UUID. None for unsaved rituals.")
    user_id: Optional[str] = Field(default=None, description="Owner user id")

    # Description
    name: str = Field(..., min_length=1, max_length=200)
    category: RitualCategory = RitualCategory.OTHER
    description: Optional[str] = Field(default=None, max_length=2000)
    location: Optional[str] = Field(default=None, max_length=200)
    gear: List[str] = Field(default_factory=list)
    scheduled_time: Optional[str] = Field(
        default=None, description="Preferred time of day (HH:MM); not used for recurrence"
    )

    # Sharing
    visibility: Visibility = Visibility.PRIVATE
    forked_from_id: Optional[str] = None
    fork_count: int = Field(default=0, ge=0)

    # Usage
    completion_count: int = Field(default=0, ge=0)
    is_active: bool = True

    # Structure
    steps: List[StepDefinition] = Field(default_factory=list)
    frequency: FrequencyRule

    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_validator("gear")
    @classmethod
    def validate_gear(cls, v: List[str]) -> List[str]:
        """Strip blanks from the gear list."""
        return _validate_gear(v)

    @field_validator("scheduled_time")
    @classmethod
    def validate_scheduled_time(cls, v: Optional[str]) -> Optional[str]:
        return _validate_scheduled_time(v)

    # -------------------------------------------------------------------------
    # Computed Properties
    # -------------------------------------------------------------------------

    @property
    def is_new(self) -> bool:
        return self.id is None

    @property
    def is_public(self) -> bool:
        return self.visibility == Visibility.PUBLIC

    @property
    def is_fork(self) -> bool:
        return self.forked_from_id is not None

    @property
    def ordered_steps(self) -> list:
        return sorted(self.steps, key=lambda s: s.order_index)

    @property
    def created_date(self) -> Optional[date]:
        """Calendar date the ritual was created, anchor for recurrence."""
        return self.created_at.date() if self.created_at else None

    # -------------------------------------------------------------------------
    # Access
    # -------------------------------------------------------------------------

    def is_owned_by(self, user_id: Optional[str]) -> bool:
        return user_id is not None and self.user_id == user_id

    def is_visible_to(self, user_id: Optional[str]) -> bool:
        return self.is_public or self.is_owned_by(user_id)

    def __str__(self) -> str:
        parts = [f'"{self.name}"', f"{len(self.steps)} steps", str(self.frequency)]
        if self.is_public:
            parts.append("[public]")
        return f"Ritual({', '.join(parts)})"


class RitualUpdate(BaseModel):
    """Owner-supplied changes. Fields left as None are not touched."""

    name: Optional[str] = Field(default=None, min_length=1, max_length=200)
    category: Optional[RitualCategory] = None
    description: Optional[str] = Field(default=None, max_length=2000)
    location: Optional[str] = Field(default=None, max_length=200)
    gear: Optional[List[str]] = None
    scheduled_time: Optional[str] = None
    is_active: Optional[bool] = None
    steps: Optional[List[StepDefinition]] = None
    frequency: Optional[FrequencyRule] = None

    @field_validator("scheduled_time")
    @classmethod
    def validate_scheduled_time(cls, v: Optional[str]) -> Optional[str]:
        return _validate_scheduled_time(v)

    def changed_fields(self) -> dict:
        """Scalar fields to write on the ritual row (steps/frequency excluded)."""
        return self.model_dump(
            exclude_none=True, exclude={"steps", "frequency"}, mode="json"
        )
