"""
Step definitions: the tagged union of the six step kinds.

Part of RIT-17: Typed step definitions

Each kind is its own model and the `type` literal is the discriminator, so a
StepDefinition is always one of BooleanStep, CounterStep, QnaStep, TimerStep,
ScaleStep or WorkoutStep. Kinds with a payload carry a dedicated config model.

Business rules (contiguous order indexes, scale bounds, set shapes) are
checked by domain.services.step_validation, which reports the offending step
index. The models here only enforce types.
"""

from enum import Enum
from typing import Annotated, List, Literal, Optional, Union

from pydantic import BaseModel, Field


class StepType(str, Enum):
    BOOLEAN = "boolean"
    COUNTER = "counter"
    QNA = "qna"
    TIMER = "timer"
    SCALE = "scale"
    WORKOUT = "workout"


class MeasurementType(str, Enum):
    """How an exercise's sets are measured."""

    WEIGHT_REPS = "weight_reps"
    REPS = "reps"
    TIME = "time"
    DISTANCE_TIME = "distance_time"


# Set fields (without the target_/actual_ prefix) each measurement type uses.
SET_FIELDS = ("weight_kg", "reps", "seconds", "distance_m")

LEGAL_SET_FIELDS = {
    MeasurementType.WEIGHT_REPS: frozenset({"weight_kg", "reps"}),
    MeasurementType.REPS: frozenset({"reps"}),
    MeasurementType.TIME: frozenset({"seconds"}),
    MeasurementType.DISTANCE_TIME: frozenset({"distance_m", "seconds"}),
}


# =============================================================================
# Workout structure
# =============================================================================


class Exercise(BaseModel):
    """Catalog exercise referenced by a workout step."""

    id: Optional[str] = Field(default=None, description="Exercise UUID")
    name: str = Field(..., min_length=1)
    measurement_type: MeasurementType
    body_part: Optional[str] = None
    equipment: List[str] = Field(default_factory=list)

    model_config = {"frozen": True}


class WorkoutSet(BaseModel):
    """Planned set. Only the targets legal for the exercise's measurement type may be set."""

    id: Optional[str] = Field(default=None, description="Workout set UUID")
    set_number: int = Field(..., description="1-based position within the exercise")
    target_weight_kg: Optional[float] = None
    target_reps: Optional[int] = None
    target_seconds: Optional[int] = None
    target_distance_m: Optional[float] = None

    def populated_fields(self) -> frozenset:
        """Set fields (unprefixed) that carry a target value."""
        return frozenset(
            name for name in SET_FIELDS if getattr(self, f"target_{name}") is not None
        )

    model_config = {"frozen": True, "extra": "forbid"}


class WorkoutExercise(BaseModel):
    id: Optional[str] = Field(default=None, description="Workout exercise UUID")
    exercise: Exercise
    order_index: int = 0
    sets: List[WorkoutSet] = Field(default_factory=list)

    @property
    def set_ids(self) -> List[str]:
        return [s.id for s in self.sets if s.id]

    model_config = {"frozen": True}


# =============================================================================
# Per-kind configuration
# =============================================================================


class CounterConfig(BaseModel):
    target_count: float = Field(..., description="Target in canonical SI units")
    quantity_key: str = Field(..., description="PhysicalQuantity key used for display")
    target_seconds: Optional[int] = Field(
        default=None, description="Optional target duration for time-flavored quantities"
    )

    model_config = {"frozen": True, "extra": "forbid"}


class TimerConfig(BaseModel):
    target_seconds: int

    model_config = {"frozen": True, "extra": "forbid"}


class ScaleConfig(BaseModel):
    min_value: int
    max_value: int

    model_config = {"frozen": True, "extra": "forbid"}


class WorkoutConfig(BaseModel):
    exercises: List[WorkoutExercise] = Field(default_factory=list)

    model_config = {"frozen": True}


# =============================================================================
# Step kinds
# =============================================================================


class _StepBase(BaseModel):
    id: Optional[str] = Field(default=None, description="Step definition UUID")
    name: str = Field(..., min_length=1, max_length=200)
    question: Optional[str] = Field(default=None, max_length=500, description="Prompt shown to the user")
    is_required: bool = True
    order_index: int

    model_config = {"frozen": True}


class BooleanStep(_StepBase):
    type: Literal["boolean"] = "boolean"


class QnaStep(_StepBase):
    type: Literal["qna"] = "qna"


class CounterStep(_StepBase):
    type: Literal["counter"] = "counter"
    config: CounterConfig


class TimerStep(_StepBase):
    type: Literal["timer"] = "timer"
    config: TimerConfig


class ScaleStep(_StepBase):
    type: Literal["scale"] = "scale"
    config: ScaleConfig


class WorkoutStep(_StepBase):
    type: Literal["workout"] = "workout"
    config: WorkoutConfig

    def find_set(self, workout_set_id: str) -> Optional[tuple]:
        """Return (exercise, set) for a set id belonging to this step, or None."""
        for workout_exercise in self.config.exercises:
            for workout_set in workout_exercise.sets:
                if workout_set.id == workout_set_id:
                    return workout_exercise.exercise, workout_set
        return None

    @property
    def total_sets(self) -> int:
        return sum(len(we.sets) for we in self.config.exercises)


StepDefinition = Annotated[
    Union[BooleanStep, CounterStep, QnaStep, TimerStep, ScaleStep, WorkoutStep],
    Field(discriminator="type"),
]
