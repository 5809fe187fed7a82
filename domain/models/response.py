"""
Step responses: the tagged union mirroring StepDefinition.

Part of RIT-18: Typed step responses

Payload fields are optional at the model level so that an incomplete payload
reaches the CompletionValidator and is reported as a malformed response for
the right step, instead of failing request parsing as a whole.
"""

from typing import Annotated, List, Literal, Optional, Union

from pydantic import BaseModel, Field

from domain.models.step import SET_FIELDS


class WorkoutSetResponse(BaseModel):
    """Actuals logged for one planned set."""

    workout_set_id: str = Field(..., min_length=1)
    actual_weight_kg: Optional[float] = Field(default=None, ge=0)
    actual_reps: Optional[int] = Field(default=None, ge=0)
    actual_seconds: Optional[float] = Field(default=None, ge=0)
    actual_distance_m: Optional[float] = Field(default=None, ge=0)

    def populated_fields(self) -> frozenset:
        """Set fields (unprefixed) that carry an actual value."""
        return frozenset(
            name for name in SET_FIELDS if getattr(self, f"actual_{name}") is not None
        )

    model_config = {"frozen": True, "extra": "forbid"}


class _ResponseBase(BaseModel):
    step_definition_id: str = Field(..., min_length=1)
    is_default: bool = Field(
        default=False,
        description="True for placeholders synthesized for skipped optional steps",
    )

    model_config = {"frozen": True, "extra": "forbid"}


class BooleanResponse(_ResponseBase):
    type: Literal["boolean"] = "boolean"
    value_boolean: Optional[bool] = None


class CounterResponse(_ResponseBase):
    type: Literal["counter"] = "counter"
    actual_count: Optional[float] = Field(default=None, ge=0)
    unit: Optional[str] = Field(
        default=None,
        description="Display unit of actual_count; omitted means already in SI",
    )


class QnaResponse(_ResponseBase):
    type: Literal["qna"] = "qna"
    answer: Optional[str] = Field(default=None, max_length=5000)


class TimerResponse(_ResponseBase):
    type: Literal["timer"] = "timer"
    actual_seconds: Optional[float] = Field(default=None, ge=0)


class ScaleResponse(_ResponseBase):
    type: Literal["scale"] = "scale"
    scale_response: Optional[int] = None


class WorkoutResponse(_ResponseBase):
    type: Literal["workout"] = "workout"
    set_responses: Optional[List[WorkoutSetResponse]] = None


StepResponse = Annotated[
    Union[
        BooleanResponse,
        CounterResponse,
        QnaResponse,
        TimerResponse,
        ScaleResponse,
        WorkoutResponse,
    ],
    Field(discriminator="type"),
]


class ValidatedResponses(BaseModel):
    """
    Output of the CompletionValidator: exactly one response per step
    definition, in step order, with SI-normalized counter values.
    """

    responses: List[StepResponse] = Field(default_factory=list)

    @property
    def completed_step_count(self) -> int:
        """Steps the user actually answered; synthesized defaults do not count."""
        return sum(1 for r in self.responses if not r.is_default)

    @property
    def is_qualifying(self) -> bool:
        """A completion counts toward the streak if anything was actually answered."""
        return not self.responses or self.completed_step_count > 0

    @property
    def workout_set_count(self) -> int:
        return sum(
            len(r.set_responses or [])
            for r in self.responses
            if isinstance(r, WorkoutResponse)
        )
