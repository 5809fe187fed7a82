"""
Domain models for the Rituals API.

This package contains pure domain models that are independent of
infrastructure concerns (database, API, external services).

These models represent the core business concepts:
- RitualDefinition: The aggregate root owning steps and a frequency rule
- StepDefinition: Tagged union of the six step kinds
- StepResponse: Tagged union mirroring StepDefinition for completions
- FrequencyRule: Recurrence rule evaluated by the recurrence resolver
- PhysicalQuantity: Display unit with its SI conversion
- RitualCompletion: An immutable record of a ritual done on a date
- UserStats: Per-user streak counters

Usage:
    >>> from domain.models import (
    ...     RitualDefinition, BooleanStep, QnaStep, FrequencyRule, FrequencyType,
    ... )

    >>> ritual = RitualDefinition(
    ...     name="Evening review",
    ...     steps=[
    ...         BooleanStep(name="Phone away", order_index=0),
    ...         QnaStep(name="Best moment", order_index=1, is_required=False),
    ...     ],
    ...     frequency=FrequencyRule(type=FrequencyType.DAILY),
    ... )

    >>> json_str = ritual.model_dump_json(indent=2)
    >>> ritual = RitualDefinition.model_validate_json(json_str)
"""

from domain.models.completion import RitualCompletion
from domain.models.frequency import FrequencyRule, FrequencyType
from domain.models.quantity import (
    DEFAULT_QUANTITIES,
    Dimension,
    PhysicalQuantity,
    build_catalog,
)
from domain.models.response import (
    BooleanResponse,
    CounterResponse,
    QnaResponse,
    ScaleResponse,
    StepResponse,
    TimerResponse,
    ValidatedResponses,
    WorkoutResponse,
    WorkoutSetResponse,
)
from domain.models.ritual import (
    RitualCategory,
    RitualDefinition,
    RitualUpdate,
    Visibility,
)
from domain.models.step import (
    LEGAL_SET_FIELDS,
    BooleanStep,
    CounterConfig,
    CounterStep,
    Exercise,
    MeasurementType,
    QnaStep,
    ScaleConfig,
    ScaleStep,
    StepDefinition,
    StepType,
    TimerConfig,
    TimerStep,
    WorkoutConfig,
    WorkoutExercise,
    WorkoutSet,
    WorkoutStep,
)
from domain.models.user_stats import UserStats

__all__ = [
    # Aggregates and entities
    "RitualDefinition",
    "RitualUpdate",
    "RitualCompletion",
    "UserStats",
    # Frequency
    "FrequencyRule",
    "FrequencyType",
    # Steps
    "StepDefinition",
    "BooleanStep",
    "CounterStep",
    "QnaStep",
    "TimerStep",
    "ScaleStep",
    "WorkoutStep",
    "CounterConfig",
    "TimerConfig",
    "ScaleConfig",
    "WorkoutConfig",
    "Exercise",
    "WorkoutExercise",
    "WorkoutSet",
    "LEGAL_SET_FIELDS",
    # Responses
    "StepResponse",
    "BooleanResponse",
    "CounterResponse",
    "QnaResponse",
    "TimerResponse",
    "ScaleResponse",
    "WorkoutResponse",
    "WorkoutSetResponse",
    "ValidatedResponses",
    # Quantities
    "PhysicalQuantity",
    "DEFAULT_QUANTITIES",
    "build_catalog",
    # Enums
    "RitualCategory",
    "Visibility",
    "StepType",
    "MeasurementType",
    "Dimension",
]
