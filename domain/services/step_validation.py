"""
Step definition validation at ritual creation/update time.

Part of RIT-17: Typed step definitions

Steps are scanned in order_index order and the first violation raises
InvalidStepDefinitionError carrying the step's position in that order, so the
same input always reports the same error.
"""

import math
from typing import List, Optional, Sequence

from domain.exceptions import InvalidStepDefinitionError
from domain.models.step import (
    LEGAL_SET_FIELDS,
    CounterStep,
    ScaleStep,
    TimerStep,
    WorkoutExercise,
    WorkoutStep,
)
from domain.services.unit_converter import UnitConverter

_default_converter = UnitConverter()


def _fmt(fields) -> str:
    return ", ".join(sorted(fields)) or "none"


def _validate_counter(index: int, step: CounterStep, converter: UnitConverter) -> None:
    config = step.config
    if math.isnan(config.target_count) or math.isinf(config.target_count) or config.target_count < 0:
        raise InvalidStepDefinitionError(index, "counter target_count must be a non-negative number")
    if not converter.knows(config.quantity_key):
        raise InvalidStepDefinitionError(index, f"unknown quantity '{config.quantity_key}'")
    if config.target_seconds is not None:
        if config.target_seconds <= 0:
            raise InvalidStepDefinitionError(index, "counter target_seconds must be positive")
        if not converter.resolve(config.quantity_key).is_time:
            raise InvalidStepDefinitionError(
                index, "target_seconds is only allowed for time quantities"
            )


def _validate_timer(index: int, step: TimerStep) -> None:
    if step.config.target_seconds <= 0:
        raise InvalidStepDefinitionError(index, "timer target_seconds must be positive")


def _validate_scale(index: int, step: ScaleStep) -> None:
    if step.config.min_value >= step.config.max_value:
        raise InvalidStepDefinitionError(
            index,
            f"scale min_value ({step.config.min_value}) must be less than max_value ({step.config.max_value})",
        )


def _validate_exercise(index: int, position: int, workout_exercise: WorkoutExercise) -> None:
    exercise = workout_exercise.exercise
    label = f"exercise {position} ({exercise.name})"
    if not workout_exercise.sets:
        raise InvalidStepDefinitionError(index, f"{label} has no sets")

    legal = LEGAL_SET_FIELDS[exercise.measurement_type]
    for expected_number, workout_set in enumerate(
        sorted(workout_exercise.sets, key=lambda s: s.set_number), start=1
    ):
        if workout_set.set_number != expected_number:
            raise InvalidStepDefinitionError(
                index, f"{label} set numbers must run 1..{len(workout_exercise.sets)}"
            )
        populated = workout_set.populated_fields()
        if populated != legal:
            raise InvalidStepDefinitionError(
                index,
                f"{label} set {expected_number} must carry exactly [{_fmt(legal)}] "
                f"for {exercise.measurement_type.value}, got [{_fmt(populated)}]",
            )
        if workout_set.target_weight_kg is not None and workout_set.target_weight_kg < 0:
            raise InvalidStepDefinitionError(index, f"{label} set {expected_number} weight must be >= 0")
        for name in ("reps", "seconds", "distance_m"):
            value = getattr(workout_set, f"target_{name}")
            if value is not None and value <= 0:
                raise InvalidStepDefinitionError(
                    index, f"{label} set {expected_number} {name} must be positive"
                )


def _validate_workout(index: int, step: WorkoutStep) -> None:
    exercises = step.config.exercises
    if not exercises:
        raise InvalidStepDefinitionError(index, "workout must contain at least one exercise")
    ordered = sorted(exercises, key=lambda we: we.order_index)
    for position, workout_exercise in enumerate(ordered):
        if workout_exercise.order_index != position:
            raise InvalidStepDefinitionError(
                index, f"workout exercise order_index values must run 0..{len(exercises) - 1}"
            )
        _validate_exercise(index, position, workout_exercise)


def validate_step_definitions(
    steps: Sequence,
    converter: Optional[UnitConverter] = None,
) -> List:
    """
    Validate a proposed step list.

    Args:
        steps: StepDefinition instances in any order
        converter: Quantity catalog used to check counter units

    Returns:
        The steps sorted by order_index.

    Raises:
        InvalidStepDefinitionError: On the first violation in order_index order.
    """
    converter = converter or _default_converter
    ordered = sorted(steps, key=lambda s: s.order_index)

    for index, step in enumerate(ordered):
        if step.order_index != index:
            raise InvalidStepDefinitionError(
                index,
                f"order_index values must be a permutation of 0..{len(ordered) - 1} "
                f"(found {step.order_index} at position {index})",
            )
        if not step.name.strip():
            raise InvalidStepDefinitionError(index, "step name is required")

        if isinstance(step, CounterStep):
            _validate_counter(index, step, converter)
        elif isinstance(step, TimerStep):
            _validate_timer(index, step)
        elif isinstance(step, ScaleStep):
            _validate_scale(index, step)
        elif isinstance(step, WorkoutStep):
            _validate_workout(index, step)

    return ordered
